from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)
    phone: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TermsSignature(BaseModel):
    signature_name: str = Field(..., min_length=1, description="Full name typed as the digital signature")

class UserResponse(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: str
    phone: Optional[str] = None
    is_approved: bool
    has_signed_terms: bool
    terms_signed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
