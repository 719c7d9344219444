# app/schemas/admin.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class UserListItem(BaseModel):
    id: int
    email: str
    name: str
    role: str
    is_approved: bool
    has_signed_terms: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CleanupResponse(BaseModel):
    accounts_fixed: int
    messages: List[str]
