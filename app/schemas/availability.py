# app/schemas/availability.py
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date

class SlotsAdd(BaseModel):
    dates: List[date] = Field(..., min_length=1, description="One or more dates to publish the slots on")
    slots: List[str] = Field(..., min_length=1, description="Times as HH:MM or H:MM AM/PM")

class SlotsReplace(BaseModel):
    slots: List[str]

class DaySlotsResponse(BaseModel):
    scope: str
    date: date
    slots: List[str]

class RangeSlotsResponse(BaseModel):
    scope: str
    start: date
    end: date
    days: Dict[str, List[str]]

class SlotsAddResponse(BaseModel):
    scope: str
    days: Dict[str, List[str]]

class DeleteResponse(BaseModel):
    ok: bool = True
    deleted: bool
    technician_id: Optional[str] = None
