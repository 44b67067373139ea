# course_portal/schemas/profile.py
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class StudentProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    student_id: str
    date_of_birth: date
    phone: Optional[str]
    address: Optional[str]
    emergency_contact_name: Optional[str]
    emergency_contact_phone: Optional[str]
    created_at: datetime
    updated_at: datetime


class StudentProfileUpdate(BaseModel):
    """
    Partial update of contact fields.

    A field left out of the request is not touched; an explicit null clears it.
    Identity fields (student_id, date_of_birth) are rejected.
    """
    model_config = ConfigDict(extra="forbid")

    phone: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = Field(default=None, max_length=255)
    emergency_contact_name: Optional[str] = Field(default=None, max_length=128)
    emergency_contact_phone: Optional[str] = Field(default=None, max_length=32)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
