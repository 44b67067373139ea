# course_portal/schemas/auth.py - Account registration and login schemas
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional

from course_portal.core.config import settings
from course_portal.models.user import UserRole


class RegisterIn(BaseModel):
    email: EmailStr
    password: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    student_id: str = Field(..., min_length=1, max_length=32)
    date_of_birth: date
    phone: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = Field(default=None, max_length=255)
    emergency_contact_name: Optional[str] = Field(default=None, max_length=128)
    emergency_contact_phone: Optional[str] = Field(default=None, max_length=32)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "john.doe@student.edu",
                "password": "secret123",
                "first_name": "John",
                "last_name": "Doe",
                "student_id": "STU123456",
                "date_of_birth": "2004-01-15",
                "phone": "+1 (555) 123-4567",
            }
        }
    )

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long")
        return v

    @field_validator("first_name", "last_name", "student_id")
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Value cannot be blank")
        return v.strip()

    @field_validator("phone", "address", "emergency_contact_name", "emergency_contact_phone")
    @classmethod
    def blank_to_none(cls, v):
        # empty form inputs arrive as ""
        if v is not None and not v.strip():
            return None
        return v


class LoginIn(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class AuthOut(BaseModel):
    user: UserOut
    access_token: str
    token_type: str = "bearer"
