# course_portal/models/student_profile.py - Student identity and contact details
from __future__ import annotations
from datetime import date, datetime
from sqlalchemy import String, Date, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from course_portal.models.base import Base

# Fields a student may change after sign-up; identity fields are fixed
CONTACT_FIELDS = ("phone", "address", "emergency_contact_name", "emergency_contact_phone")


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    student_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)

    phone: Mapped[str | None] = mapped_column(String(32))
    address: Mapped[str | None] = mapped_column(String(255))
    emergency_contact_name: Mapped[str | None] = mapped_column(String(128))
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(32))

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    user: Mapped["User"] = relationship("User", back_populates="student_profile")
    registrations: Mapped[list["Registration"]] = relationship("Registration", back_populates="student_profile")
