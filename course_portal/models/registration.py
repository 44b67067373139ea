# course_portal/models/registration.py - Registration ledger
from __future__ import annotations
import enum
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from course_portal.models.base import Base


class RegistrationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Registration(Base):
    """
    One student's attempt to enroll in a course for a term.

    semester/year duplicate the course's own term on purpose; the copy stored
    here is what the one-row-per-tuple rule is checked against.
    """
    __tablename__ = "registrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    semester: Mapped[str] = mapped_column(String(16), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=RegistrationStatus.PENDING.value)
    registration_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now())

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    student_profile: Mapped["StudentProfile"] = relationship("StudentProfile", back_populates="registrations")
    course: Mapped["Course"] = relationship("Course", back_populates="registrations")

    __table_args__ = (
        # One row per (student, course, term), whatever its status
        Index("uq_registration_student_course_term", "student_profile_id", "course_id", "semester", "year", unique=True),
        CheckConstraint("status IN ('pending','approved','rejected','withdrawn')", name="ck_registration_status"),
        CheckConstraint("semester IN ('fall','spring','summer')", name="ck_registration_semester"),
    )

    def __repr__(self):
        return f"<Registration(id={self.id}, profile={self.student_profile_id}, course={self.course_id}, status={self.status})>"
