# course_portal/models/course.py - Course catalog with capacity counters
from __future__ import annotations
import enum
from datetime import datetime
from sqlalchemy import String, Text, Integer, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from course_portal.models.base import Base


class Semester(str, enum.Enum):
    FALL = "fall"
    SPRING = "spring"
    SUMMER = "summer"


class Course(Base):
    """
    A course offering for one term.

    ``current_enrollment`` is only ever changed by the enrollment accountant
    (course_portal.services.enrollment), inside the same transaction as the
    registration status change that caused it.
    """
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)
    semester: Mapped[str] = mapped_column(String(16), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    max_enrollment: Mapped[int] = mapped_column(Integer, nullable=False)
    current_enrollment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    registrations: Mapped[list["Registration"]] = relationship("Registration", back_populates="course")

    __table_args__ = (
        CheckConstraint("semester IN ('fall','spring','summer')", name="ck_course_semester"),
        CheckConstraint("credits > 0", name="ck_course_credits_positive"),
        CheckConstraint("max_enrollment > 0", name="ck_course_max_enrollment_positive"),
        CheckConstraint(
            "current_enrollment >= 0 AND current_enrollment <= max_enrollment",
            name="ck_course_enrollment_within_capacity",
        ),
    )

    @property
    def is_full(self) -> bool:
        return self.current_enrollment >= self.max_enrollment

    @property
    def seats_left(self) -> int:
        return max(self.max_enrollment - self.current_enrollment, 0)

    def __repr__(self):
        return f"<Course(id={self.id}, code='{self.code}', {self.current_enrollment}/{self.max_enrollment})>"
