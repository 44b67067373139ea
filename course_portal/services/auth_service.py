# course_portal/services/auth_service.py - Authentication business logic
from sqlalchemy.orm import Session
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
from typing import Tuple
import logging

from course_portal.core.db import run_atomic
from course_portal.core.errors import AuthenticationError, ConflictError
from course_portal.core.security import hash_password, verify_password, token_manager
from course_portal.models.user import User, UserRole
from course_portal.models.student_profile import StudentProfile
from course_portal.schemas.auth import RegisterIn

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Service class for authentication operations"""

    def __init__(self, db: Session):
        self.db = db

    def register(self, data: RegisterIn) -> Tuple[User, str]:
        """
        Create a student account together with its profile.

        Args:
            data: Validated sign-up payload

        Returns:
            (created User, access token)

        Raises:
            ConflictError: If the email or the student id is already taken
        """
        email = data.email.lower().strip()

        def _register(db: Session) -> User:
            if db.execute(select(User.id).where(User.email == email)).first():
                raise ConflictError("Email already registered")
            if db.execute(
                select(StudentProfile.id).where(StudentProfile.student_id == data.student_id)
            ).first():
                raise ConflictError("Student ID already exists")

            user = User(
                email=email,
                password_hash=hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                role=UserRole.STUDENT.value,
            )
            user.student_profile = StudentProfile(
                student_id=data.student_id,
                date_of_birth=data.date_of_birth,
                phone=data.phone,
                address=data.address,
                emergency_contact_name=data.emergency_contact_name,
                emergency_contact_phone=data.emergency_contact_phone,
            )
            db.add(user)
            try:
                db.flush()
            except IntegrityError as e:
                raise ConflictError("Email or student ID already registered") from e
            return user

        user = run_atomic(self.db, _register, name="register")
        self.db.refresh(user)

        logger.info(f"User registered: {email} (student id {data.student_id})")
        return user, self.create_token_for_user(user)

    def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials and record the login.

        An unknown email and a wrong password fail with the same message.
        """
        email = email.lower().strip()

        user = self.db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for {email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        def _record_login(db: Session):
            db.execute(
                update(User)
                .where(User.id == user.id)
                .values(last_login=datetime.now(timezone.utc).replace(tzinfo=None))
                .execution_options(synchronize_session=False)
            )

        run_atomic(self.db, _record_login, name="record login")
        self.db.refresh(user)

        logger.info(f"User authenticated: {email}")
        return user

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = self.authenticate_user(email, password)
        return user, self.create_token_for_user(user)

    @staticmethod
    def create_token_for_user(user: User) -> str:
        return token_manager.create_access_token(
            subject=user.id,
            additional_claims={"email": user.email, "role": user.role},
        )
