# course_portal/api/deps/auth.py - Bearer authentication and role checks
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Dict, Any

from course_portal.core.db import get_db
from course_portal.core.security import decode_token
from course_portal.models.student_profile import StudentProfile
from course_portal.models.user import User
from course_portal.services.profile_service import get_student_profile

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Decode JWT and return user + claims.
    Returns: {"user": User, "claims": dict}
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_token(credentials.credentials)

    try:
        user_id = int(claims.get("sub", ""))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "user": user,
        "claims": claims
    }


def require_admin(ctx: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """Require the admin role"""
    if not ctx["user"].is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return ctx


def get_current_profile(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> StudentProfile:
    """Student profile of the caller; registration routes act on it only"""
    profile = get_student_profile(db, ctx["user"].id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student profile not found"
        )
    return profile
