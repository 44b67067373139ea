# course_portal/api/routers/auth.py - Sign-up, login and current user
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, Any
import logging

from course_portal.core.db import get_db
from course_portal.api.deps.auth import get_current_user
from course_portal.schemas.auth import RegisterIn, LoginIn, AuthOut, UserOut
from course_portal.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
async def register(user_data: RegisterIn, db: Session = Depends(get_db)):
    """Register a student account and its profile"""
    user, token = AuthService(db).register(user_data)
    return AuthOut(user=UserOut.model_validate(user), access_token=token)


@router.post("/login", response_model=AuthOut)
async def login(credentials: LoginIn, db: Session = Depends(get_db)):
    user, token = AuthService(db).login(credentials.email, credentials.password)
    return AuthOut(user=UserOut.model_validate(user), access_token=token)


@router.get("/me", response_model=UserOut)
async def me(ctx: Dict[str, Any] = Depends(get_current_user)):
    return ctx["user"]
