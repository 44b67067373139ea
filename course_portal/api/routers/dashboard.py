# course_portal/api/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, Any

from course_portal.core.db import get_db
from course_portal.api.deps.auth import get_current_user, require_admin
from course_portal.schemas.dashboard import DashboardOut
from course_portal.services.dashboard_service import get_dashboard_data

router = APIRouter()


@router.get("", response_model=DashboardOut)
async def get_my_dashboard(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return get_dashboard_data(db, ctx["user"].id)


@router.get("/{user_id}", response_model=DashboardOut)
async def get_dashboard(
    user_id: int,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Dashboard of any student (admin)"""
    return get_dashboard_data(db, user_id)
