# course_portal/api/routers/students.py - NISN student records and ID cards
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
import logging

from course_portal.core.db import get_db
from course_portal.core.errors import NotFoundError
from course_portal.api.deps.auth import get_current_user, require_admin
from course_portal.models.student import Gender, Religion, RegistrationType
from course_portal.schemas.student import (
    StudentCreate,
    StudentUpdate,
    StudentOut,
    StudentCard,
    StudentFilter,
    StudentList,
    QrVerifyIn,
)
from course_portal.services import student_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _found(value, what: str):
    if value is None:
        raise NotFoundError(f"{what} not found")
    return value


@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Create a student record; the QR code is generated server side"""
    return student_service.create_student(db, student_data)


@router.get("", response_model=StudentList)
async def get_students(
    jenis_pendaftaran: Optional[RegistrationType] = Query(None),
    jenis_kelamin: Optional[Gender] = Query(None),
    agama: Optional[Religion] = Query(None),
    kecamatan: Optional[str] = Query(None),
    asal_sekolah: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, gt=0, le=500),
    offset: Optional[int] = Query(None, ge=0),
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    filters = StudentFilter(
        jenis_pendaftaran=jenis_pendaftaran,
        jenis_kelamin=jenis_kelamin,
        agama=agama,
        kecamatan=kecamatan,
        asal_sekolah=asal_sekolah,
        limit=limit,
        offset=offset,
    )
    students, total = student_service.get_students(db, filters)
    return StudentList(students=[StudentOut.model_validate(s) for s in students], total=total)


@router.get("/all", response_model=List[StudentOut])
async def get_all_students(
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return student_service.get_all_students(db)


@router.post("/verify-qr", response_model=StudentOut)
async def verify_qr_code(
    payload: QrVerifyIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Resolve a scanned QR code to its student record (any signed-in user)"""
    student = student_service.verify_qr_code(db, payload.qr_code, verified_by=ctx["user"].id)
    return _found(student, "QR code")


@router.get("/nisn/{nisn}", response_model=StudentOut)
async def get_student_by_nisn(
    nisn: str,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return _found(student_service.get_student_by_nisn(db, nisn), f"Student with NISN {nisn}")


@router.get("/nisn/{nisn}/card", response_model=StudentCard)
async def get_student_card_by_nisn(
    nisn: str,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return _found(student_service.generate_student_card_by_nisn(db, nisn), f"Student with NISN {nisn}")


@router.get("/{student_id}", response_model=StudentOut)
async def get_student(
    student_id: int,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return _found(student_service.get_student_by_id(db, student_id), f"Student with id {student_id}")


@router.get("/{student_id}/card", response_model=StudentCard)
async def get_student_card(
    student_id: int,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return _found(student_service.generate_student_card(db, student_id), f"Student with id {student_id}")


@router.patch("/{student_id}", response_model=StudentOut)
async def update_student(
    student_id: int,
    update_data: StudentUpdate,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    student = student_service.update_student(db, student_id, update_data)
    return _found(student, f"Student with id {student_id}")


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: int,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if not student_service.delete_student(db, student_id):
        raise NotFoundError(f"Student with id {student_id} not found")
    logger.info(f"Student record {student_id} deleted by admin {ctx['user'].email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
