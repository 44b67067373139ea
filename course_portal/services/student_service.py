# course_portal/services/student_service.py - NISN student records, ID cards and QR verification
"""
Student record keeping keyed by NISN (the 10-digit national student number).

Every record carries a QR code of the form ``SISWA-<nisn>-<8 hex>`` printed on
the student card. The code is regenerated whenever the NISN changes.
"""
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Optional, Tuple
import enum
import logging
import re
import secrets

from course_portal.core.db import run_atomic
from course_portal.core.errors import ConflictError
from course_portal.models.student import Student
from course_portal.schemas.student import StudentCreate, StudentFilter, StudentUpdate

logger = logging.getLogger(__name__)

QR_PREFIX = "SISWA"
QR_CODE_RE = re.compile(r"^SISWA-(\d{10})-[0-9A-F]{8}$")
NISN_RE = re.compile(r"^\d{10}$")
QR_ATTEMPTS = 5

FILTER_FIELDS = ("jenis_pendaftaran", "jenis_kelamin", "agama", "kecamatan", "asal_sekolah")


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, enum.Enum) else value


def is_valid_nisn(nisn: str) -> bool:
    return bool(nisn) and NISN_RE.match(nisn) is not None


def generate_qr_code(db: Session, nisn: str) -> str:
    """Random QR code for ``nisn`` not used by any other record"""
    for _ in range(QR_ATTEMPTS):
        code = f"{QR_PREFIX}-{nisn}-{secrets.token_hex(4).upper()}"
        if not db.execute(select(Student.id).where(Student.qr_code == code)).first():
            return code
    raise ConflictError("Could not generate a unique QR code, please retry")


def _nisn_taken(db: Session, nisn: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Student.id).where(Student.nisn == nisn)
    if exclude_id is not None:
        query = query.where(Student.id != exclude_id)
    return db.execute(query).first() is not None


def create_student(db: Session, data: StudentCreate) -> Student:
    """
    Create a student record and assign its QR code.

    Raises:
        ConflictError: If the NISN is already registered
    """
    values = {k: _plain(v) for k, v in data.model_dump().items()}

    def _create(session: Session) -> Student:
        if _nisn_taken(session, data.nisn):
            raise ConflictError(f"Student with NISN {data.nisn} already exists")

        student = Student(**values, qr_code=generate_qr_code(session, data.nisn))
        session.add(student)
        try:
            session.flush()
        except IntegrityError as e:
            raise ConflictError(f"Student with NISN {data.nisn} already exists") from e
        return student

    student = run_atomic(db, _create, name="create student")
    db.refresh(student)
    logger.info(f"Student record created: id={student.id}, nisn={student.nisn}")
    return student


def get_students(db: Session, filters: Optional[StudentFilter] = None) -> Tuple[List[Student], int]:
    """Filtered, paginated records ordered by name, with the unpaginated total"""
    filters = filters or StudentFilter()

    conditions = []
    for field in FILTER_FIELDS:
        value = getattr(filters, field)
        if value is not None:
            conditions.append(getattr(Student, field) == _plain(value))

    total = db.execute(select(func.count(Student.id)).where(*conditions)).scalar_one()

    query = select(Student).where(*conditions).order_by(Student.nama, Student.id)
    if filters.offset:
        query = query.offset(filters.offset)
    if filters.limit:
        query = query.limit(filters.limit)

    return list(db.execute(query).scalars().all()), total


def get_all_students(db: Session) -> List[Student]:
    return list(db.execute(select(Student).order_by(Student.nama, Student.id)).scalars().all())


def get_student_by_id(db: Session, student_id: int) -> Optional[Student]:
    return db.get(Student, student_id)


def get_student_by_nisn(db: Session, nisn: str) -> Optional[Student]:
    if not is_valid_nisn(nisn):
        return None
    return db.execute(select(Student).where(Student.nisn == nisn)).scalar_one_or_none()


def update_student(db: Session, student_id: int, data: StudentUpdate) -> Optional[Student]:
    """
    Apply a partial update. Returns None for an unknown id.

    A new NISN must be unique and gets a fresh QR code.
    """
    changes = {k: _plain(v) for k, v in data.changes().items()}

    def _update(session: Session) -> Optional[Student]:
        student = session.get(Student, student_id)
        if student is None:
            return None

        values = dict(changes)
        new_nisn = values.get("nisn")
        if new_nisn is not None and new_nisn != student.nisn:
            if _nisn_taken(session, new_nisn, exclude_id=student_id):
                raise ConflictError(f"Student with NISN {new_nisn} already exists")
            values["qr_code"] = generate_qr_code(session, new_nisn)

        for field, value in values.items():
            setattr(student, field, value)
        try:
            session.flush()
        except IntegrityError as e:
            raise ConflictError(f"Student with NISN {new_nisn} already exists") from e
        return student

    student = run_atomic(db, _update, name="update student")
    if student is None:
        return None

    db.refresh(student)
    logger.info(f"Student record {student_id} updated: {', '.join(sorted(changes)) or 'no changes'}")
    return student


def delete_student(db: Session, student_id: int) -> bool:
    def _delete(session: Session) -> bool:
        student = session.get(Student, student_id)
        if student is None:
            return False
        session.delete(student)
        return True

    deleted = run_atomic(db, _delete, name="delete student")
    if deleted:
        logger.info(f"Student record {student_id} deleted")
    return deleted


def _card(student: Student) -> Dict[str, Any]:
    return {
        "id": student.id,
        "nisn": student.nisn,
        "nama": student.nama,
        "tempat_lahir": student.tempat_lahir,
        "tanggal_lahir": student.tanggal_lahir,
        "alamat_lengkap": student.alamat_lengkap,
        "foto_siswa": student.foto_siswa,
        "qr_code": student.qr_code,
        "created_at": student.created_at,
    }


def generate_student_card(db: Session, student_id: int) -> Optional[Dict[str, Any]]:
    student = get_student_by_id(db, student_id)
    return _card(student) if student else None


def generate_student_card_by_nisn(db: Session, nisn: str) -> Optional[Dict[str, Any]]:
    student = get_student_by_nisn(db, nisn)
    return _card(student) if student else None


def verify_qr_code(db: Session, qr_code: str, verified_by: Optional[int] = None) -> Optional[Student]:
    """
    Look up the record behind a scanned QR code.

    Every attempt is written to the audit log, whether it matched or not.
    """
    code = (qr_code or "").strip()
    if not QR_CODE_RE.match(code):
        logger.warning(f"QR verification rejected malformed code {code[:64]!r} (user {verified_by})")
        return None

    student = db.execute(select(Student).where(Student.qr_code == code)).scalar_one_or_none()
    if student is None:
        logger.warning(f"QR verification failed for unknown code {code} (user {verified_by})")
        return None

    logger.info(f"QR verification succeeded for student {student.id} nisn={student.nisn} (user {verified_by})")
    return student
