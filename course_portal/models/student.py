# course_portal/models/student.py - NISN-keyed student enrollment records
from __future__ import annotations
import enum
from datetime import date, datetime
from sqlalchemy import String, Integer, Date, DateTime, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from course_portal.models.base import Base


class Gender(str, enum.Enum):
    LAKI_LAKI = "LAKI_LAKI"
    PEREMPUAN = "PEREMPUAN"


class Religion(str, enum.Enum):
    ISLAM = "ISLAM"
    KRISTEN = "KRISTEN"
    KATOLIK = "KATOLIK"
    HINDU = "HINDU"
    BUDDHA = "BUDDHA"
    KONGHUCU = "KONGHUCU"


class LivingStatus(str, enum.Enum):
    ORANG_TUA = "ORANG_TUA"
    WALI = "WALI"
    SENDIRI = "SENDIRI"
    KOST = "KOST"
    ASRAMA = "ASRAMA"


class RegistrationType(str, enum.Enum):
    BARU = "BARU"                  # new student
    DAFTAR_ULANG = "DAFTAR_ULANG"  # re-registration


class Student(Base):
    """School enrollment record identified by the national student number (NISN)"""
    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nisn: Mapped[str] = mapped_column(String(10), unique=True, index=True, nullable=False)
    nama: Mapped[str] = mapped_column(String(255), nullable=False)
    jenis_kelamin: Mapped[str] = mapped_column(String(16), nullable=False)
    tempat_lahir: Mapped[str] = mapped_column(String(128), nullable=False)
    tanggal_lahir: Mapped[date] = mapped_column(Date, nullable=False)
    dusun: Mapped[str] = mapped_column(String(128), nullable=False)
    desa: Mapped[str] = mapped_column(String(128), nullable=False)
    kecamatan: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    alamat_lengkap: Mapped[str] = mapped_column(String(512), nullable=False)
    nomor_hp: Mapped[str] = mapped_column(String(32), nullable=False)
    agama: Mapped[str] = mapped_column(String(16), nullable=False)
    jumlah_saudara: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    anak_ke: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status_tinggal: Mapped[str] = mapped_column(String(16), nullable=False)
    asal_sekolah: Mapped[str] = mapped_column(String(255), nullable=False)
    foto_siswa: Mapped[str | None] = mapped_column(Text)  # opaque path or data URI, never decoded here
    qr_code: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    jenis_pendaftaran: Mapped[str] = mapped_column(String(16), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("jenis_kelamin IN ('LAKI_LAKI','PEREMPUAN')", name="ck_student_gender"),
        CheckConstraint(
            "agama IN ('ISLAM','KRISTEN','KATOLIK','HINDU','BUDDHA','KONGHUCU')",
            name="ck_student_religion",
        ),
        CheckConstraint(
            "status_tinggal IN ('ORANG_TUA','WALI','SENDIRI','KOST','ASRAMA')",
            name="ck_student_living_status",
        ),
        CheckConstraint("jenis_pendaftaran IN ('BARU','DAFTAR_ULANG')", name="ck_student_registration_type"),
        CheckConstraint("jumlah_saudara >= 0", name="ck_student_siblings_non_negative"),
        CheckConstraint("anak_ke >= 1", name="ck_student_birth_order_positive"),
    )

    def __repr__(self):
        return f"<Student(id={self.id}, nisn='{self.nisn}')>"
