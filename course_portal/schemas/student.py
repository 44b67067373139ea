# course_portal/schemas/student.py - NISN student record schemas
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional

from course_portal.models.student import Gender, Religion, LivingStatus, RegistrationType

NISN_PATTERN = r"^\d{10}$"


class StudentCreate(BaseModel):
    nisn: str = Field(..., pattern=NISN_PATTERN, description="10-digit national student number")
    nama: str = Field(..., min_length=1, max_length=255)
    jenis_kelamin: Gender
    tempat_lahir: str = Field(..., min_length=1, max_length=128)
    tanggal_lahir: date
    dusun: str = Field(..., min_length=1, max_length=128)
    desa: str = Field(..., min_length=1, max_length=128)
    kecamatan: str = Field(..., min_length=1, max_length=128)
    alamat_lengkap: str = Field(..., min_length=1, max_length=512)
    nomor_hp: str = Field(..., min_length=10, max_length=32)
    agama: Religion
    jumlah_saudara: int = Field(..., ge=0)
    anak_ke: int = Field(..., ge=1)
    status_tinggal: LivingStatus
    asal_sekolah: str = Field(..., min_length=1, max_length=255)
    foto_siswa: Optional[str] = None
    jenis_pendaftaran: RegistrationType


class StudentUpdate(BaseModel):
    """Partial update; only foto_siswa may be cleared with an explicit null"""
    model_config = ConfigDict(extra="forbid")

    nisn: Optional[str] = Field(default=None, pattern=NISN_PATTERN)
    nama: Optional[str] = Field(default=None, min_length=1, max_length=255)
    jenis_kelamin: Optional[Gender] = None
    tempat_lahir: Optional[str] = Field(default=None, min_length=1, max_length=128)
    tanggal_lahir: Optional[date] = None
    dusun: Optional[str] = Field(default=None, min_length=1, max_length=128)
    desa: Optional[str] = Field(default=None, min_length=1, max_length=128)
    kecamatan: Optional[str] = Field(default=None, min_length=1, max_length=128)
    alamat_lengkap: Optional[str] = Field(default=None, min_length=1, max_length=512)
    nomor_hp: Optional[str] = Field(default=None, min_length=10, max_length=32)
    agama: Optional[Religion] = None
    jumlah_saudara: Optional[int] = Field(default=None, ge=0)
    anak_ke: Optional[int] = Field(default=None, ge=1)
    status_tinggal: Optional[LivingStatus] = None
    asal_sekolah: Optional[str] = Field(default=None, min_length=1, max_length=255)
    foto_siswa: Optional[str] = None
    jenis_pendaftaran: Optional[RegistrationType] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field in self.model_fields_set:
            if field != "foto_siswa" and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, mode="python")


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nisn: str
    nama: str
    jenis_kelamin: Gender
    tempat_lahir: str
    tanggal_lahir: date
    dusun: str
    desa: str
    kecamatan: str
    alamat_lengkap: str
    nomor_hp: str
    agama: Religion
    jumlah_saudara: int
    anak_ke: int
    status_tinggal: LivingStatus
    asal_sekolah: str
    foto_siswa: Optional[str]
    qr_code: str
    jenis_pendaftaran: RegistrationType
    created_at: datetime
    updated_at: datetime


class StudentCard(BaseModel):
    """Fields printed on the student ID card"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    nisn: str
    nama: str
    tempat_lahir: str
    tanggal_lahir: date
    alamat_lengkap: str
    foto_siswa: Optional[str]
    qr_code: str
    created_at: datetime


class StudentFilter(BaseModel):
    jenis_pendaftaran: Optional[RegistrationType] = None
    jenis_kelamin: Optional[Gender] = None
    agama: Optional[Religion] = None
    kecamatan: Optional[str] = None
    asal_sekolah: Optional[str] = None
    limit: Optional[int] = Field(default=None, gt=0, le=500)
    offset: Optional[int] = Field(default=None, ge=0)


class StudentList(BaseModel):
    students: List[StudentOut]
    total: int


class QrVerifyIn(BaseModel):
    qr_code: str = Field(..., min_length=1, max_length=256)
