"""create course portal schema

Revision ID: 3c1f0a9d7b42
Revises:
Create Date: 2025-11-01 09:00:12.481305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1f0a9d7b42'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("role IN ('student','admin')", name='ck_user_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'student_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.String(length=32), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('emergency_contact_name', sa.String(length=128), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id'),
        sa.UniqueConstraint('student_id'),
    )

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('credits', sa.Integer(), nullable=False),
        sa.Column('semester', sa.String(length=16), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('max_enrollment', sa.Integer(), nullable=False),
        sa.Column('current_enrollment', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("semester IN ('fall','spring','summer')", name='ck_course_semester'),
        sa.CheckConstraint('credits > 0', name='ck_course_credits_positive'),
        sa.CheckConstraint('max_enrollment > 0', name='ck_course_max_enrollment_positive'),
        sa.CheckConstraint(
            'current_enrollment >= 0 AND current_enrollment <= max_enrollment',
            name='ck_course_enrollment_within_capacity',
        ),
    )
    op.create_index('ix_courses_code', 'courses', ['code'], unique=True)

    op.create_table(
        'registrations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_profile_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('semester', sa.String(length=16), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('registration_date', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['student_profile_id'], ['student_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='RESTRICT'),
        sa.CheckConstraint(
            "status IN ('pending','approved','rejected','withdrawn')", name='ck_registration_status'
        ),
        sa.CheckConstraint("semester IN ('fall','spring','summer')", name='ck_registration_semester'),
    )
    op.create_index('ix_registrations_student_profile_id', 'registrations', ['student_profile_id'])
    op.create_index('ix_registrations_course_id', 'registrations', ['course_id'])
    op.create_index(
        'uq_registration_student_course_term',
        'registrations',
        ['student_profile_id', 'course_id', 'semester', 'year'],
        unique=True,
    )

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nisn', sa.String(length=10), nullable=False),
        sa.Column('nama', sa.String(length=255), nullable=False),
        sa.Column('jenis_kelamin', sa.String(length=16), nullable=False),
        sa.Column('tempat_lahir', sa.String(length=128), nullable=False),
        sa.Column('tanggal_lahir', sa.Date(), nullable=False),
        sa.Column('dusun', sa.String(length=128), nullable=False),
        sa.Column('desa', sa.String(length=128), nullable=False),
        sa.Column('kecamatan', sa.String(length=128), nullable=False),
        sa.Column('alamat_lengkap', sa.String(length=512), nullable=False),
        sa.Column('nomor_hp', sa.String(length=32), nullable=False),
        sa.Column('agama', sa.String(length=16), nullable=False),
        sa.Column('jumlah_saudara', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('anak_ke', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status_tinggal', sa.String(length=16), nullable=False),
        sa.Column('asal_sekolah', sa.String(length=255), nullable=False),
        sa.Column('foto_siswa', sa.Text(), nullable=True),
        sa.Column('qr_code', sa.String(length=64), nullable=False),
        sa.Column('jenis_pendaftaran', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("jenis_kelamin IN ('LAKI_LAKI','PEREMPUAN')", name='ck_student_gender'),
        sa.CheckConstraint(
            "agama IN ('ISLAM','KRISTEN','KATOLIK','HINDU','BUDDHA','KONGHUCU')", name='ck_student_religion'
        ),
        sa.CheckConstraint(
            "status_tinggal IN ('ORANG_TUA','WALI','SENDIRI','KOST','ASRAMA')", name='ck_student_living_status'
        ),
        sa.CheckConstraint("jenis_pendaftaran IN ('BARU','DAFTAR_ULANG')", name='ck_student_registration_type'),
        sa.CheckConstraint('jumlah_saudara >= 0', name='ck_student_siblings_non_negative'),
        sa.CheckConstraint('anak_ke >= 1', name='ck_student_birth_order_positive'),
    )
    op.create_index('ix_students_nisn', 'students', ['nisn'], unique=True)
    op.create_index('ix_students_qr_code', 'students', ['qr_code'], unique=True)
    op.create_index('ix_students_kecamatan', 'students', ['kecamatan'])


def downgrade():
    op.drop_index('ix_students_kecamatan', table_name='students')
    op.drop_index('ix_students_qr_code', table_name='students')
    op.drop_index('ix_students_nisn', table_name='students')
    op.drop_table('students')

    op.drop_index('uq_registration_student_course_term', table_name='registrations')
    op.drop_index('ix_registrations_course_id', table_name='registrations')
    op.drop_index('ix_registrations_student_profile_id', table_name='registrations')
    op.drop_table('registrations')

    op.drop_index('ix_courses_code', table_name='courses')
    op.drop_table('courses')

    op.drop_table('student_profiles')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
