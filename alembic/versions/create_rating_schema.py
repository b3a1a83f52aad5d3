"""Create roster, rating and auth tables

Revision ID: 4a1c9e7d2b60
Revises:
Create Date: 2025-11-03 10:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4a1c9e7d2b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the students, teachers, ratings, users and otp_codes tables."""
    op.create_table(
        'students',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('grade', sa.Integer(), nullable=False),
        sa.Column('access_code', sa.String(length=6), nullable=False),
    )
    op.create_index('ix_students_name', 'students', ['name'])
    op.create_index('ix_students_grade', 'students', ['grade'])
    op.create_index('ix_students_access_code', 'students', ['access_code'], unique=True)

    op.create_table(
        'teachers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
    )
    op.create_index('ix_teachers_name', 'teachers', ['name'])

    op.create_table(
        'teacher_subjects',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('teacher_id', sa.String(), sa.ForeignKey('teachers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('grade', sa.Integer(), nullable=False),
    )
    op.create_index('ix_teacher_subjects_teacher_id', 'teacher_subjects', ['teacher_id'])

    op.create_table(
        'ratings',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('student_id', sa.String(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('teacher_id', sa.String(), sa.ForeignKey('teachers.id'), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('day_bucket', sa.Date(), nullable=False),
        sa.UniqueConstraint('student_id', 'teacher_id', 'day_bucket', name='uq_rating_student_teacher_day'),
        sa.CheckConstraint('score >= 1 AND score <= 5', name='ck_rating_score_range'),
    )
    op.create_index('ix_ratings_student_id', 'ratings', ['student_id'])
    op.create_index('ix_ratings_teacher_id', 'ratings', ['teacher_id'])
    op.create_index('ix_ratings_created_at', 'ratings', ['created_at'])

    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum('admin', 'teacher', name='userrole', native_enum=False), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'otp_codes',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('code_hash', sa.String(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_otp_codes_email', 'otp_codes', ['email'])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table('otp_codes')
    op.drop_table('users')
    op.drop_table('ratings')
    op.drop_table('teacher_subjects')
    op.drop_table('teachers')
    op.drop_table('students')
