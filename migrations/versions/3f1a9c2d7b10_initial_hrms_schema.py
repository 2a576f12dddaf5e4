"""initial_hrms_schema

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2025-11-03 10:24:51.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

role_enum = sa.Enum('ADMIN', 'CEO', 'INCUBATION_MANAGER', 'ACCOUNTANT', 'OFFICER_IN_CHARGE', 'FACULTY_IN_CHARGE', 'EMPLOYEE', name='role')
gender_enum = sa.Enum('MALE', 'FEMALE', 'OTHER', name='gender')
employment_type_enum = sa.Enum('FULL_TIME', 'PART_TIME', 'CONTRACT', 'INTERN', name='employmenttype')
attendance_status_enum = sa.Enum('PRESENT', 'LATE', 'HALF_DAY', 'ABSENT', 'ON_LEAVE', name='attendancestatus')
leave_type_enum = sa.Enum('CASUAL_LEAVE', 'ON_DUTY_LEAVE', 'LEAVE_WITHOUT_PAY', name='leavetype')
leave_status_enum = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='leavestatus')
holiday_type_enum = sa.Enum('CUSTOM', 'COMPANY_SPECIFIC', name='holidaytype')


def _audit_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('employee_id', sa.String(length=50), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', gender_enum, nullable=True),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('emergency_contact', sa.JSON(), nullable=True),
        sa.Column('profile_photo', sa.String(length=500), nullable=True),
        sa.Column('designation', sa.String(length=100), nullable=True),
        sa.Column('department', sa.String(length=100), nullable=True),
        sa.Column('joining_date', sa.Date(), nullable=True),
        sa.Column('employment_type', employment_type_enum, nullable=True),
        sa.Column('reporting_to_id', sa.Integer(), nullable=True),
        sa.Column('base_salary', sa.Float(), nullable=True),
        sa.Column('gross_remuneration', sa.Float(), nullable=True),
        sa.Column('salary', sa.JSON(), nullable=True),
        sa.Column('documents', sa.JSON(), nullable=True),
        sa.Column('bank_details', sa.JSON(), nullable=True),
        sa.Column('casual_leave', sa.Float(), nullable=False),
        sa.Column('on_duty_leave', sa.Float(), nullable=False),
        sa.Column('leave_without_pay', sa.Float(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['reporting_to_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_employee_id'), 'users', ['employee_id'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'attendances',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('attendance_date', sa.Date(), nullable=False),
        sa.Column('status', attendance_status_enum, nullable=False),
        sa.Column('check_in_time', sa.DateTime(), nullable=True),
        sa.Column('check_in_ip', sa.String(length=64), nullable=True),
        sa.Column('check_out_time', sa.DateTime(), nullable=True),
        sa.Column('check_out_ip', sa.String(length=64), nullable=True),
        sa.Column('working_hours', sa.Float(), nullable=True),
        sa.Column('is_late', sa.Boolean(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'attendance_date', name='uq_attendance_user_date'),
    )
    op.create_index(op.f('ix_attendances_id'), 'attendances', ['id'], unique=False)
    op.create_index(op.f('ix_attendances_user_id'), 'attendances', ['user_id'], unique=False)
    op.create_index(op.f('ix_attendances_attendance_date'), 'attendances', ['attendance_date'], unique=False)

    op.create_table(
        'leaves',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('leave_type', leave_type_enum, nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('number_of_days', sa.Float(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('contact_no', sa.String(length=20), nullable=True),
        sa.Column('person_in_charge', sa.String(length=255), nullable=False),
        sa.Column('reporting_to_id', sa.Integer(), nullable=False),
        sa.Column('status', leave_status_enum, nullable=False),
        sa.Column('applied_on', sa.DateTime(), nullable=True),
        sa.Column('reviewed_by_id', sa.Integer(), nullable=True),
        sa.Column('reviewed_on', sa.DateTime(), nullable=True),
        sa.Column('review_remarks', sa.Text(), nullable=True),
        sa.Column('leave_balance_before', sa.JSON(), nullable=True),
        sa.Column('leave_balance_after', sa.JSON(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['reporting_to_id'], ['users.id']),
        sa.ForeignKeyConstraint(['reviewed_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_leaves_id'), 'leaves', ['id'], unique=False)
    op.create_index(op.f('ix_leaves_user_id'), 'leaves', ['user_id'], unique=False)
    op.create_index(op.f('ix_leaves_reporting_to_id'), 'leaves', ['reporting_to_id'], unique=False)
    op.create_index(op.f('ix_leaves_status'), 'leaves', ['status'], unique=False)

    op.create_table(
        'holidays',
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', holiday_type_enum, nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('added_by_id', sa.Integer(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['added_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date'),
    )
    op.create_index(op.f('ix_holidays_id'), 'holidays', ['id'], unique=False)
    op.create_index(op.f('ix_holidays_year'), 'holidays', ['year'], unique=False)

    op.create_table(
        'peer_ratings',
        sa.Column('rater_id', sa.Integer(), nullable=False),
        sa.Column('rated_employee_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.String(length=20), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('responsiveness', sa.Float(), nullable=False),
        sa.Column('team_spirit', sa.Float(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['rater_id'], ['users.id']),
        sa.ForeignKeyConstraint(['rated_employee_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('rater_id', 'rated_employee_id', 'month', 'year', name='uq_peer_rating_period'),
    )
    op.create_index(op.f('ix_peer_ratings_id'), 'peer_ratings', ['id'], unique=False)
    op.create_index(op.f('ix_peer_ratings_rater_id'), 'peer_ratings', ['rater_id'], unique=False)
    op.create_index(op.f('ix_peer_ratings_rated_employee_id'), 'peer_ratings', ['rated_employee_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('peer_ratings')
    op.drop_table('holidays')
    op.drop_table('leaves')
    op.drop_table('attendances')
    op.drop_table('users')
    bind = op.get_bind()
    for enum in (holiday_type_enum, leave_status_enum, leave_type_enum, attendance_status_enum,
                 employment_type_enum, gender_enum, role_enum):
        enum.drop(bind, checkfirst=True)
