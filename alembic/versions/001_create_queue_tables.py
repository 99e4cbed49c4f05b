"""Create interview queue tables

Revision ID: 001_create_queue_tables
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_create_queue_tables'
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum('STUDENT', 'COMMITTEE', 'ADMIN', name='user_role')
affiliation = sa.Enum('INTERNAL', 'EXTERNAL', name='affiliation')
opportunity_type = sa.Enum('PFA', 'PFE', 'EMPLOYMENT', 'OBSERVATION', name='opportunity_type')
interview_status = sa.Enum('WAITING', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED', name='interview_status')
closed_reason = sa.Enum('COMPLETED', 'CANCELLED', 'ABSENT', 'ADMIN', name='interview_closed_reason')

ACTIVE_WHERE = sa.text("status IN ('WAITING', 'IN_PROGRESS')")
IN_PROGRESS_WHERE = sa.text("status = 'IN_PROGRESS'")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create users, companies, interviews, rooms and room staffing."""
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_committee', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('affiliation', affiliation, nullable=True),
        sa.Column('opportunity_type', opportunity_type, nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('idx_user_role', 'users', ['role'])

    op.create_table(
        'companies',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sector', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('estimated_interview_duration', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_company_active', 'companies', ['is_active'])

    op.create_table(
        'interviews',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('candidate_id', sa.BigInteger(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('company_id', sa.BigInteger(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('status', interview_status, nullable=False),
        sa.Column('queue_position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('closed_reason', closed_reason, nullable=True),
        sa.Column('scheduled_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_interviews_candidate_id', 'interviews', ['candidate_id'])
    op.create_index('ix_interviews_company_id', 'interviews', ['company_id'])
    op.create_index('ix_interviews_status', 'interviews', ['status'])
    op.create_index('idx_interview_company_status', 'interviews', ['company_id', 'status'])
    op.create_index('idx_interview_company_position', 'interviews', ['company_id', 'queue_position'])
    op.create_index(
        'uq_interview_active_selection',
        'interviews',
        ['candidate_id', 'company_id'],
        unique=True,
        postgresql_where=ACTIVE_WHERE,
        sqlite_where=ACTIVE_WHERE,
    )
    op.create_index(
        'uq_interview_company_in_progress',
        'interviews',
        ['company_id'],
        unique=True,
        postgresql_where=IN_PROGRESS_WHERE,
        sqlite_where=IN_PROGRESS_WHERE,
    )

    op.create_table(
        'rooms',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('company_id', sa.BigInteger(), sa.ForeignKey('companies.id'), nullable=True),
        sa.Column('current_interview_id', sa.BigInteger(), sa.ForeignKey('interviews.id'), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', name='uq_rooms_company_id'),
    )

    op.create_table(
        'room_committee_members',
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('rooms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.PrimaryKeyConstraint('room_id', 'user_id'),
    )
    op.create_index('ix_room_committee_members_user_id', 'room_committee_members', ['user_id'])


def downgrade() -> None:
    """Drop the queue tables and their enum types."""
    op.drop_index('ix_room_committee_members_user_id', table_name='room_committee_members')
    op.drop_table('room_committee_members')
    op.drop_table('rooms')
    op.drop_index('uq_interview_company_in_progress', table_name='interviews')
    op.drop_index('uq_interview_active_selection', table_name='interviews')
    op.drop_index('idx_interview_company_position', table_name='interviews')
    op.drop_index('idx_interview_company_status', table_name='interviews')
    op.drop_index('ix_interviews_status', table_name='interviews')
    op.drop_index('ix_interviews_company_id', table_name='interviews')
    op.drop_index('ix_interviews_candidate_id', table_name='interviews')
    op.drop_table('interviews')
    op.drop_index('idx_company_active', table_name='companies')
    op.drop_table('companies')
    op.drop_index('idx_user_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (closed_reason, interview_status, opportunity_type, affiliation, user_role):
        enum_type.drop(bind, checkfirst=True)
