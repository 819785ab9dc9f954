"""Initial schema.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates users, sessions, workspaces, services and endpoints.
Uniqueness of users.email and workspaces.slug only counts rows where
deleted_at IS NULL (partial unique indexes), so soft-deleted rows free
their value for reuse.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

ACTIVE = sa.text('deleted_at IS NULL')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('avatar_url', sa.String(2048), nullable=True),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('locked_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_failed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_deleted_at', 'users', ['deleted_at'])
    op.create_index(
        'uq_users_email_active', 'users', ['email'],
        unique=True, postgresql_where=ACTIVE,
    )

    op.create_table(
        'sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])

    op.create_table(
        'workspaces',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('owner_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(60), nullable=False),
        sa.Column('plan', sa.String(20), nullable=False, server_default='free'),
        sa.Column('max_services', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('max_check_interval_seconds', sa.Integer(), nullable=False, server_default='300'),
        *_timestamps(),
    )
    op.create_index('ix_workspaces_owner_id', 'workspaces', ['owner_id'])
    op.create_index(
        'uq_workspaces_slug_active', 'workspaces', ['slug'],
        unique=True, postgresql_where=ACTIVE,
    )
    op.create_index(
        'idx_workspaces_owner_active', 'workspaces', ['owner_id'],
        postgresql_where=ACTIVE,
    )

    op.create_table(
        'services',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('workspace_id', sa.String(), sa.ForeignKey('workspaces.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('base_url', sa.String(2048), nullable=False),
        sa.Column('default_headers', postgresql.JSONB(), nullable=True),
        sa.Column('default_timeout_seconds', sa.Integer(), nullable=False, server_default='30'),
        *_timestamps(),
    )
    op.create_index(
        'idx_services_workspace_active', 'services', ['workspace_id'],
        postgresql_where=ACTIVE,
    )

    op.create_table(
        'endpoints',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('workspace_id', sa.String(), sa.ForeignKey('workspaces.id'), nullable=False),
        sa.Column('service_id', sa.String(), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('route', sa.String(2048), nullable=False),
        sa.Column('http_method', sa.String(10), nullable=False, server_default='GET'),
        sa.Column('headers', postgresql.JSONB(), nullable=True),
        sa.Column('body', postgresql.JSONB(), nullable=True),
        sa.Column('expected_status_code', sa.Integer(), nullable=False, server_default='200'),
        sa.Column('expected_body', postgresql.JSONB(), nullable=True),
        sa.Column('check_interval_seconds', sa.Integer(), nullable=False, server_default='300'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(
        'idx_endpoints_workspace_active', 'endpoints', ['workspace_id'],
        postgresql_where=ACTIVE,
    )
    op.create_index(
        'idx_endpoints_service_active', 'endpoints', ['service_id'],
        postgresql_where=ACTIVE,
    )
    # Scheduler scan: active endpoints by interval
    op.create_index(
        'idx_endpoints_active_check', 'endpoints',
        ['is_active', 'check_interval_seconds'],
        postgresql_where=ACTIVE,
    )


def downgrade() -> None:
    op.drop_table('endpoints')
    op.drop_table('services')
    op.drop_table('workspaces')
    op.drop_table('sessions')
    op.drop_table('users')
