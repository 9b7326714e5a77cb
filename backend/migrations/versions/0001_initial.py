"""initial volunteer coordination schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_roles = sa.Enum('volunteer', 'ngo', 'superuser', name='userroles')
application_status = sa.Enum(
    'pending', 'approved', 'rejected', 'cancelled', name='applicationstatus'
)


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def soft_delete():
    return [
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('deactivated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('password', sa.String(length=100), nullable=False),
        sa.Column('role', user_roles, nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
        *soft_delete(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_is_active', 'users', ['is_active'])

    op.create_table(
        'ngo_profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('mission', sa.String(length=1000), nullable=False),
        sa.Column('contact_email', sa.String(length=256), nullable=False),
        sa.Column('contact_phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('logo', sa.String(length=300), nullable=True),
        *timestamps(),
        *soft_delete(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'], name='fk_ngo_profiles_user_id_users'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_ngo_profiles'),
        sa.UniqueConstraint('user_id', name='uq_ngo_profiles_user_id'),
    )
    op.create_index('ix_ngo_profiles_is_active', 'ngo_profiles', ['is_active'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ngo_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.String(length=2000), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('venue', sa.String(length=500), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('contact_person', sa.String(length=100), nullable=True),
        sa.Column('contact_phone', sa.String(length=20), nullable=True),
        sa.Column('contact_email', sa.String(length=256), nullable=True),
        sa.Column('version_id', sa.Integer(), nullable=False),
        *timestamps(),
        *soft_delete(),
        sa.CheckConstraint('capacity > 0', name='ck_events_capacity_positive'),
        sa.CheckConstraint('end_at > start_at', name='ck_events_ends_after_start'),
        sa.ForeignKeyConstraint(
            ['ngo_id'], ['ngo_profiles.id'], name='fk_events_ngo_id_ngo_profiles'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_events'),
    )
    op.create_index('ix_events_ngo_id', 'events', ['ngo_id'])
    op.create_index('ix_events_is_active', 'events', ['is_active'])

    op.create_table(
        'volunteer_applications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('message', sa.String(length=1000), nullable=True),
        sa.Column('skills', sa.String(length=500), nullable=True),
        sa.Column('availability', sa.String(length=500), nullable=True),
        sa.Column('status', application_status, nullable=False),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('response_message', sa.String(length=500), nullable=True),
        sa.Column('responded_by_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(
            ['event_id'], ['events.id'], name='fk_volunteer_applications_event_id_events'
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'], name='fk_volunteer_applications_user_id_users'
        ),
        sa.ForeignKeyConstraint(
            ['responded_by_id'],
            ['users.id'],
            name='fk_volunteer_applications_responded_by_id_users',
            ondelete='RESTRICT',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_volunteer_applications'),
        sa.UniqueConstraint(
            'event_id', 'user_id', name='uq_volunteer_applications_event_id_user_id'
        ),
    )
    op.create_index(
        'ix_volunteer_applications_event_id', 'volunteer_applications', ['event_id']
    )
    op.create_index(
        'ix_volunteer_applications_user_id', 'volunteer_applications', ['user_id']
    )
    op.create_index(
        'ix_volunteer_applications_status', 'volunteer_applications', ['status']
    )


def downgrade() -> None:
    op.drop_table('volunteer_applications')
    op.drop_table('events')
    op.drop_table('ngo_profiles')
    op.drop_table('users')
    application_status.drop(op.get_bind(), checkfirst=True)
    user_roles.drop(op.get_bind(), checkfirst=True)
