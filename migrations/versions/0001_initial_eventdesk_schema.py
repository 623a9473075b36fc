"""initial eventdesk schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), **kwargs)


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _jsonb(name: str, default: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        server_default=sa.text(f"'{default}'::jsonb"),
        nullable=nullable,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'organizations',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False, unique=True),
        sa.Column('logo', sa.String(), nullable=True),
        _jsonb('settings', '{}'),
        *_timestamps(),
    )

    op.create_table(
        'users',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('organization_id', sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('role', sa.String(length=20), server_default='ORGANIZER', nullable=False),
        sa.Column('email_verified_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'verification_tokens',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('identifier', sa.String(), nullable=False),
        sa.Column('token_hash', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_verification_tokens_identifier', 'verification_tokens', ['identifier'], unique=False)

    op.create_table(
        'api_keys',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('organization_id', sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('key_id', sa.String(length=32), nullable=False, unique=True),
        sa.Column('key_hash', sa.Text(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('prefix', sa.String(length=12), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('last_used_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index('idx_api_keys_org_created', 'api_keys', ['organization_id', 'created_at'], unique=False)

    op.create_table(
        'events',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('organization_id', sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('timezone', sa.String(length=64), server_default='UTC', nullable=False),
        sa.Column('venue', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='DRAFT', nullable=False),
        _jsonb('settings', '{}'),
        sa.Column('banner_image', sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('organization_id', 'slug', name='uq_events_org_slug'),
    )
    op.create_index('idx_events_org_start', 'events', ['organization_id', 'start_date'], unique=False)
    op.create_index('idx_events_status', 'events', ['status'], unique=False)

    op.create_table(
        'ticket_types',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('currency', sa.String(length=3), server_default='USD', nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('sold_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('max_per_order', sa.Integer(), server_default='10', nullable=False),
        sa.Column('sales_start', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('sales_end', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('requires_approval', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_ticket_types_event_id', 'ticket_types', ['event_id'], unique=False)

    op.create_table(
        'attendees',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('company', sa.String(), nullable=True),
        sa.Column('job_title', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('dietary_reqs', sa.Text(), nullable=True),
        _jsonb('custom_fields', '{}'),
        *_timestamps(),
    )
    op.create_index(op.f('ix_attendees_email'), 'attendees', ['email'], unique=False)

    op.create_table(
        'registrations',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        _uuid('ticket_type_id', sa.ForeignKey('ticket_types.id'), nullable=False),
        _uuid('attendee_id', sa.ForeignKey('attendees.id'), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('payment_status', sa.String(length=20), server_default='UNPAID', nullable=False),
        sa.Column('qr_code', sa.String(length=64), nullable=True, unique=True),
        sa.Column('checked_in_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_registrations_event_status', 'registrations', ['event_id', 'status'], unique=False)
    op.create_index('idx_registrations_attendee_id', 'registrations', ['attendee_id'], unique=False)
    op.create_index('idx_registrations_ticket_type_id', 'registrations', ['ticket_type_id'], unique=False)

    op.create_table(
        'payments',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('registration_id', sa.ForeignKey('registrations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), server_default='USD', nullable=False),
        sa.Column('provider_payment_id', sa.String(), nullable=True, unique=True),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('receipt_url', sa.String(), nullable=True),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'speakers',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        _uuid('user_id', sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('company', sa.String(), nullable=True),
        sa.Column('job_title', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('photo', sa.String(), nullable=True),
        _jsonb('social_links', '{}'),
        sa.Column('status', sa.String(length=20), server_default='INVITED', nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('event_id', 'email', name='uq_speakers_event_email'),
    )

    op.create_table(
        'tracks',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=7), server_default='#3B82F6', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_tracks_event_sort', 'tracks', ['event_id', 'sort_order'], unique=False)

    op.create_table(
        'event_sessions',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        _uuid('track_id', sa.ForeignKey('tracks.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('end_time', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='SCHEDULED', nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_event_sessions_event_start', 'event_sessions', ['event_id', 'start_time'], unique=False)
    op.create_index('idx_event_sessions_track_id', 'event_sessions', ['track_id'], unique=False)

    op.create_table(
        'session_speakers',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('session_id', sa.ForeignKey('event_sessions.id', ondelete='CASCADE'), nullable=False),
        _uuid('speaker_id', sa.ForeignKey('speakers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(length=50), server_default='speaker', nullable=False),
        sa.UniqueConstraint('session_id', 'speaker_id', name='uq_session_speakers_pair'),
    )

    op.create_table(
        'hotels',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('contact_phone', sa.String(), nullable=True),
        sa.Column('stars', sa.Integer(), nullable=True),
        _jsonb('images', '[]'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_hotels_event_id', 'hotels', ['event_id'], unique=False)

    op.create_table(
        'room_types',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('hotel_id', sa.ForeignKey('hotels.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price_per_night', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), server_default='USD', nullable=False),
        sa.Column('capacity', sa.Integer(), server_default='2', nullable=False),
        sa.Column('total_rooms', sa.Integer(), nullable=False),
        sa.Column('booked_rooms', sa.Integer(), server_default='0', nullable=False),
        _jsonb('amenities', '[]'),
        _jsonb('images', '[]'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'accommodations',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        _uuid('registration_id', sa.ForeignKey('registrations.id', ondelete='CASCADE'), nullable=False, unique=True),
        _uuid('room_type_id', sa.ForeignKey('room_types.id'), nullable=False),
        sa.Column('check_in', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('check_out', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('guest_count', sa.Integer(), server_default='1', nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('total_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), server_default='USD', nullable=False),
        sa.Column('confirmation_no', sa.String(length=32), nullable=True, unique=True),
        *_timestamps(),
    )
    op.create_index('idx_accommodations_event_status', 'accommodations', ['event_id', 'status'], unique=False)
    op.create_index('idx_accommodations_room_type_id', 'accommodations', ['room_type_id'], unique=False)

    op.create_table(
        'audit_logs',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('organization_id', sa.ForeignKey('organizations.id', ondelete='SET NULL'), nullable=True),
        _uuid('event_id', nullable=True),
        _uuid('user_id', sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(length=40), nullable=False),
        sa.Column('entity_type', sa.String(length=40), nullable=False),
        sa.Column('entity_id', sa.String(length=64), nullable=True),
        sa.Column('changes', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_audit_logs_organization_id_created_at', 'audit_logs', ['organization_id', 'created_at'], unique=False)
    op.create_index('ix_audit_logs_event_id_created_at', 'audit_logs', ['event_id', 'created_at'], unique=False)
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'], unique=False)

    op.create_table(
        'email_logs',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('organization_id', nullable=True),
        _uuid('event_id', nullable=True),
        sa.Column('recipient', sa.String(length=320), nullable=False),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('provider_message_id', sa.String(length=255), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('sent_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('idx_email_logs_recipient_created_at', 'email_logs', ['recipient', 'created_at'], unique=False)
    op.create_index('idx_email_logs_status', 'email_logs', ['status'], unique=False)
    op.create_index('idx_email_logs_event_type', 'email_logs', ['event_type'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'email_logs',
        'audit_logs',
        'accommodations',
        'room_types',
        'hotels',
        'session_speakers',
        'event_sessions',
        'tracks',
        'speakers',
        'payments',
        'registrations',
        'attendees',
        'ticket_types',
        'events',
        'api_keys',
        'verification_tokens',
        'users',
        'organizations',
    ):
        op.drop_table(table)
