"""abstract submissions and session linkage

Revision ID: 0002_abstracts
Revises: 0001_initial
Create Date: 2026-10-19 14:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0002_abstracts'
down_revision: Union[str, None] = '0001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), **kwargs)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'abstracts',
        _uuid('id', primary_key=True, server_default=sa.text('gen_random_uuid()')),
        _uuid('event_id', sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        _uuid('speaker_id', sa.ForeignKey('speakers.id', ondelete='CASCADE'), nullable=False),
        _uuid('track_id', sa.ForeignKey('tracks.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='SUBMITTED', nullable=False),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('review_score', sa.Integer(), nullable=True),
        sa.Column('management_token_id', sa.String(length=32), nullable=True, unique=True),
        sa.Column('management_token_hash', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('reviewed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('review_score BETWEEN 0 AND 100', name='ck_abstracts_review_score'),
    )
    op.create_index('idx_abstracts_event_status', 'abstracts', ['event_id', 'status'], unique=False)
    op.create_index('idx_abstracts_speaker_id', 'abstracts', ['speaker_id'], unique=False)

    op.add_column(
        'event_sessions',
        _uuid('abstract_id', sa.ForeignKey('abstracts.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_unique_constraint('uq_event_sessions_abstract_id', 'event_sessions', ['abstract_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_constraint('uq_event_sessions_abstract_id', 'event_sessions', type_='unique')
    op.drop_column('event_sessions', 'abstract_id')
    op.drop_index('idx_abstracts_speaker_id', table_name='abstracts')
    op.drop_index('idx_abstracts_event_status', table_name='abstracts')
    op.drop_table('abstracts')
