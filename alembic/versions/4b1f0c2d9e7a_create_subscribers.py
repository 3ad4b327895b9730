"""create_subscribers

Revision ID: 4b1f0c2d9e7a
Revises:
Create Date: 2026-10-17 09:12:44.318205

Tables:
- subscribers: Notification subscribers keyed by email, with the confirmed payment date
- processed_webhook_events: Stripe event ids already reconciled (redelivery ledger)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1f0c2d9e7a'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create subscriber and webhook ledger tables."""

    op.create_table(
        'subscribers',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('phone', sa.String(64), nullable=False),

        # Origin is required, destination optional
        sa.Column('country_from', sa.String(128), nullable=False),
        sa.Column('city_from', sa.String(128), nullable=False),
        sa.Column('country_to', sa.String(128), nullable=True),
        sa.Column('city_to', sa.String(128), nullable=True),

        sa.Column('subscription_type', sa.String(64), nullable=False),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=True),

        # Standard timestamps
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),

        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_subscribers_id', 'subscribers', ['id'])
    op.create_index('ix_subscribers_email', 'subscribers', ['email'], unique=True)
    op.create_index('ix_subscribers_subscription_type', 'subscribers', ['subscription_type'])

    op.create_table(
        'processed_webhook_events',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('event_id', sa.String(255), nullable=False),
        sa.Column('event_type', sa.String(128), nullable=False),
        sa.Column('state_changed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_processed_webhook_events_id', 'processed_webhook_events', ['id'])
    op.create_index(
        'ix_processed_webhook_events_event_id',
        'processed_webhook_events',
        ['event_id'],
        unique=True,
    )


def downgrade() -> None:
    """Drop subscriber and webhook ledger tables."""
    op.drop_index('ix_processed_webhook_events_event_id', table_name='processed_webhook_events')
    op.drop_index('ix_processed_webhook_events_id', table_name='processed_webhook_events')
    op.drop_table('processed_webhook_events')

    op.drop_index('ix_subscribers_subscription_type', table_name='subscribers')
    op.drop_index('ix_subscribers_email', table_name='subscribers')
    op.drop_index('ix_subscribers_id', table_name='subscribers')
    op.drop_table('subscribers')
