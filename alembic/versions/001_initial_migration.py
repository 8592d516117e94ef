"""Initial migration - minting_records

Revision ID: 001
Revises: 
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('minting_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('mint_id', sa.String(length=64), nullable=False, comment='Caller-assigned job identifier'),
        sa.Column('card_type', sa.String(length=100), nullable=False, comment='Card type to mint'),
        sa.Column('level', sa.Integer(), nullable=False, comment='Card level'),
        sa.Column('title', sa.String(length=200), nullable=False, comment='Card title'),
        sa.Column('recipient', sa.String(length=100), nullable=False, comment='Recipient wallet address'),
        sa.Column('rarity', sa.String(length=50), nullable=False, comment='Card rarity'),
        sa.Column('rank', sa.Integer(), nullable=True, comment='Card rank, submitted as 1 when absent'),
        sa.Column('status', sa.Enum('pending', 'completed', 'failed', name='mintstatus', native_enum=False, length=20), server_default='pending', nullable=False, comment='pending, completed or failed'),
        sa.Column('retry_count', sa.Integer(), server_default='0', nullable=False, comment='Number of failed attempts so far'),
        sa.Column('error_message', sa.Text(), nullable=True, comment='Last failure reason'),
        sa.Column('transaction_digest', sa.String(length=128), nullable=True, comment='Transaction reference, set only when completed'),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True, comment='When the mint was confirmed'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Row creation time'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Last modification time'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('mint_id')
    )
    op.create_index('idx_minting_status_retry_created', 'minting_records', ['status', 'retry_count', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_minting_status_retry_created', table_name='minting_records')
    op.drop_table('minting_records')
