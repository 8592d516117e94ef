"""
MintingRecord model - one persisted request to mint a single NFT.
"""

from datetime import datetime
from typing import Optional
from enum import Enum

from sqlalchemy import String, Integer, Text, Index, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin


class MintStatus(str, Enum):
    """Minting job lifecycle status."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class MintingRecord(BaseModel, TimestampMixin):
    """Minting job row, written by the producer and advanced by the worker."""

    __tablename__ = "minting_records"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Caller-assigned job identity, stable across retries
    mint_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        comment="Caller-assigned job identifier"
    )

    # Payload
    card_type: Mapped[str] = mapped_column(
        String(100),
        comment="Card type to mint"
    )

    level: Mapped[int] = mapped_column(
        Integer,
        comment="Card level"
    )

    title: Mapped[str] = mapped_column(
        String(200),
        comment="Card title"
    )

    recipient: Mapped[str] = mapped_column(
        String(100),
        comment="Recipient wallet address"
    )

    rarity: Mapped[str] = mapped_column(
        String(50),
        comment="Card rarity"
    )

    rank: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Card rank, submitted as 1 when absent"
    )

    # Lifecycle
    status: Mapped[MintStatus] = mapped_column(
        SQLEnum(
            MintStatus,
            name="mintstatus",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=MintStatus.PENDING,
        server_default=MintStatus.PENDING.value,
        comment="pending, completed or failed"
    )

    retry_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        comment="Number of failed attempts so far"
    )

    error_message: Mapped[Optional[str]] = mapped_column(
        Text,
        comment="Last failure reason"
    )

    transaction_digest: Mapped[Optional[str]] = mapped_column(
        String(128),
        comment="Transaction reference, set only when completed"
    )

    completed_at: Mapped[Optional[datetime]] = mapped_column(
        comment="When the mint was confirmed"
    )

    __table_args__ = (
        Index("idx_minting_status_retry_created", "status", "retry_count", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<MintingRecord(id={self.id}, mint_id={self.mint_id}, status={self.status.value})>"