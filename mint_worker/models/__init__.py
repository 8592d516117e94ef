"""
Database models for the minting worker.

Contains the SQLAlchemy model for the minting job table.
"""

from .base import Base, BaseModel, TimestampMixin
from .minting_record import MintingRecord, MintStatus

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "MintingRecord",
    "MintStatus",
]
