"""
Transaction submitters for mint operations.
"""

from .base import TransactionSubmitter
from .dry_run_submitter import DryRunSubmitter
from .solana_submitter import SolanaMintSubmitter

__all__ = [
    "TransactionSubmitter",
    "DryRunSubmitter",
    "SolanaMintSubmitter",
]
