"""
Database operations for minting jobs.
"""

from .job_repository import MintJobRepository

__all__ = ["MintJobRepository"]
