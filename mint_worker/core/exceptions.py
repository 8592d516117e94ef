"""
Custom exception classes for the minting worker.
Provides structured error handling across all modules.
"""

from typing import Any, Optional, Dict


class MintWorkerException(Exception):
    """Base exception class for the minting worker."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(MintWorkerException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)


class DatabaseError(MintWorkerException):
    """Raised when there's a database error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


class JobStoreError(DatabaseError):
    """Raised when a job state write cannot be trusted to have been applied."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.code = "JOB_STORE_ERROR"


class SubmitterError(MintWorkerException):
    """Raised when the transaction submitter cannot be set up."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "SUBMITTER_ERROR", details)


class ValidationError(MintWorkerException):
    """Raised when data validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class WorkerError(MintWorkerException):
    """Raised when the run loop is used incorrectly."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "WORKER_ERROR", details)


class MintingRecordNotFoundError(ValidationError):
    """Raised when a minting record is not found."""

    def __init__(self, mint_id: str):
        super().__init__(
            f"Minting record not found: {mint_id}",
            {"mint_id": mint_id}
        )
