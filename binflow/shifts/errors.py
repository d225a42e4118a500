"""
Shift Reporting Errors

Failure taxonomy shared by the service layer and the API boundary.
"""

from typing import Optional


class BinFlowError(Exception):
    """Base class for all domain failures"""

    status_code = 500

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class NotFoundError(BinFlowError):
    """Referenced id does not exist"""

    status_code = 404


class ValidationFailure(BinFlowError):
    """Missing field or path/body id mismatch"""

    status_code = 400


class ConcurrencyConflict(BinFlowError):
    """Update was made against a stale version of the row"""

    status_code = 409


class PersistenceFailure(BinFlowError):
    """Connectivity or constraint error from the storage layer"""

    status_code = 500


class ConfigurationFailure(BinFlowError):
    """No usable storage connection"""

    status_code = 500
