"""
Errors surfaced to callers of the company repository.

Each carries an HTTP-style status so a web layer can map it directly,
and the offending key when there is one.
"""

from typing import Optional


class CompanyStoreError(Exception):
    """Base class for declared repository errors."""

    status = 500

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.key = key

    def to_dict(self) -> dict:
        return {"error": {"message": self.message, "status": self.status}}


class BadRequestError(CompanyStoreError):
    """Raised when the request itself is invalid (duplicate handle, empty payload)."""

    status = 400


class NotFoundError(CompanyStoreError):
    """Raised when the referenced company does not exist."""

    status = 404


def is_unique_violation(exception: Exception) -> bool:
    """
    Determine if a persistence error is a unique-constraint violation.

    Args:
        exception: Usually a sqlalchemy IntegrityError

    Returns:
        True for a duplicate key, False for other constraint failures
    """
    orig = getattr(exception, "orig", exception)

    # psycopg / psycopg2 expose the SQLSTATE
    if getattr(orig, "pgcode", None) == "23505" or getattr(orig, "sqlstate", None) == "23505":
        return True

    error_str = str(orig).lower()
    unique_keywords = [
        'unique constraint',
        'duplicate key',
        'primary key constraint',
    ]

    return any(keyword in error_str for keyword in unique_keywords)
