"""Errors raised by the store layer."""

from sqlalchemy.exc import SQLAlchemyError


class StoreError(Exception):
    """Raised when the store rejects or fails an operation; message is the driver's."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @classmethod
    def from_sqlalchemy(cls, exc: SQLAlchemyError) -> "StoreError":
        """Build from a SQLAlchemy error, preferring the DBAPI message over the wrapper's."""
        orig = getattr(exc, "orig", None)
        message = str(orig).strip() if orig is not None else str(exc).strip()
        return cls(message or type(exc).__name__)
