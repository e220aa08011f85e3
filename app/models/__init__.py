"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.report import Report
from app.models.vulnerability import Vulnerability

__all__ = ["Base", "Report", "Vulnerability"]
