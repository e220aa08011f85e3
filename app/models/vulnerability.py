"""ORM model for persisted vulnerability rows."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, func

from app.models.base import Base


class Vulnerability(Base):
    """
    One vulnerability finding from an uploaded scan export.

    Rows inserted by the direct upload path have no report_id; rows from the
    report-oriented path belong to a report and are deleted with it.
    """

    __tablename__ = "vulnerabilities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ip_address = Column(Text, nullable=False, index=True)
    cve = Column(Text, nullable=False)
    severity = Column(Text, nullable=False, index=True)
    plugin_name = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    report_id = Column(
        Integer,
        ForeignKey("reports.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
