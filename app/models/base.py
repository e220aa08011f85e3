"""SQLAlchemy declarative Base shared by the report and vulnerability tables."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Index and foreign key names match those written by the migrations.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
