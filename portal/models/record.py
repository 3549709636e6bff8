"""Key-value row backing the record store."""

from sqlalchemy import Column, DateTime, String, Text
from portal.database import Base


class StoredRecord(Base):
    """One named value, stored as JSON text."""
    __tablename__ = "records"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime)
