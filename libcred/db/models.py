"""ORM models. These map 1:1 to the Pydantic types but are SQLAlchemy models.

Tables: library_credentials
Every row carries org_id; names and uids are unique within an org.
"""

from sqlalchemy import Column, String, Integer, DateTime, JSON, Boolean, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase
from datetime import datetime, timezone


class Base(DeclarativeBase):
    pass


class LibraryCredentialModel(Base):
    __tablename__ = "library_credentials"
    id = Column(Integer, primary_key=True, autoincrement=True)
    org_id = Column(Integer, nullable=False, index=True)
    uid = Column(String(40), nullable=False)
    name = Column(String(190), nullable=False)
    type = Column(String(255), nullable=False)
    json_data = Column(JSON, default=dict)
    secure_json_data = Column(JSON, default=dict)       # key → Fernet token, never plaintext
    read_only = Column(Boolean, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("org_id", "name", name="uq_library_credential_org_name"),
        UniqueConstraint("org_id", "uid", name="uq_library_credential_org_uid"),
        Index("ix_library_credential_org_type", "org_id", "type"),
    )
