"""SQLAlchemy models for the tutordesk record store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    JSON,
    PrimaryKeyConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Document(Base):
    """A schemaless document in one collection.

    The document body (including its own "id") is kept in a JSON column so
    every collection shares one table, the way a managed document database
    lays records out.
    """

    __tablename__ = "documents"

    collection = Column(String, nullable=False)
    doc_id = Column(String, nullable=False)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (PrimaryKeyConstraint("collection", "doc_id", name="pk_documents"),)


class IdentityAccount(Base):
    """Email/password identity used for sign-in."""

    __tablename__ = "identities"

    uid = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
