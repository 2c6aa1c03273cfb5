"""Factory functions for creating record stores and identity providers."""

import os
from pathlib import Path
from typing import Optional

from tutordesk.database.identity import SQLAlchemyIdentityProvider
from tutordesk.database.sqlalchemy_db import SQLAlchemyRecordStore

DB_PATH_ENV = "TUTORDESK_DB_PATH"


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyRecordStore:
    """Create a SQLite-backed record store.

    Args:
        database_path: Path to SQLite database file. If None, checks TUTORDESK_DB_PATH
            environment variable, then defaults to ~/.tutordesk/tutordesk.db

    Returns:
        SQLAlchemyRecordStore instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        # Default to ~/.tutordesk/tutordesk.db
        home = Path.home()
        db_dir = home / ".tutordesk"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "tutordesk.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyRecordStore(database_url)


def create_identity_provider(
    store: SQLAlchemyRecordStore, rounds: int = 12
) -> SQLAlchemyIdentityProvider:
    """Create an identity provider sharing the store's database.

    Args:
        store: Record store whose engine holds the identities table
        rounds: bcrypt cost factor for new password hashes
    """
    return SQLAlchemyIdentityProvider(store.session_factory, rounds=rounds)
