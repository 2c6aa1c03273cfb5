"""Record store and identity layer for tutordesk."""

from tutordesk.database.base import RecordStore, WriteBatch
from tutordesk.database.identity import Identity, IdentityProvider
from tutordesk.database.factories import create_identity_provider, create_sqlite_store

__all__ = [
    "RecordStore",
    "WriteBatch",
    "Identity",
    "IdentityProvider",
    "create_identity_provider",
    "create_sqlite_store",
]
