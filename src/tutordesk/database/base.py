"""Abstract record store interface."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from tutordesk.domain.entities import Collection

Document = dict[str, Any]
ChangeListener = Callable[[list[Document]], None]
Unsubscribe = Callable[[], None]


class WriteBatch(ABC):
    """Atomic multi-document write.

    Writes are buffered by ``set`` and applied all together by ``commit``;
    if the commit fails none of them are applied.
    """

    @abstractmethod
    def set(self, collection: Collection, doc_id: str, fields: Document) -> None:
        """Queue a full-document write (insert or overwrite)."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Apply every queued write atomically.

        Raises:
            BatchCommitFailure: If the store rejects the batch
        """
        pass


class RecordStore(ABC):
    """Abstract document store holding the tutordesk collections."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def new_id(self, collection: Collection) -> str:
        """Generate a fresh, unique document ID."""
        pass

    @abstractmethod
    def list_documents(self, collection: Collection) -> list[Document]:
        """List every document of a collection."""
        pass

    @abstractmethod
    def get_document(self, collection: Collection, doc_id: str) -> Optional[Document]:
        """Get a document by ID, or None if it does not exist."""
        pass

    @abstractmethod
    def query_documents(self, collection: Collection, filters: dict[str, Any]) -> list[Document]:
        """List documents whose fields equal every value in ``filters``."""
        pass

    @abstractmethod
    def insert_document(self, collection: Collection, doc_id: str, fields: Document) -> None:
        """Write a document under ``doc_id`` (overwrites an existing one)."""
        pass

    @abstractmethod
    def update_document(self, collection: Collection, doc_id: str, partial: Document) -> None:
        """Merge ``partial`` into an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    def delete_document(self, collection: Collection, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        pass

    @abstractmethod
    def batch(self) -> WriteBatch:
        """Start an atomic write batch."""
        pass

    @abstractmethod
    def subscribe(self, collection: Collection, on_change: ChangeListener) -> Unsubscribe:
        """Receive the collection's documents now and after every change.

        Returns:
            Callable that stops the notifications
        """
        pass
