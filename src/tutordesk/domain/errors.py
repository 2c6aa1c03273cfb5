"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PermissionDeniedError(DomainError):
    """The signed-in staff member may not perform the operation."""


class AuthError(DomainError):
    """Sign-in failed or no session is active."""


class StoreError(RuntimeError):
    """Record store failure (network, database)."""


class BatchCommitFailure(StoreError):
    """An atomic batch failed; none of its writes were applied."""


def invalid_credentials() -> str:
    """Return message for a failed sign-in."""
    return "Invalid email or password."


def not_signed_in() -> str:
    """Return message when an operation needs a session."""
    return "You must sign in first."


def staff_profile_missing(email: str) -> str:
    """Return message when an identity has no staff record."""
    return f"No staff member is registered with email '{email}'"


def admin_required() -> str:
    """Return message for administrator-only operations."""
    return "Only administrators can do this."


def record_not_editable(kind: str, record_id: str) -> str:
    """Return message when the policy denies an edit."""
    return f"You are not allowed to change {kind} {record_id}"


def client_not_found(client_id: str) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def staff_not_found(handle: str) -> str:
    """Return message for missing staff member."""
    return f"Staff member '{handle}' not found"


def document_not_found(collection: str, doc_id: str) -> str:
    """Return message for a missing document."""
    return f"Document {doc_id} not found in '{collection}'"


def duplicate_billing_entry(client_id: str, period: str) -> str:
    """Return message when a client already has an entry for a period."""
    return f"Client {client_id} already has a billing entry for {period}"


def duplicate_account(email: str) -> str:
    """Return message for an email that already has an identity."""
    return f"An account for '{email}' already exists"


def required_field(name: str) -> str:
    """Return message for an empty required field."""
    return f"{name} is required"


def batch_commit_failed() -> str:
    """Return the generic message shown when a batch write fails."""
    return "Could not save changes. Nothing was written; please try again."


def store_write_failed() -> str:
    """Return the generic message shown when a single write fails."""
    return "Could not save changes; please try again."
