"""
Error taxonomy.

Only ConfigurationError is allowed to abort a replication run. Everything
else is scoped to one string, one entry, or one collection and is recorded
rather than raised past the orchestrator.
"""

from __future__ import annotations

from typing import Any


class AutoTranslateError(Exception):
    """Base class for all errors raised by this package."""
    pass


class ConfigurationError(AutoTranslateError):
    """Target locale is not registered with the store (or similar setup problem)."""
    pass


class ProviderError(AutoTranslateError):
    """The translation provider failed for a single call."""
    pass


class DiscoveryError(AutoTranslateError):
    """A collection could not be fetched by any strategy."""

    def __init__(self, collection: str, message: str):
        self.collection = collection
        super().__init__(f"{collection}: {message}")


class MissingIdentityError(AutoTranslateError):
    """A source entry has no document identity to attach a variant to."""

    def __init__(self, collection: str, entry_id: Any):
        self.collection = collection
        self.entry_id = entry_id
        super().__init__("Missing documentId")


class IntegrityError(AutoTranslateError):
    """A created variant does not carry the identity or locale that was requested."""

    def __init__(self, message: str, entry: dict[str, Any] | None = None):
        self.entry = entry
        super().__init__(message)


class CollectionNotFoundError(AutoTranslateError):
    """The store has no collection with the given name."""
    pass


class EntryNotFoundError(AutoTranslateError):
    """The store has no entry with the given id."""
    pass


class LinkRepairWarning(UserWarning):
    """Non-fatal finding while repairing an entry's link set."""
    pass
