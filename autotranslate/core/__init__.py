"""
Core module - data models, errors and the publication predicate.

This module contains:
- models: collections, entries, locales and run results
- publication: the derived "is published" rule
- errors: error taxonomy
- utils: shared utility functions
"""

from autotranslate.core.models import (
    CollectionSchema,
    Entry,
    FieldKind,
    LanguageInfo,
    LinkedLocale,
    LocaleInfo,
    RepairReport,
    ReplicationFailure,
    ReplicationResult,
)
from autotranslate.core.errors import (
    AutoTranslateError,
    CollectionNotFoundError,
    ConfigurationError,
    DiscoveryError,
    EntryNotFoundError,
    IntegrityError,
    LinkRepairWarning,
    MissingIdentityError,
    ProviderError,
)
from autotranslate.core.publication import is_published

__all__ = [
    # Models
    "CollectionSchema",
    "Entry",
    "FieldKind",
    "LanguageInfo",
    "LinkedLocale",
    "LocaleInfo",
    "RepairReport",
    "ReplicationFailure",
    "ReplicationResult",
    # Errors
    "AutoTranslateError",
    "CollectionNotFoundError",
    "ConfigurationError",
    "DiscoveryError",
    "EntryNotFoundError",
    "IntegrityError",
    "LinkRepairWarning",
    "MissingIdentityError",
    "ProviderError",
    # Publication
    "is_published",
]
