"""
Storage abstractions.

- ContentStore → the CMS holding locale-aware entries
- LocaleRegistry → the CMS's configured locales
"""

from autotranslate.storage.base import ContentStore, LocaleRegistry
from autotranslate.storage.local import InMemoryContentStore, InMemoryLocaleRegistry, ResponseShape

__all__ = [
    "ContentStore",
    "LocaleRegistry",
    "InMemoryContentStore",
    "InMemoryLocaleRegistry",
    "ResponseShape",
]
