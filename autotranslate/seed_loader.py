"""
Seed loader.

Loads a YAML description of collections, entries and locales into the
in-memory store. Used by the demo and handy for fixtures.

Format:
    stable_identity: true
    default_locale: en
    locales:
      - {code: en, name: English, default: true}
      - {code: es, name: Spanish}
    collections:
      article:
        attributes: {title: string, body: richtext, views: integer}
        options: {draftAndPublish: true, i18n: {localized: true}}
        shape: paginated
        entries:
          - {documentId: doc-1, locale: en, title: Hello, publishedAt: "2024-01-01T00:00:00Z"}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from autotranslate.core.models import LocaleInfo
from autotranslate.storage.local import InMemoryContentStore, InMemoryLocaleRegistry, ResponseShape


class SeedLoader:
    """Builds a local store and locale registry from seed data."""

    def load_file(self, path: Path | str) -> tuple[InMemoryContentStore, InMemoryLocaleRegistry]:
        """Load seed data from a YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return self.load(data)

    def load(self, data: dict[str, Any]) -> tuple[InMemoryContentStore, InMemoryLocaleRegistry]:
        """Load seed data from an already parsed mapping."""
        default_locale = data.get("default_locale", "en")
        store = InMemoryContentStore(
            supports_stable_identity=data.get("stable_identity", True),
            response_shape=ResponseShape(data.get("shape", ResponseShape.LIST.value)),
            default_locale=default_locale,
        )

        for name, spec in (data.get("collections") or {}).items():
            store.add_collection(
                name,
                spec.get("attributes") or {},
                spec.get("options") or {},
                shape=ResponseShape(spec["shape"]) if spec.get("shape") else None,
            )
            for entry in spec.get("entries") or []:
                store.add_entry(name, entry)

        locales = InMemoryLocaleRegistry([
            LocaleInfo(
                code=locale["code"],
                name=locale.get("name") or locale["code"].upper(),
                is_default=locale.get("default", locale["code"] == default_locale),
            )
            for locale in data.get("locales") or []
        ])
        return store, locales


def load_seed(path: Path | str) -> tuple[InMemoryContentStore, InMemoryLocaleRegistry]:
    """Convenience function to load a seed file."""
    return SeedLoader().load_file(path)
