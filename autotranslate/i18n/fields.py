"""
Entry-level translation.

Selection is schema-driven at the top level (only text kinds) and
value-shape-driven below it: a nested mapping has all of its keys treated as
translatable. Lists are never expanded.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from autotranslate.core.models import TEXT_KINDS, CollectionSchema
from autotranslate.i18n.translator import Translator


def select_translatable_fields(schema: CollectionSchema) -> set[str]:
    """Names of the fields whose declared kind is human-readable text."""
    return {name for name, kind in schema.attributes.items() if kind in TEXT_KINDS}


class EntryTranslator:
    """
    Produces a translated copy of an entry.

    The input is never mutated. Fields that are not selected (identifiers,
    relations, numbers, lists) are passed through as they are; removing
    store-managed fields is the caller's job.
    """

    def __init__(self, translator: Translator):
        self.translator = translator

    async def translate_entry(
        self,
        entry: Mapping[str, Any],
        schema: CollectionSchema,
        target: str,
        source: str | None = None,
    ) -> dict[str, Any]:
        selected = select_translatable_fields(schema)
        # Keep schema order so provider calls are deterministic
        fields = [name for name in schema.attributes if name in selected]
        return await self._translate_object(entry, fields, target, source, frozenset())

    async def _translate_object(
        self,
        obj: Mapping[str, Any],
        fields: list[str],
        target: str,
        source: str | None,
        seen: frozenset[int],
    ) -> dict[str, Any]:
        translated = dict(obj)
        seen = seen | {id(obj)}

        for field in fields:
            value = obj.get(field)
            if not value:
                continue

            if isinstance(value, str):
                translated[field] = await self.translator.translate(value, target, source)
            elif isinstance(value, Mapping) and id(value) not in seen:
                # Nested rich text: every key is a candidate
                translated[field] = await self._translate_object(
                    value, list(value.keys()), target, source, seen
                )

        return translated
