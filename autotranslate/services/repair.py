"""
Consistency repair for cross-locale links.

Fixes the two defects the legacy link-list scheme accumulates:
- self-reference: an entry listed in its own link set
- dangling reference: a linked id that no longer resolves

Each is detected and persisted independently, relative order of the
surviving links is kept, and there is no dry-run. Missing identities are
reported as LinkRepairWarning and never block the other repairs.
"""

from __future__ import annotations

import logging
from typing import Any

from autotranslate.core.errors import LinkRepairWarning
from autotranslate.core.models import LINKS_FIELD, Entry, RepairReport
from autotranslate.services.discovery import normalize_entries
from autotranslate.storage.base import ContentStore

logger = logging.getLogger(__name__)


def _same_id(a: Any, b: Any) -> bool:
    # Callers pass ids from JSON bodies, so "3" and 3 are the same entry
    return a == b or str(a) == str(b)


class ConsistencyRepair:
    """Diagnoses and fixes one entry's link set at a time."""

    def __init__(self, store: ContentStore):
        self.store = store

    async def repair_entry(self, collection: str, entry_id: Any) -> RepairReport:
        """
        Remove self-references and dangling references from an entry's links.

        A missing entry is a no-op and reported with `found=False`.
        """
        logger.info(f"Diagnosing localization issues for {collection} ID {entry_id}")

        raw = await self.store.find_one(collection, entry_id, populate=[LINKS_FIELD])
        entry = Entry.from_raw(raw)
        if entry is None:
            logger.warning(f"Entry {entry_id} not found")
            return RepairReport(collection=collection, entry_id=entry_id, found=False)

        report = RepairReport(collection=collection, entry_id=entry_id)
        logger.info(
            f"Entry {entry_id} locale: {entry.locale}, documentId: {entry.document_id}, "
            f"localizations: {entry.linked_ids}"
        )

        if entry.document_id is None:
            self._warn(report, f"Entry {entry_id} is missing documentId!")

        links = entry.linked_ids

        if any(_same_id(link, entry_id) for link in links):
            logger.warning(f"Entry {entry_id} has self-reference in localizations!")
            links = [link for link in links if not _same_id(link, entry_id)]
            await self.store.update(collection, entry.id, {LINKS_FIELD: links})
            report.self_reference_removed = True
            logger.info(f"Fixed self-reference for entry {entry_id}")

        dangling: list[Any] = []
        for link in links:
            try:
                linked = Entry.from_raw(await self.store.find_one(collection, link))
            except Exception as e:
                logger.error(f"Failed to check linked entry {link}: {e}")
                report.warnings.append(f"Failed to check linked entry {link}: {e}")
                continue

            if linked is None:
                logger.warning(f"Linked entry {link} not found - removing from localizations")
                dangling.append(link)
            elif linked.document_id is None:
                self._warn(report, f"Linked entry {link} is missing documentId!")

        if dangling:
            links = [link for link in links if link not in dangling]
            await self.store.update(collection, entry.id, {LINKS_FIELD: links})
            report.dangling_removed = dangling

        report.links = links
        return report

    async def repair_entries(self, targets: dict[str, list[Any]]) -> list[RepairReport]:
        """Repair many entries; one failing id does not stop the batch."""
        reports: list[RepairReport] = []
        for collection, entry_ids in targets.items():
            for entry_id in entry_ids:
                try:
                    reports.append(await self.repair_entry(collection, entry_id))
                except Exception as e:
                    logger.error(f"Failed to fix {collection} ID {entry_id}: {e}")
                    reports.append(RepairReport(
                        collection=collection,
                        entry_id=entry_id,
                        found=False,
                        warnings=[str(e)],
                    ))
        return reports

    async def find_missing_identities(self, collection: str) -> list[Entry]:
        """Entries of every locale that have no documentId."""
        entries = normalize_entries(await self.store.query(collection))
        missing = [entry for entry in entries if entry.document_id is None]
        for entry in missing:
            logger.warning(
                f"Entry ID {entry.id} in {collection} is missing documentId "
                f"(locale: {entry.locale or 'not set'})"
            )
        return missing

    def _warn(self, report: RepairReport, message: str) -> None:
        warning = LinkRepairWarning(message)
        logger.warning(str(warning))
        report.warnings.append(str(warning))
