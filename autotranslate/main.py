"""
Auto-translate - demo entry point.

Seeds an in-memory store, replicates its published content into every
configured target locale, runs it a second time to show nothing is
duplicated, and repairs a broken link set.

    python -m autotranslate.main
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from autotranslate.config import get_settings
from autotranslate.seed_loader import load_seed
from autotranslate.services.translation import create_service

DEFAULT_SEED = Path(__file__).parent.parent / "config" / "seed.yaml"


async def demo():
    """Run the replication demo against a seeded local store."""
    settings = get_settings()
    seed_file = Path(settings.seed_file) if settings.seed_file else DEFAULT_SEED

    print("=" * 60)
    print("AUTO-TRANSLATE DEMO")
    print("=" * 60)
    print()

    print(f"Loading seed data from {seed_file}...")
    store, locales = load_seed(seed_file)
    for name in await store.list_collections():
        print(f"  ✓ {name}: {len(store.all_entries(name))} entries")
    print()

    service = create_service(store, locales, settings)
    print(f"Provider: {settings.translation_provider} (API key set: {settings.has_api_key})")

    available = await service.list_available_locales()
    print(f"Target locales: {', '.join(locale.code for locale in available)}")
    print()

    try:
        for run in (1, 2):
            print(f"Replication run {run}...")
            results = await service.replicate_to_all()
            for locale, result in results.items():
                if result.aborted:
                    print(f"  ✗ {locale}: {result.aborted}")
                    continue
                print(f"  • {locale}: {result.message}")
                for failure in result.errors:
                    print(f"      - {failure.collection} #{failure.entry_id}: {failure.error}")
            print()

        print("Checking for missing documentIds...")
        for name in await store.list_collections():
            missing = await service.find_missing_identities(name)
            print(f"  • {name}: {len(missing)} missing")
        print()

        print("Repairing link sets...")
        for name in await store.list_collections():
            for record in store.all_entries(name):
                report = await service.repair_entry(name, record["id"])
                if report.changed:
                    print(
                        f"  ✓ {name} #{record['id']}: self-reference removed="
                        f"{report.self_reference_removed}, dangling={report.dangling_removed}"
                    )
        print()
    finally:
        await service.aclose()

    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


def main():
    """Main entry point."""
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(demo())


if __name__ == "__main__":
    main()
