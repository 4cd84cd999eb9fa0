"""Services - discovery, replication, variant writing and link repair."""

from autotranslate.services.discovery import ContentDiscovery, normalize_entries
from autotranslate.services.writer import LinkListWriter, StableIdentityWriter, VariantWriter, writer_for
from autotranslate.services.replication import ReplicationOrchestrator
from autotranslate.services.repair import ConsistencyRepair
from autotranslate.services.translation import AutoTranslateService, create_service

__all__ = [
    "ContentDiscovery",
    "normalize_entries",
    "VariantWriter",
    "StableIdentityWriter",
    "LinkListWriter",
    "writer_for",
    "ReplicationOrchestrator",
    "ConsistencyRepair",
    "AutoTranslateService",
    "create_service",
]
