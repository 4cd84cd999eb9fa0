"""
Derived publication state.

Stores report "is this entry published?" in several inconsistent ways, so
the answer is a disjunction over every indicator we have seen. Discovery and
replication both call `is_published`; there is no second copy of the rule.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

PUBLISHED_AT = "publishedAt"
PUBLISHED_FLAG = "published"
STATUS = "status"
PUBLICATION_STATE = "publicationState"


def has_publish_timestamp(data: Mapping[str, Any]) -> bool:
    """True if a publish timestamp is present and non-empty."""
    return data.get(PUBLISHED_AT) not in (None, "")


def is_published(data: Mapping[str, Any]) -> bool:
    """
    Evaluate the published predicate for a raw entry.

    An entry is published if any of these hold:
    - the publish timestamp is set
    - the boolean published flag is True
    - status == "published"
    - publicationState == "live"
    - the publish timestamp is explicitly null and the published flag is
      not explicitly False (weakest indicator, last resort)
    """
    if has_publish_timestamp(data):
        return True
    if data.get(PUBLISHED_FLAG) is True:
        return True
    if data.get(STATUS) == "published":
        return True
    if data.get(PUBLICATION_STATE) == "live":
        return True
    # Key must be present; an absent timestamp is not the same as null.
    return (
        PUBLISHED_AT in data
        and data[PUBLISHED_AT] is None
        and data.get(PUBLISHED_FLAG) is not False
    )
