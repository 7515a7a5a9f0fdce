from __future__ import annotations

from typing import Any

from center_offers.models.entry import EntityStatus


def check_entry_status(entry: Any) -> EntityStatus:
    """Map an entry's lifecycle predicates to a single status.

    First match wins: archived, published, changed, draft. An entry for which
    none of them hold is reported as ``new``.
    """
    if entry.is_archived():
        return "archived"
    if entry.is_published():
        return "published"
    if entry.is_updated():
        return "changed"
    if entry.is_draft():
        return "draft"
    return "new"
