from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pytest

from center_offers.services.contentful import (
    ContentfulClient,
    ContentfulConfig,
    ContentfulError,
    Entry,
    EntryCollection,
)


def entry_payload(
    entry_id: str,
    content_type: str,
    fields: Optional[Dict[str, Any]] = None,
    version: int = 2,
    published_version: Optional[int] = 1,
    archived_version: Optional[int] = None,
) -> Dict[str, Any]:
    sys: Dict[str, Any] = {
        "id": entry_id,
        "type": "Entry",
        "version": version,
        "contentType": {"sys": {"type": "Link", "linkType": "ContentType", "id": content_type}},
    }
    if published_version is not None:
        sys["publishedVersion"] = published_version
    if archived_version is not None:
        sys["archivedVersion"] = archived_version
    return {"sys": sys, "fields": fields or {}}


def link(entry_id: str, locale: str = "en-US") -> Dict[str, Any]:
    return {locale: {"sys": {"type": "Link", "linkType": "Entry", "id": entry_id}}}


def business(entry_id: str, content_type: str, center: str, name: str = "", **kw: Any) -> Entry:
    fields = {
        "displayName": {"en-US": name or entry_id},
        "shortDescription": {"en-US": f"{name or entry_id} description"},
        "center": link(center),
    }
    return Entry(entry_payload(entry_id, content_type, fields, **kw))


def offer(entry_id: str, business_id: Optional[str] = None, **kw: Any) -> Entry:
    fields: Dict[str, Any] = {
        "title": {"en-US": f"Offer {entry_id}"},
        "summary": {"en-US": f"Summary {entry_id}"},
    }
    if business_id is not None:
        fields["business"] = link(business_id)
    return Entry(entry_payload(entry_id, "offer", fields, **kw))


class FakeEnvironment:
    """In-memory stand-in for a CMA environment honouring content_type, center filter, skip and limit."""

    def __init__(self, entries: List[Entry], fail_on: Optional[str] = None) -> None:
        self.entries = list(entries)
        self.queries: List[Dict[str, Any]] = []
        self.fail_on = fail_on

    def get_entries(self, query: Dict[str, Any]) -> EntryCollection:
        self.queries.append(dict(query))
        if self.fail_on and query.get("content_type") == self.fail_on:
            raise ContentfulError("Contentful API error 429: Rate limit exceeded", status_code=429, error_id="RateLimitExceeded")
        matches = [e for e in self.entries if e.content_type_id == query.get("content_type")]
        center = query.get("fields.center.sys.id")
        if center is not None:
            matches = [e for e in matches if e.link_id("center") == center]
        skip = int(query.get("skip") or 0)
        limit = int(query.get("limit") or 1000)
        return EntryCollection(items=matches[skip : skip + limit], skip=skip, limit=limit, total=len(matches))


class FakeSpace:
    def __init__(self, environment: FakeEnvironment) -> None:
        self.environment = environment
        self.requested: List[str] = []

    def get_environment(self, environment_id: str) -> FakeEnvironment:
        self.requested.append(environment_id)
        return self.environment


class FakeClient(ContentfulClient):
    def __init__(self, environment: FakeEnvironment, config: Optional[ContentfulConfig] = None) -> None:
        super().__init__(config or ContentfulConfig(access_token="token", space_id="space1"))
        self.space = FakeSpace(environment)
        self.spaces_requested: List[str] = []

    def get_space(self, space_id: str) -> FakeSpace:  # type: ignore[override]
        self.spaces_requested.append(space_id)
        return self.space


@pytest.fixture
def center_entries() -> List[Entry]:
    """Center C with stores S1, S2, restaurant R1 and offers O1..O4 (O4 unlinked)."""
    return [
        business("S1", "store", "C", name="Shoe Shop"),
        business("S2", "store", "C", name="Book Store"),
        business("R1", "restaurant", "C", name="Noodle Bar"),
        business("S9", "store", "OTHER", name="Elsewhere"),
        offer("O1", "S1"),
        offer("O2", "S1"),
        offer("O3", "R1"),
        offer("O4"),
        offer("O5", "S9"),
    ]


@pytest.fixture
def fake_env(center_entries: List[Entry]) -> FakeEnvironment:
    return FakeEnvironment(center_entries)


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger("center_offers")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
