"""Minimal Contentful Content Management API client.

Only the read paths the center panel needs are covered: resolving a space and
an environment, and listing entries with query filters.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.contentful.com"
DEFAULT_LOCALE = "en-US"
# Hard cap on page size enforced by the CMA
MAX_PAGE_LIMIT = 1000


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


@dataclass
class ContentfulConfig:
    access_token: Optional[str] = field(default_factory=lambda: os.environ.get("CONTENTFUL_MANAGEMENT_TOKEN"))
    base_url: str = field(default_factory=lambda: os.environ.get("CONTENTFUL_BASE_URL", DEFAULT_BASE_URL))
    space_id: Optional[str] = field(default_factory=lambda: os.environ.get("CONTENTFUL_SPACE_ID"))
    environment_id: str = field(default_factory=lambda: os.environ.get("CONTENTFUL_ENVIRONMENT", "master"))
    locale: str = field(default_factory=lambda: os.environ.get("CONTENTFUL_LOCALE", DEFAULT_LOCALE))
    page_limit: int = field(default_factory=lambda: _env_int("CONTENTFUL_PAGE_LIMIT", MAX_PAGE_LIMIT))
    max_pages: int = field(default_factory=lambda: _env_int("CONTENTFUL_MAX_PAGES", 100))
    timeout_secs: float = field(default_factory=lambda: _env_float("CONTENTFUL_TIMEOUT_SECS", 15.0))
    user_agent: str = field(default_factory=lambda: os.environ.get("HTTP_USER_AGENT", "CenterOffers/1.0"))

    def __post_init__(self) -> None:
        if not 1 <= self.page_limit <= MAX_PAGE_LIMIT:
            raise ValueError(f"page_limit must be between 1 and {MAX_PAGE_LIMIT}, got {self.page_limit}")
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {self.max_pages}")


class ContentfulError(Exception):
    """Raised when the CMA rejects a call or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, error_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_id = error_id


def path_segment(value: Optional[str], what: str) -> str:
    """Escape one URL path segment; empty ids are rejected before any request is sent."""
    if not value:
        raise ContentfulError(f"Missing Contentful {what} id")
    return quote(str(value), safe="")


class Entry:
    """Read-only handle over a raw CMA entry payload."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self.sys: Dict[str, Any] = dict(data.get("sys") or {})
        self.fields: Dict[str, Any] = dict(data.get("fields") or {})

    def __repr__(self) -> str:
        return f"Entry(id={self.id!r}, content_type={self.content_type_id!r})"

    @property
    def id(self) -> str:
        return str(self.sys.get("id") or "")

    @property
    def content_type_id(self) -> str:
        ct = self.sys.get("contentType") or {}
        return str((ct.get("sys") or {}).get("id") or "")

    @property
    def version(self) -> int:
        return int(self.sys.get("version") or 0)

    @property
    def published_version(self) -> Optional[int]:
        v = self.sys.get("publishedVersion")
        return int(v) if v is not None else None

    # Lifecycle predicates follow the semantics of the official SDKs.
    def is_archived(self) -> bool:
        return self.sys.get("archivedVersion") is not None

    def is_published(self) -> bool:
        pv = self.published_version
        return pv is not None and self.version == pv + 1

    def is_updated(self) -> bool:
        pv = self.published_version
        return pv is not None and self.version >= pv + 2

    def is_draft(self) -> bool:
        return self.published_version is None

    def field(self, name: str, locale: str = DEFAULT_LOCALE) -> Any:
        """Return the value of ``name`` under ``locale`` or None when absent."""
        value = self.fields.get(name)
        if not isinstance(value, Mapping):
            return None
        return value.get(locale)

    def link_id(self, name: str, locale: str = DEFAULT_LOCALE) -> Optional[str]:
        """Return the id a link field points at, or None for a missing/malformed link."""
        link = self.field(name, locale)
        if not isinstance(link, Mapping):
            return None
        sys = link.get("sys")
        if not isinstance(sys, Mapping):
            return None
        target = sys.get("id")
        return str(target) if target else None


@dataclass
class EntryCollection:
    items: List[Entry]
    skip: int = 0
    limit: int = MAX_PAGE_LIMIT
    total: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "EntryCollection":
        items = [Entry(it) for it in payload.get("items") or [] if isinstance(it, Mapping)]
        return cls(
            items=items,
            skip=int(payload.get("skip") or 0),
            limit=int(payload.get("limit") or MAX_PAGE_LIMIT),
            total=int(payload.get("total") or 0),
        )


class ContentfulClient:
    """Thin client for the Content Management API.

    - Authentication: personal access / app token via ``Authorization: Bearer <token>``.
    - Errors: non-2xx responses and transport failures raise ``ContentfulError``.
    """

    def __init__(self, config: ContentfulConfig | None = None, session: requests.Session | None = None) -> None:
        self.config = config or ContentfulConfig()
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/vnd.contentful.management.v1+json",
        }
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    def request(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"
        logger.debug("GET %s params=%s", url, dict(params or {}))
        try:
            resp = self.session.get(url, params=params, headers=self._headers(), timeout=self.config.timeout_secs)
        except requests.RequestException as e:
            raise ContentfulError(f"Request to {url} failed: {e}") from e
        if not resp.ok:
            raise self._error_from_response(resp)
        try:
            return resp.json()
        except ValueError as e:
            raise ContentfulError(f"Invalid JSON from {url}", status_code=resp.status_code) from e

    @staticmethod
    def _error_from_response(resp: requests.Response) -> ContentfulError:
        # CMA errors look like {"sys": {"type": "Error", "id": "NotFound"}, "message": "..."}
        error_id = None
        message = resp.reason or "request failed"
        try:
            body = resp.json()
            error_id = (body.get("sys") or {}).get("id")
            message = body.get("message") or message
        except ValueError:
            pass
        return ContentfulError(
            f"Contentful API error {resp.status_code}: {message}",
            status_code=resp.status_code,
            error_id=error_id,
        )

    def get_space(self, space_id: str) -> "Space":
        data = self.request(f"/spaces/{path_segment(space_id, 'space')}")
        return Space(self, data)


class Space:
    def __init__(self, client: ContentfulClient, data: Mapping[str, Any]) -> None:
        self.client = client
        self.id = str((data.get("sys") or {}).get("id") or "")
        self.name = data.get("name")

    def get_environment(self, environment_id: str) -> "Environment":
        data = self.client.request(
            f"/spaces/{path_segment(self.id, 'space')}"
            f"/environments/{path_segment(environment_id, 'environment')}"
        )
        return Environment(self.client, self.id, data)


class Environment:
    def __init__(self, client: ContentfulClient, space_id: str, data: Mapping[str, Any]) -> None:
        self.client = client
        self.space_id = space_id
        self.id = str((data.get("sys") or {}).get("id") or "")

    def get_entries(self, query: Mapping[str, Any]) -> EntryCollection:
        payload = self.client.request(
            f"/spaces/{path_segment(self.space_id, 'space')}"
            f"/environments/{path_segment(self.id, 'environment')}/entries",
            params=query,
        )
        return EntryCollection.from_payload(payload)


def make_client(config: ContentfulConfig | None = None) -> ContentfulClient:
    return ContentfulClient(config or ContentfulConfig())
