"""Fetch every entry matching a query across CMA result pages."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from .contentful import MAX_PAGE_LIMIT, ContentfulError, Entry


logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 100


class PaginationLimitExceeded(ContentfulError):
    """Raised when a collection needs more pages than the configured cap."""


def get_paginated_entries(
    environment: Any,
    query: Mapping[str, Any],
    max_pages: int = DEFAULT_MAX_PAGES,
) -> List[Entry]:
    """Return all entries matching ``query``, following ``skip`` until ``total`` is reached.

    The query is copied; the caller's mapping is never modified. Fetching
    starts at the query's ``skip`` (0 when absent) and each page advances
    ``skip`` by the page limit reported by the API. The loop stops once the
    offset plus the page's items reaches ``total`` or a page comes back empty.
    Needing more than ``max_pages`` requests raises ``PaginationLimitExceeded``.
    """
    page_query = dict(query)
    page_query.setdefault("skip", 0)
    page_query.setdefault("limit", MAX_PAGE_LIMIT)
    limit = int(page_query["limit"])
    if not 1 <= limit <= MAX_PAGE_LIMIT:
        raise ValueError(f"Page limit must be between 1 and {MAX_PAGE_LIMIT}, got {limit}")

    results: List[Entry] = []
    pages = 0
    while True:
        if pages >= max_pages:
            raise PaginationLimitExceeded(
                f"Query for {page_query.get('content_type')!r} needs more than {max_pages} pages"
            )
        skip = int(page_query["skip"])
        page = environment.get_entries(dict(page_query))
        pages += 1
        results.extend(page.items)
        logger.debug(
            "Fetched page %d (skip=%s, %d items, %d/%d total)",
            pages, skip, len(page.items), len(results), page.total,
        )
        if skip + len(page.items) >= page.total:
            break
        if not page.items:
            logger.warning(
                "Empty page at skip=%d for %r before reaching total %d; result is incomplete",
                skip, page_query.get("content_type"), page.total,
            )
            break
        page_query["skip"] = skip + (page.limit or len(page.items))
    return results
