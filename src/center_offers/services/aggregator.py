"""Load the businesses linked to a center and attach their offers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from center_offers.models.entry import Business, CenterOffers, Offer

from .contentful import (
    DEFAULT_LOCALE,
    MAX_PAGE_LIMIT,
    ContentfulClient,
    ContentfulConfig,
    ContentfulError,
    Entry,
    make_client,
)
from .pagination import DEFAULT_MAX_PAGES, get_paginated_entries
from .status import check_entry_status


logger = logging.getLogger(__name__)

BUSINESS_CONTENT_TYPES = ("store", "restaurant")
OFFER_CONTENT_TYPE = "offer"
CENTER_REFERENCE_FILTER = "fields.center.sys.id"
OFFER_BUSINESS_FIELD = "business"


@dataclass(frozen=True)
class EditorContext:
    """Identifiers of the entry the panel is opened on."""

    space_id: str
    environment_id: str
    entry_id: str
    locale: str = DEFAULT_LOCALE


def _text(entry: Entry, name: str, locale: str) -> str:
    value = entry.field(name, locale)
    return str(value) if value is not None else ""


def to_offer(entry: Entry, locale: str = DEFAULT_LOCALE) -> Offer:
    return Offer(
        id=entry.id,
        content_type=entry.content_type_id,
        status=check_entry_status(entry),
        title=_text(entry, "title", locale),
        description=_text(entry, "summary", locale),
    )


def to_business(entry: Entry, offers: Iterable[Entry], locale: str = DEFAULT_LOCALE) -> Business:
    """Build a ``Business`` from ``entry`` with the offers whose reference points at it."""
    matched = [to_offer(o, locale) for o in offers if o.link_id(OFFER_BUSINESS_FIELD, locale) == entry.id]
    return Business(
        id=entry.id,
        content_type=entry.content_type_id,
        status=check_entry_status(entry),
        title=_text(entry, "displayName", locale),
        description=_text(entry, "shortDescription", locale),
        offers=matched,
    )


def aggregate(
    center_id: str,
    businesses: Sequence[Entry],
    offers: Sequence[Entry],
    locale: str = DEFAULT_LOCALE,
) -> CenterOffers:
    """Pure cross-reference step; business order is kept as given."""
    built = [to_business(b, offers, locale) for b in businesses]
    return CenterOffers(
        center_id=center_id,
        businesses=built,
        offer_count=sum(len(b.offers) for b in built),
    )


def load_center_offers(
    context: EditorContext,
    environment: Any,
    page_limit: int = MAX_PAGE_LIMIT,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> CenterOffers:
    """Fetch stores, restaurants and offers for ``context`` and aggregate them.

    Remote failures propagate as ``ContentfulError``.
    """
    center_id = context.entry_id
    business_entries: List[Entry] = []
    for content_type in BUSINESS_CONTENT_TYPES:
        query = {
            "content_type": content_type,
            "include": 1,
            "limit": MAX_PAGE_LIMIT,
            CENTER_REFERENCE_FILTER: center_id,
        }
        business_entries.extend(environment.get_entries(query).items)

    offer_query = {
        "content_type": OFFER_CONTENT_TYPE,
        "include": 1,
        "limit": page_limit,
        "skip": 0,
    }
    offer_entries = get_paginated_entries(environment, offer_query, max_pages=max_pages)

    result = aggregate(center_id, business_entries, offer_entries, context.locale)
    logger.info(
        "Center %s: %d businesses, %d of %d offers attached",
        center_id, len(result.businesses), result.offer_count, len(offer_entries),
    )
    return result


def open_environment(client: ContentfulClient, context: EditorContext) -> Any:
    if not context.space_id:
        raise ContentfulError("Missing Contentful space id")
    space = client.get_space(context.space_id)
    return space.get_environment(context.environment_id)


class CenterOffersPanel:
    """State holder for the panel: loads once per activation and keeps the last result.

    Before activation (and after a failed load) ``result`` is an empty
    ``CenterOffers``: no businesses and a zero offer count. Failures are kept
    in ``error``.
    """

    def __init__(
        self,
        context: EditorContext,
        client: ContentfulClient | None = None,
        config: ContentfulConfig | None = None,
    ) -> None:
        self.context = context
        self.config = config or (client.config if client is not None else ContentfulConfig())
        self.client = client or make_client(self.config)
        self.result = CenterOffers(center_id=context.entry_id)
        self.error: Optional[str] = None
        self._activated = False

    @property
    def businesses(self) -> List[Business]:
        return self.result.businesses

    @property
    def visible_businesses(self) -> List[Business]:
        return self.result.visible_businesses

    @property
    def offer_count(self) -> int:
        return self.result.offer_count

    def activate(self) -> "CenterOffersPanel":
        if self._activated:
            return self
        self._activated = True
        try:
            environment = open_environment(self.client, self.context)
            self.result = load_center_offers(
                self.context,
                environment,
                page_limit=self.config.page_limit,
                max_pages=self.config.max_pages,
            )
        except ContentfulError as e:
            logger.exception("Loading offers for center %s failed", self.context.entry_id)
            self.error = str(e)
        return self
