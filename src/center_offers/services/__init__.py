"""Service layer for the center offers panel."""

from .aggregator import CenterOffersPanel, EditorContext, load_center_offers
from .contentful import ContentfulClient, ContentfulConfig, ContentfulError, make_client
from .pagination import PaginationLimitExceeded, get_paginated_entries
from .status import check_entry_status

__all__ = [
    "CenterOffersPanel",
    "ContentfulClient",
    "ContentfulConfig",
    "ContentfulError",
    "EditorContext",
    "PaginationLimitExceeded",
    "check_entry_status",
    "get_paginated_entries",
    "load_center_offers",
    "make_client",
]
