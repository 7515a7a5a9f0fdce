"""View models for businesses and offers shown in the center panel."""

from __future__ import annotations

from typing import List, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field


EntityStatus = Literal["archived", "published", "changed", "draft", "new"]

ENTITY_STATUSES: tuple[str, ...] = get_args(EntityStatus)


class EntryDetails(BaseModel):
    """Display fields shared by every entry rendered as a card."""

    model_config = ConfigDict(frozen=True)

    id: str
    content_type: str
    status: EntityStatus
    title: str = ""
    description: str = ""


class Offer(EntryDetails):
    pass


class Business(EntryDetails):
    offers: List[Offer] = Field(default_factory=list)


class CenterOffers(BaseModel):
    """Result of one panel load: all businesses of a center and the attached offer count."""

    model_config = ConfigDict(frozen=True)

    center_id: str
    businesses: List[Business] = Field(default_factory=list)
    offer_count: int = 0

    @property
    def visible_businesses(self) -> List[Business]:
        # Businesses without offers are loaded but not rendered
        return [b for b in self.businesses if b.offers]
