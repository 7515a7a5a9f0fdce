from .entry import Business, CenterOffers, EntityStatus, EntryDetails, Offer

__all__ = ["Business", "CenterOffers", "EntityStatus", "EntryDetails", "Offer"]
