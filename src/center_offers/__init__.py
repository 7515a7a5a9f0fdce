"""Center offers panel: businesses and their linked offers from Contentful."""

__version__ = "0.1.0"
