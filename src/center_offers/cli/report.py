from __future__ import annotations

import argparse
import json
import logging
from typing import Optional, Sequence

from center_offers.services.aggregator import CenterOffersPanel, EditorContext
from center_offers.services.contentful import ContentfulConfig, make_client
from center_offers.utils.log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="List the businesses and offers linked to a center entry")
    parser.add_argument("center_id", help="Entry id of the center")
    parser.add_argument("--space", help="Space id (defaults to CONTENTFUL_SPACE_ID)")
    parser.add_argument("--environment", help="Environment id (defaults to CONTENTFUL_ENVIRONMENT)")
    parser.add_argument("--locale", help="Locale used to read fields (defaults to CONTENTFUL_LOCALE)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = ContentfulConfig()
    except ValueError as e:
        parser.error(f"invalid Contentful configuration: {e}")
    if args.locale:
        config.locale = args.locale
    context = EditorContext(
        space_id=args.space or config.space_id or "",
        environment_id=args.environment or config.environment_id,
        entry_id=args.center_id,
        locale=config.locale,
    )
    panel = CenterOffersPanel(context, client=make_client(config)).activate()
    if panel.error:
        print(f"Failed to load offers for center {args.center_id}: {panel.error}")
        return 1

    if args.json:
        print(json.dumps(panel.result.model_dump(mode="json"), indent=2))
        return 0

    print(f"This center has {panel.offer_count} offers")
    for business in panel.visible_businesses:
        print(f"[{business.status}] {business.title} ({business.content_type})")
        for offer in business.offers:
            print(f"    [{offer.status}] {offer.title}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
