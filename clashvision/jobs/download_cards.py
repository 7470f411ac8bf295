"""
Download the Clash Royale card catalog.

Run this job to refresh the local card cache used by the deck builder:

    python -m clashvision.jobs.download_cards
"""

import asyncio
import logging

from clashvision.services.card_catalog import (
    build_catalog,
    fetch_raw_cards,
    reset_card_catalog,
    save_raw_cards,
)

logger = logging.getLogger(__name__)


async def run_download() -> None:
    """Fetch the card list and write it to the local cache."""
    logger.info("Downloading Clash Royale card catalog...")

    try:
        raw_cards = await fetch_raw_cards()
    except Exception as e:
        logger.error("Failed to download card catalog: %s", e)
        raise

    path = save_raw_cards(raw_cards)
    catalog = build_catalog(raw_cards)
    reset_card_catalog()
    logger.info("Saved %d cards (%d with evolutions) to %s", len(raw_cards), len(catalog), path)


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_download())


if __name__ == "__main__":
    main()
