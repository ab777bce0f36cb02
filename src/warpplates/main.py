"""Entry point for hosts that embed the plugin without an update signal of their own."""

import logging
import sys

from warpplates.config import settings
from warpplates.database import dispose_engine
from warpplates.host import Host
from warpplates.plugin import WarpplatesPlugin
from warpplates.runner import UpdateLoop


def setup_logging() -> None:
    """Configure logging for the plugin."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


async def run(host: Host) -> None:
    """Initialize the plugin for ``host`` and tick it until a shutdown signal arrives."""
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Warpplates starting...")

    plugin = WarpplatesPlugin(host)
    try:
        await plugin.initialize()
        await UpdateLoop(plugin).run()
    finally:
        await dispose_engine()
