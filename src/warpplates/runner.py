"""Update loop - drives the plugin's update hook for hosts without their own."""

import asyncio
import logging
import signal

from warpplates.plugin import WarpplatesPlugin

logger = logging.getLogger(__name__)


class UpdateLoop:
    """Calls ``plugin.on_update()`` at a fixed host tick rate until shut down."""

    def __init__(self, plugin: WarpplatesPlugin, interval_seconds: float | None = None) -> None:
        self.plugin = plugin
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else plugin.settings.update_interval_seconds
        )
        self._shutdown = False
        self.ticks = 0

    async def run(self) -> None:
        """Main run loop - tick the plugin until shutdown."""
        logger.info("Update loop starting (every %.3fs)", self.interval_seconds)
        self._setup_signal_handlers()

        while not self._shutdown:
            try:
                self.plugin.on_update()
            except Exception:
                logger.exception("Error in update loop")
            self.ticks += 1

            if not self._shutdown:
                await asyncio.sleep(self.interval_seconds)

        logger.info("Update loop stopped after %d ticks", self.ticks)

    def stop(self) -> None:
        """Ask the loop to finish after the current tick."""
        self._handle_shutdown()

    def _setup_signal_handlers(self) -> None:
        """Set up graceful shutdown on SIGINT/SIGTERM."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._handle_shutdown)
            except (NotImplementedError, RuntimeError):
                # Not available on Windows or outside the main thread
                logger.debug("Signal handler for %s not installed", sig.name)

    def _handle_shutdown(self) -> None:
        """Handle shutdown signal."""
        logger.info("Shutdown signal received")
        self._shutdown = True
