#!/usr/bin/env python3
"""Home Assistant to Matter bridge."""

import asyncio
import logging
import signal
import sys

from bridge_config import load_config
from constants import DEFAULT_CONFIG_FILE
from hass2matter_app import Hass2Matter

logger = logging.getLogger(__name__)


async def main(config_path: str = DEFAULT_CONFIG_FILE):
    """Main entry point."""
    config = load_config(config_path)
    app = Hass2Matter(config)
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    async def runner():
        try:
            await app.start()
        except asyncio.CancelledError:
            pass
        finally:
            await app.stop()
            stop_event.set()

    task = loop.create_task(runner())

    def _shutdown():
        if not task.done():
            logger.info("Shutting down...")
            task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _shutdown)
        except NotImplementedError:
            pass

    await stop_event.wait()


def run():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_FILE))
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
