"""Keep-alive runner entry point.

Pings a hosted bridge instance every KEEP_ALIVE_INTERVAL_SECONDS (default 30)
until SIGINT or SIGTERM, so free-tier hosts do not spin it down.

Usage:
    python -m services.liveness.keep_alive_runner
"""

import asyncio
import signal

from services.liveness.PingService import PingService
from shared.clients.liveness.LivenessClient import LivenessClient
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging

KEEP_ALIVE_INTERVAL_SECONDS = 30


async def main() -> None:
    """Run the keep-alive loop until a shutdown signal arrives."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    interval = config.get_number_val("KEEP_ALIVE_INTERVAL_SECONDS", default=KEEP_ALIVE_INTERVAL_SECONDS)

    client = LivenessClient(helper_config=config)
    service = PingService(
        helper_config=config,
        liveness_client=client,
        interval_seconds=interval,
        name="Keep-alive service",
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop_event.set))

    await client.boot()
    try:
        logger.info("Server URL: %s", client.base_url)
        await service.health_check()
        await service.start()
        await stop_event.wait()
        logger.info("Received shutdown signal, stopping gracefully...")
    finally:
        await service.stop()
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
