"""Entry point for the token security API."""

import asyncio
import contextlib
import signal

from loguru import logger

from config.settings import settings
from src.api.server import run_api_server
from src.db.redis import close_redis
from src.utils.logger import setup_logger


def _log_startup_config() -> None:
    logger.info(
        f"Validation defaults: contract={settings.enable_contract_analysis} "
        f"metadata={settings.enable_metadata_validation} "
        f"external={settings.enable_external_validation} "
        f"strict={settings.strict_mode} timeout={settings.validation_timeout_ms}ms"
    )
    logger.info(
        f"Cache: {settings.cache_backend if settings.enable_caching else 'disabled'} "
        f"(ttl={settings.cache_ttl_sec}s), bands "
        f"{settings.score_band_low}/{settings.score_band_medium}/{settings.score_band_high}"
    )


async def main() -> None:
    setup_logger(json_logs=settings.json_logs, level=settings.log_level)
    logger.info("Starting token security API...")
    _log_startup_config()

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    server_task = asyncio.create_task(run_api_server(), name="api_server")
    stop_task = asyncio.create_task(stop.wait(), name="shutdown_signal")

    done, pending = await asyncio.wait(
        [server_task, stop_task], return_when=asyncio.FIRST_COMPLETED,
    )
    if stop_task in done:
        logger.info("Shutdown signal received")
    elif server_task.exception() is not None:
        logger.error(f"API server stopped: {server_task.exception()}")

    for task in pending:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    await close_redis()
    logger.info("Shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
