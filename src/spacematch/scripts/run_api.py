"""
Script para levantar la API HTTP de SpaceMatch.

Uso:
    python -m spacematch.scripts.run_api
"""

import asyncio
import os
import sys

import structlog
from aiohttp import web

from spacematch.api import create_app
from spacematch.config import get_settings
from spacematch.logging_config import configure_logging

logger = structlog.get_logger()


async def serve(host: str, port: int):
    app = create_app()

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host=host, port=port)

    try:
        await site.start()
        logger.info("API activa", listen=host, port=port, health_path="/health")
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


def main():
    """Entry point de la API."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Iniciando API de SpaceMatch...")

    try:
        port = int(os.getenv("PORT", settings.api_port))
        asyncio.run(serve(settings.api_host, port))
    except KeyboardInterrupt:
        logger.info("API detenida por usuario")
        sys.exit(0)
    except Exception as e:
        logger.error("Error fatal en API", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
