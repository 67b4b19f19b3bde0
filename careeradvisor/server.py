"""Run the web app with uvicorn.

Usage:
    python -m careeradvisor.server
"""

import logging

import uvicorn

from .config import AppConfig
from .web.app import create_app


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> None:
    config = AppConfig.from_env()
    configure_logging(config.log_level)
    logger = logging.getLogger("careeradvisor.server")

    app = create_app(config)
    logger.info(f"Server running at http://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
