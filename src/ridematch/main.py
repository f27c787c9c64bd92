"""Service entry point: configure logging and serve the API with uvicorn."""

import logging

import uvicorn

from ridematch.api.app import create_app
from ridematch.ride_logging import setup_logging
from ridematch.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    setup_logging(settings.log)

    if not settings.api.key:
        logger.warning("API_KEY is not set; every authenticated route will answer 500")

    logger.info(
        f"Starting ride matching service (routing={settings.routing.provider}, "
        f"search={settings.matching.search_strategy})"
    )
    app = create_app(settings)
    uvicorn.run(app, host=settings.api.host, port=settings.api.port, log_config=None)


if __name__ == "__main__":
    main()
