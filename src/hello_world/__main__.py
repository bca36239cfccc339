"""Run the app when called as a module."""
import uvicorn

from hello_world.app import app
from hello_world.config import get_settings
from hello_world.logger import setup_logger


def main() -> None:
    settings = get_settings()
    logger = setup_logger(log_level=settings.log_level)
    logger.info("Serving %s on %s:%d", settings.service_name, settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
