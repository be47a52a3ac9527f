"""Main entry point: prepare the database and serve metrics."""
import logging
import time

from vocabbunny.app import VocabBunnyApp
from vocabbunny.config import settings

logger = logging.getLogger("vocabbunny")


def main() -> None:
    """Initialize storage and keep the metrics exporter alive when enabled."""
    app = VocabBunnyApp()
    app.start()
    try:
        if settings.monitoring.enabled:
            logger.info("Serving metrics, press Ctrl+C to stop")
            while True:
                time.sleep(1)
        else:
            logger.info("Database ready")
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        app.stop()


if __name__ == "__main__":
    main()
