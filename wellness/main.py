"""Main entry point for the wellness dashboard API"""
import logging
import uvicorn

from wellness.config import API_HOST, API_PORT, LOG_LEVEL, validate_config

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def main() -> None:
    """Validate configuration and serve the API"""
    logger.info("Validating configuration...")
    validate_config()

    logger.info(f"Serving API on {API_HOST}:{API_PORT}")
    uvicorn.run("wellness.api.server:app", host=API_HOST, port=API_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
