import logging
import sys

from doortrack.core.config import Settings, settings as default_settings

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: Settings | None = None) -> None:
    """
    Configure root logging from the LOG_LEVEL setting.
    """
    config = config or default_settings
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Remove existing handlers to avoid duplication
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(handler)

    # Supabase talks through httpx; its request lines are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
