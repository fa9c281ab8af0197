import logging

from app.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # botocore is chatty at DEBUG and logs request signatures
    logging.getLogger("botocore").setLevel(logging.WARNING)
