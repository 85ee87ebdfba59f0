import logging

from app.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    level = settings.LOG_LEVEL or ("INFO" if settings.is_production else "DEBUG")
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL echo is far too chatty at DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
