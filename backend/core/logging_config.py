import logging

from backend.core import config

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or config.LOG_LEVEL, format=LOG_FORMAT)
    # pika is chatty at INFO
    logging.getLogger('pika').setLevel(logging.WARNING)
