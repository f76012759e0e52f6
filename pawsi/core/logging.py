import logging
import sys

from loguru import logger

_NOISY_LOGGERS = ('httpx', 'httpcore', 'botocore', 'boto3', 'urllib3', 'passlib')


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str, serialize: bool = False) -> None:
    """Route loguru and stdlib logging (uvicorn, SQLAlchemy, boto) to one stdout sink.

    ``serialize`` switches the sink to JSON lines, which keeps the keyword
    context passed to ``logger.info('event', key=value)`` machine readable.
    """
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        enqueue=True,
        backtrace=True,
        diagnose=False,
        serialize=serialize,
    )
    logging.root.handlers = [_InterceptHandler()]
    logging.root.setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.root.level))
