import logging

from loguru import logger

from pawsi.core.logging import configure_logging


def test_configure_logging_sets_intercept_handler():
    configure_logging("INFO")
    assert logging.root.handlers, "expected root handlers to be configured"
    handler = logging.root.handlers[0]
    assert handler.__class__.__name__ == "_InterceptHandler"
    assert logging.root.level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING


def test_stdlib_records_reach_loguru():
    configure_logging("INFO")
    seen = []
    sink_id = logger.add(lambda message: seen.append(message.record["message"]), level="INFO")
    try:
        logging.getLogger("uvicorn.error").info("server ready")
    finally:
        logger.remove(sink_id)
    assert "server ready" in seen
