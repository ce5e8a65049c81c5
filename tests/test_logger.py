# File: tests/test_logger.py
import logging

from error_scout.logger import LOGGER_NAME, configure, get_logger


def test_component_loggers_are_children():
    assert get_logger().name == LOGGER_NAME
    assert get_logger("crawler").name == f"{LOGGER_NAME}.crawler"
    assert get_logger("crawler").parent is get_logger()


def test_configure_replaces_handlers_and_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "crawl.log"
    lg = configure(level="DEBUG", log_file=log_file, log_format="%(levelname)s %(message)s")
    assert lg.level == logging.DEBUG
    assert len(lg.handlers) == 2
    assert lg.propagate is False

    get_logger("crawler").info("Checking [1]: https://x.test/context:proj")
    for handler in lg.handlers:
        handler.flush()
    assert "INFO Checking [1]: https://x.test/context:proj" in log_file.read_text(encoding="utf-8")

    lg = configure(level="WARNING")
    assert len(lg.handlers) == 1
