import logging

from linelogic.logging_config import LOG_LEVEL_ENV, resolve_level, setup_logging


def test_resolve_level(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert resolve_level() == logging.INFO
    assert resolve_level(logging.WARNING) == logging.WARNING

    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    assert resolve_level() == logging.DEBUG

    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    assert resolve_level() == logging.INFO


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "linelogic.log"
    setup_logging(logging.DEBUG)
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))
    assert len(logger.handlers) == 2
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
