import logging

from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging, log_slow_operation


def test_configure_logging_writes_rotating_files(tmp_path):
    settings = Settings(log_dir=tmp_path / "logs", log_level="debug", environment="development")
    try:
        configure_logging(settings)
        configure_logging(settings)  # idempotente

        marked = [h for h in logging.getLogger().handlers if getattr(h, "_cooked_handler", False)]
        assert len(marked) == 3

        logger = logging.getLogger("tests.logging")
        logger.info("plain event")
        logger.error("broken event")
        for handler in marked:
            handler.flush()

        combined = (tmp_path / "logs" / "combined.log").read_text(encoding="utf-8")
        errors = (tmp_path / "logs" / "error.log").read_text(encoding="utf-8")
        assert "plain event" in combined and "broken event" in combined
        assert "plain event" not in errors
        assert "[ERROR] tests.logging: broken event" in errors
    finally:
        configure_logging(get_settings())


def test_log_slow_operation_levels(caplog):
    logger = logging.getLogger("tests.slow")

    with caplog.at_level(logging.DEBUG, logger="tests.slow"):
        log_slow_operation(logger, "external_assessment", 1500, model="m")
        log_slow_operation(logger, "external_assessment", 700)
        log_slow_operation(logger, "external_assessment", 10)

    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.INFO, logging.DEBUG]
    assert "Slow operation detected" in caplog.records[0].getMessage()
