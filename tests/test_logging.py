"""Tests for the logging helpers."""

import logging

from vidtube.utils.logging import APP_LOGGER, LogContext, get_logger, setup_logging


class TestSetupLogging:
    def test_repeated_setup_keeps_one_handler(self):
        setup_logging("INFO")
        app_logger = setup_logging("DEBUG")

        assert app_logger.name == APP_LOGGER
        assert app_logger.level == logging.DEBUG
        assert len(app_logger.handlers) == 1

    def test_quiets_database_driver_logs(self):
        setup_logging()
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestLogContext:
    def test_prefixes_messages(self, caplog):
        log = LogContext(get_logger("vidtube.services.views.engine"), view="trending", viewer=3)

        with caplog.at_level(logging.INFO, logger=APP_LOGGER):
            log.info("joined %d records", 12)

        assert caplog.records[-1].getMessage() == "[view=trending] [viewer=3] joined 12 records"

    def test_anonymous_viewer(self, caplog):
        log = LogContext(get_logger("vidtube.test"), view="videos", viewer=None)

        with caplog.at_level(logging.WARNING, logger=APP_LOGGER):
            log.warning("slow page")

        assert "[view=videos] [viewer=None] slow page" in caplog.text
