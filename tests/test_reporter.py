"""Tests for error reporters."""

import logging

from vote_arena import ErrorLog, HourlyQuotaExceededError, LoggingErrorReporter


class TestErrorLog:
    """Tests for ErrorLog."""

    def test_newest_first(self, errors):
        errors.report("First")
        errors.report("Second", "details")
        assert errors.titles() == ["Second", "First"]
        assert errors.errors[0].detail == "details"

    def test_auto_dismiss(self, errors, clock):
        errors.report("Short", auto_dismiss_ms=1000)
        errors.report("Sticky", auto_dismiss_ms=None)

        clock.advance(1000)

        assert [e.title for e in errors.active()] == ["Sticky"]

    def test_dismiss(self, errors):
        errors.report("One")
        error_id = errors.errors[0].id

        assert errors.dismiss(error_id) is True
        assert errors.dismiss(error_id) is False
        assert errors.errors == []

    def test_clear(self, errors):
        errors.report("One")
        errors.report("Two")
        errors.clear()
        assert errors.active() == []

    def test_report_exception_uses_title_and_delay(self, errors):
        errors.report_exception(HourlyQuotaExceededError(50))

        error = errors.errors[0]
        assert error.title == "Rate Limit Exceeded"
        assert "50 votes" in error.detail
        assert error.auto_dismiss_ms == 10000

    def test_report_foreign_exception(self, errors):
        errors.report_exception(KeyError("x"))
        assert errors.titles() == ["KeyError"]

    def test_echo_to_logger(self, caplog):
        log = ErrorLog()
        with caplog.at_level(logging.WARNING, logger="vote_arena.reporter.log"):
            log.report("Vote Sync Failed", "offline")
        assert "Vote Sync Failed: offline" in caplog.text


class TestLoggingErrorReporter:
    """Tests for LoggingErrorReporter."""

    def test_logs_at_level(self, caplog):
        reporter = LoggingErrorReporter(level=logging.ERROR)
        with caplog.at_level(logging.ERROR, logger="vote_arena.reporter.log"):
            reporter.report("Catalog Fetch Failed")
        assert "Catalog Fetch Failed" in caplog.text
