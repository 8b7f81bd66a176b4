"""Tests for console log formatting."""

import logging

from cc_ci_setup.logging_utils import LOGGER_NAME, SUCCESS, ConsoleFormatter, setup_logging


def make_record(level, message):
    return logging.LogRecord(LOGGER_NAME, level, __file__, 1, message, (), None)


class TestConsoleFormatter:
    def test_symbols(self):
        formatter = ConsoleFormatter()
        assert formatter.format(make_record(logging.INFO, "hello")) == "  [info]ℹ[/info] hello"
        assert formatter.format(make_record(SUCCESS, "done")).startswith("  [success]✓[/success]")
        assert "⚠" in formatter.format(make_record(logging.WARNING, "careful"))
        assert "✗" in formatter.format(make_record(logging.ERROR, "broken"))

    def test_message_markup_is_escaped(self):
        line = ConsoleFormatter().format(make_record(logging.INFO, "[bold]not markup[/bold]"))
        assert "\\[bold]not markup" in line


class TestSetupLogging:
    def test_levels(self):
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(verbose=False).level == logging.INFO

    def test_single_handler_across_calls(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_output_streams(self, capsys):
        logger = setup_logging()
        logger.log(SUCCESS, "project found")
        logger.error("no remote")

        captured = capsys.readouterr()
        assert "✓ project found" in captured.out
        assert "✗ no remote" in captured.err
        assert "no remote" not in captured.out

    def test_debug_hidden_unless_verbose(self, capsys):
        setup_logging().debug("details")
        assert "details" not in capsys.readouterr().out

        setup_logging(verbose=True).debug("details")
        assert "[DEBUG] details" in capsys.readouterr().out
