# tests/test_config_logging.py
"""
Tests for configuration loading, logging setup and the exception types.
"""

import logging

import pytest

from app import create_app
from exceptions import ConfigurationError, LogicError, MalformedExpression, MissingAssignment
from logging_config import LOGGER_ROOT, LogikaLogFormatter, get_logger, setup_logging


class TestConfig:

    def test_defaults(self, app):
        assert app.config["MAX_VARIABLES"] == 6
        assert app.config["LOG_LEVEL"] == "INFO"
        assert app.config["TESTING"] is True

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LOGIC_MAX_VARIABLES", "3")
        app = create_app({"TESTING": True})
        assert app.config["MAX_VARIABLES"] == 3

    def test_mapping_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("LOGIC_MAX_VARIABLES", "3")
        app = create_app({"TESTING": True, "MAX_VARIABLES": 4})
        assert app.config["MAX_VARIABLES"] == 4

    @pytest.mark.parametrize(
        "overrides",
        [
            {"MAX_VARIABLES": 0},
            {"MAX_VARIABLES": 7},
            {"MAX_VARIABLES": "many"},
            {"LOG_LEVEL": "LOUD"},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ConfigurationError):
            create_app({"TESTING": True, **overrides})


class TestLogging:

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        yield
        setup_logging(logging.INFO)

    def test_setup_is_idempotent(self):
        setup_logging(logging.DEBUG)
        root = setup_logging(logging.DEBUG)
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_level_by_name(self):
        assert setup_logging("warning").level == logging.WARNING

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "logika.log"
        root = setup_logging(logging.INFO, log_file)
        assert len(root.handlers) == 2

        get_logger("tests").info("Table built", extra={"extra_info": {"rows": 4}})
        content = log_file.read_text(encoding="utf-8")
        assert "[logika.tests] Table built | rows=4" in content

    def test_get_logger_names(self):
        assert get_logger("evaluator").name == "logika.evaluator"
        assert get_logger("logika.app").name == "logika.app"
        assert get_logger(LOGGER_ROOT).name == LOGGER_ROOT

    def test_formatter_without_extra(self):
        record = logging.LogRecord("logika.x", logging.INFO, __file__, 1, "plain", None, None)
        formatted = LogikaLogFormatter().format(record)
        assert formatted.endswith("[INFO    ] [logika.x] plain")


class TestExceptions:

    def test_context_in_message(self):
        err = MalformedExpression("Unclosed parenthesis", expression="(p", position=2)
        assert isinstance(err, LogicError)
        assert str(err) == "Unclosed parenthesis | Context: expression=(p, position=2"
        assert repr(err).startswith("MalformedExpression(message='Unclosed parenthesis'")

    def test_missing_assignment_variables(self):
        err = MissingAssignment(["r", "q", "r"])
        assert err.variables == ["q", "r"]
        assert err.message == "No value given for variable(s): q, r"

    def test_original_exception(self):
        err = ConfigurationError("bad", original_exception=ValueError("x"))
        assert str(err) == "bad | Caused by: ValueError: x"
