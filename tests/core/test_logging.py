"""
Tests for the logging module.

Tests verify:
- JSON output uses ECS field names
- Bound context shows up in events
- DEBUG logs are suppressed at INFO level
"""

import json

from stepback.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


def _json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


class TestConfigureLogging:
    def test_json_output_fields(self, capsys):
        configure_logging(level="INFO", json_format=True, service="stepback-test")
        get_logger("tests").info("migration.started", steps=3)

        [event] = _json_lines(capsys.readouterr().err)
        assert event["event"] == "migration.started"
        assert event["steps"] == 3
        assert event["log.level"] == "info"
        assert event["service.name"] == "stepback-test"
        assert "@timestamp" in event

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("tests")
        logger.debug("hidden")
        logger.info("shown")

        events = [e["event"] for e in _json_lines(capsys.readouterr().err)]
        assert events == ["shown"]

    def test_console_format(self, capsys):
        configure_logging(level="DEBUG", json_format=False)
        get_logger("tests").debug("console_event", method="a_up")
        err = capsys.readouterr().err
        assert "console_event" in err
        assert "a_up" in err


class TestModuleLoggers:
    def test_module_logger_name_is_logged(self, capsys):
        from stepback.migrations import runner

        configure_logging(level="INFO", json_format=True)
        runner.logger.info("module_event")

        [event] = _json_lines(capsys.readouterr().err)
        assert event["event"] == "module_event"
        assert event["logger"] == "stepback.migrations.runner"

    def test_get_logger_by_name(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger(__name__).info("named")

        [event] = _json_lines(capsys.readouterr().err)
        assert event["logger"] == __name__

    def test_unnamed_logger_uses_service(self, capsys):
        configure_logging(level="INFO", json_format=True, service="stepback-test")
        get_logger().info("unnamed")

        [event] = _json_lines(capsys.readouterr().err)
        assert event["logger"] == "stepback-test"

    def test_migration_run_logs_through_runner_logger(self, capsys):
        from stepback.migrations import MethodCatalog, MigrationFile, Migrator

        configure_logging(level="INFO", json_format=True)
        catalog = MethodCatalog({"a_up": lambda: None})

        result = Migrator(catalog).migrate(MigrationFile.from_content("a_up"))

        assert result.is_ok()
        captured = capsys.readouterr()
        assert captured.out == ""
        completed = [e for e in _json_lines(captured.err) if e["event"] == "migration.completed"]
        assert completed[0]["logger"] == "stepback.migrations.runner"
        assert completed[0]["migration"] == "<memory>"


class TestContext:
    def test_log_context_scoped(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger("tests")

        with LogContext(migration="0001_init.up.gm"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = _json_lines(capsys.readouterr().err)
        assert inside["migration"] == "0001_init.up.gm"
        assert "migration" not in outside

    def test_bind_and_clear(self, capsys):
        configure_logging(level="INFO", json_format=True)
        bind_context(run="r1")
        get_logger("tests").info("bound")
        clear_context()
        get_logger("tests").info("cleared")

        bound, cleared = _json_lines(capsys.readouterr().err)
        assert bound["run"] == "r1"
        assert "run" not in cleared
