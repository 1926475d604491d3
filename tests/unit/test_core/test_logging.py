"""Unit tests for logging configuration."""

import json
from pathlib import Path

from loguru import logger

from place_resolver.core.logging import setup_logging


class TestLogging:
    """Tests for Loguru logging setup."""

    def test_setup_logging_does_not_raise(self) -> None:
        """setup_logging with valid log level does not raise."""
        setup_logging("DEBUG")
        setup_logging("INFO")
        setup_logging("WARNING")

    def test_setup_logging_case_insensitive(self) -> None:
        """setup_logging accepts case-insensitive log levels."""
        setup_logging("info")
        setup_logging("debug")

    def test_file_sink_includes_correlation_id(self, tmp_path: Path) -> None:
        """Records carry the contextualized correlation ID, or '-' without one."""
        setup_logging("INFO", log_dir=str(tmp_path / "logs"))

        with logger.contextualize(correlation_id="batch1:e7"):
            logger.info("resolved inside context")
        logger.info("resolved outside context")
        logger.complete()

        content = (tmp_path / "logs" / "place-resolver.log").read_text()
        assert "| batch1:e7 |" in content
        assert "| - |" in content
        setup_logging("INFO")

    def test_json_sink_emits_only_bound_records(self, capsys) -> None:
        """Only records bound with json_output are serialized to the JSON sink."""
        setup_logging("INFO")

        logger.bind(json_output=True, state="exact_cache_hit").info("Resolution exact_cache_hit")
        logger.info("plain message")
        logger.complete()

        json_lines = [line for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
        assert len(json_lines) == 1
        record = json.loads(json_lines[0])["record"]
        assert record["extra"]["state"] == "exact_cache_hit"
        assert record["message"] == "Resolution exact_cache_hit"
        setup_logging("INFO")
