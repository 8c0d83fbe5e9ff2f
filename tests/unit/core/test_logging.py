# tests/unit/core/test_logging.py
"""Tests for structlog configuration."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from formflow.core.builder import FormBuilder
from formflow.core.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True)

        get_logger("formflow.test").info("graph_imported", nodes=3)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "graph_imported"
        assert record["nodes"] == 3
        assert record["level"] == "info"
        assert "_record" not in record

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=False)

        get_logger("formflow.test").warning("import_rejected", reason="bad")

        out = capsys.readouterr().out
        assert "import_rejected" in out
        assert "reason=bad" in out

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="warning")

        get_logger("formflow.test").info("quiet")

        assert "quiet" not in capsys.readouterr().out

    def test_stdlib_loggers_share_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True)

        logging.getLogger("embedding.app").warning("from stdlib")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "from stdlib"


class TestSessionLogging:
    def test_logging_section_applied_by_from_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("logging:\n  level: warning\n  json_output: true\n", encoding="utf-8")

        builder = FormBuilder.from_config(config)
        builder.connect(None, None)
        builder.import_text("[{")

        assert logging.getLogger().level == logging.WARNING
        records = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
        assert [r["event"] for r in records] == ["import_rejected"]
        assert records[0]["level"] == "warning"

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            FormBuilder.from_config(tmp_path / "absent.yaml")
