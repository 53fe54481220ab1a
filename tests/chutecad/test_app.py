"""Tests for the command line tools."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

import chutecad.app as app
from chutecad.__main__ import main
from chutecad.logging_config import setup_logging
from parachute.design import ChuteDesign
from schemas.validators import dump_design


@pytest.fixture()
def design_path(tmp_path: Path) -> Path:
    design = ChuteDesign.default()
    design.name = "Test chute"
    path = tmp_path / "chute.json"
    path.write_text(json.dumps(design.to_mapping()), encoding="utf-8")
    return path


def test_evaluate_default_design(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["evaluate"])
    out = capsys.readouterr().out

    assert exit_code == 0
    assert "diameter = 1 m" in out
    assert "height_ratio = 0.7 -" in out
    assert "section1: (0.2, 0.7) -> (1, 0), 8 gores, Ripstop nylon (38 gsm)" in out


def test_evaluate_imperial(capsys: pytest.CaptureFixture[str], design_path: Path) -> None:
    assert main(["evaluate", str(design_path), "--imperial"]) == 0
    out = capsys.readouterr().out
    assert "Design: Test chute" in out
    assert "ft" in out
    assert "oz)" in out


def test_evaluate_reports_failed_parameters(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    design = ChuteDesign.default()
    design.parameters[0].expression = "missing*2"
    path = tmp_path / "broken.yaml"
    dump_design(design, path)
    assert main(["evaluate", str(path)]) == 0
    assert "param1: Error: Cannot evaluate 'missing*2'" in capsys.readouterr().out


def test_report_prints_totals(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["report", "--resolution", "20"]) == 0
    out = capsys.readouterr().out
    assert "section1_gore x8" in out
    assert "Pieces to cut: 8" in out
    assert "Fabric mass:" in out
    assert "1. Cut out fabric" in out


def test_export_writes_files(tmp_path: Path, design_path: Path) -> None:
    output = tmp_path / "patterns"
    exit_code = main(["export", str(design_path), "--output", str(output), "--formats", "dxf", "--resolution", "10"])

    assert exit_code == 0
    assert (output / "parachute_pattern.dxf").exists()
    assert not (output / "parachute_pattern.svg").exists()


def test_invalid_design_exits_with_error(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"sections": [{"type": "circular", "gores": 0}]}), encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        assert main(["report", str(path)]) == 1
    assert "Schema validation failed" in caplog.text


def test_missing_design_exits_with_error(tmp_path: Path) -> None:
    assert main(["evaluate", str(tmp_path / "missing.json")]) == 1


def test_malformed_yaml_exits_with_error(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("name: [unclosed\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        assert main(["evaluate", str(path)]) == 1
    assert "Malformed YAML" in caplog.text
    assert str(path) in caplog.text


def test_export_failure_exits_with_error(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    assert main(["export", "--output", str(blocker)]) == 1


def test_init_writes_loadable_design(tmp_path: Path) -> None:
    target = tmp_path / "new.yaml"
    assert main(["init", str(target)]) == 0
    assert app.load_design_or_default(target) == ChuteDesign.default()


def test_verbose_enables_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    levels: list[int] = []
    monkeypatch.setattr(app, "setup_logging", lambda level, log_file=None: levels.append(level))
    monkeypatch.setattr(app, "run_evaluate", lambda design, imperial=False: True)

    assert main(["--verbose", "evaluate"]) == 0
    assert levels == [logging.DEBUG]


def test_setup_logging_is_idempotent(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"
    setup_logging(logging.INFO, str(log_file))
    setup_logging(logging.INFO, str(log_file))

    logger = logging.getLogger("parachute")
    assert len(logger.handlers) == 2
    logging.getLogger("parachute.design").info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "parachute.design - INFO - hello" in log_file.read_text(encoding="utf-8")


def test_setup_logging_closes_replaced_handlers(tmp_path: Path) -> None:
    setup_logging(logging.INFO, str(tmp_path / "first.log"))
    (old_file_handler,) = [
        handler for handler in logging.getLogger("parachute").handlers
        if isinstance(handler, logging.FileHandler)
    ]
    setup_logging(logging.INFO, str(tmp_path / "second.log"))

    assert old_file_handler.stream is None
    assert old_file_handler not in logging.getLogger("parachute").handlers
