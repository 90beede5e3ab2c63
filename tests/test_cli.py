import json
import logging
from pathlib import Path

import pytest

from threshold_recovery.cli import (
    EXIT_CONFIG,
    EXIT_INSUFFICIENT,
    EXIT_MALFORMED,
    EXIT_NO_CONSISTENT_SUBSET,
    EXIT_OK,
    main,
)

TESTCASE_1 = {
    "keys": {"n": 4, "k": 3},
    "1": {"base": "10", "value": "4"},
    "2": {"base": "2", "value": "111"},
    "3": {"base": "10", "value": "12"},
    "6": {"base": "4", "value": "213"},
}


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(tmp_path: Path, name: str, doc) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(doc))
    return path


def test_prints_secret_and_chosen_shares(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = _write(tmp_path, "testcase1.json", TESTCASE_1)
    assert main([str(path)]) == EXIT_OK
    out = capsys.readouterr().out
    assert f"{path}: 3 (shares x=[1, 2, 3])" in out


def test_prime_field_mode(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = _write(tmp_path, "testcase1.json", TESTCASE_1)
    assert main([str(path), "--mode", "prime_field", "--modulus", "97"]) == EXIT_OK
    assert ": 3 " in capsys.readouterr().out


def test_corrupted_share_exit_codes(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    doc = dict(TESTCASE_1, **{"6": {"base": "4", "value": "220"}})
    path = _write(tmp_path, "corrupt.json", doc)
    assert main([str(path)]) == EXIT_NO_CONSISTENT_SUBSET
    assert main([str(path), "--max-corrupted", "1"]) == EXIT_OK
    assert "suspected corrupt x=[6]" in capsys.readouterr().out


def test_insufficient_shares(tmp_path: Path) -> None:
    doc = dict(TESTCASE_1, keys={"n": 4, "k": 5})
    assert main([str(_write(tmp_path, "few.json", doc))]) == EXIT_INSUFFICIENT


def test_malformed_inputs(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    doc = dict(TESTCASE_1, **{"7": {"base": "2", "value": "12"}})
    path = _write(tmp_path, "bad.json", doc)
    assert main([str(path)]) == EXIT_MALFORMED
    assert main([str(tmp_path / "missing.json")]) == EXIT_MALFORMED
    latin1 = tmp_path / "latin1.json"
    latin1.write_bytes(b'{"keys": {"n": 1, "k": 1}, "1": {"base": "10", "value": "4\xff"}}')
    assert main([str(latin1)]) == EXIT_MALFORMED
    assert main([str(path), "--policy", "permissive"]) == EXIT_OK
    assert ": 3 " in capsys.readouterr().out


def test_first_failure_sets_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    good = _write(tmp_path, "good.json", TESTCASE_1)
    few = _write(tmp_path, "few.json", dict(TESTCASE_1, keys={"n": 4, "k": 5}))
    assert main([str(few), str(good)]) == EXIT_INSUFFICIENT
    assert f"{good}: 3" in capsys.readouterr().out


def test_invalid_configuration(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = _write(tmp_path, "testcase1.json", TESTCASE_1)
    assert main([str(path), "--mode", "prime_field", "--modulus", "91"]) == EXIT_CONFIG
    assert "invalid configuration" in capsys.readouterr().err
    assert main([str(path), "--config", str(tmp_path / "absent.yaml")]) == EXIT_CONFIG


def test_config_file_with_cli_override(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    cfg = tmp_path / "recovery.yaml"
    cfg.write_text("mode: prime_field\nmodulus: 97\nlog_level: WARNING\n")
    path = _write(tmp_path, "testcase1.json", TESTCASE_1)
    assert main([str(path), "--config", str(cfg), "--mode", "exact"]) == EXIT_OK
    assert ": 3 " in capsys.readouterr().out


def test_non_boolean_config_flag_is_rejected(tmp_path: Path) -> None:
    cfg = tmp_path / "recovery.yaml"
    cfg.write_text("detect_ambiguity: 'false'\n")
    path = _write(tmp_path, "testcase1.json", TESTCASE_1)
    assert main([str(path), "--config", str(cfg)]) == EXIT_CONFIG


def test_log_file_receives_records(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    log_path = tmp_path / "recovery.log"
    path = _write(tmp_path, "testcase1.json", TESTCASE_1)
    assert main([str(path), "--log-file", str(log_path)]) == EXIT_OK
    for handler in logging.getLogger().handlers:
        handler.close()
    assert "Accepted subset x=[1, 2, 3]" in log_path.read_text()
    assert ": 3 " in capsys.readouterr().out
