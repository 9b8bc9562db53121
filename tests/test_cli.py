from __future__ import annotations

import json
from pathlib import Path

import pytest

from ledbridge.__main__ import _build_parser, load_config, main


def test_arguments_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDBRIDGE_BROKER_HOST", "10.0.0.2")
    args = _build_parser().parse_args(["--broker-host", "broker", "--database", ":memory:", "--switch-mac", "aa:bb"])

    config = load_config(args)

    assert config.broker_host == "broker"
    assert config.database_path == ":memory:"
    assert config.switch_mac == "AABB"


def test_config_file_is_used(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"brokerPort": 1999}), encoding="utf-8")
    args = _build_parser().parse_args(["--config", str(path), "--log-level", "debug"])

    config = load_config(args)

    assert config.broker_port == 1999
    assert config.log_level == "DEBUG"


def test_invalid_configuration_exits_with_2(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--log-level", "LOUD"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err
