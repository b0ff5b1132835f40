"""Tests for planner_config module."""

import pytest

from planner_config import DEFAULT_API_URL, DEFAULT_COLORS, load_config, parse_config
from planner_errors import ConfigError
from resource_ledger import WorkerDay


def test_defaults(monkeypatch):
    monkeypatch.delenv("PLANTUML_SERVER_URL", raising=False)
    config = load_config()

    assert config.plantuml.use_api is False
    assert config.plantuml.api_url == DEFAULT_API_URL
    assert "<INPUT>" in config.plantuml.local_cmd
    assert config.colors == DEFAULT_COLORS
    assert config.day_color(WorkerDay.PUB_HOLIDAYS) == "salmon"


def test_partial_override(monkeypatch):
    monkeypatch.delenv("PLANTUML_SERVER_URL", raising=False)
    config = parse_config(
        {
            "backend": {
                "plantuml": {"use_api": True, "api_url": "http://localhost:8080/"},
                "colors": {"worker_fine": "#00AA00"},
            }
        }
    )

    assert config.plantuml.use_api is True
    assert config.plantuml.api_url == "http://localhost:8080"
    assert config.day_color(WorkerDay.FINE) == "#00AA00"
    assert config.day_color(WorkerDay.OVERLOADED) == DEFAULT_COLORS["worker_overloaded"]


def test_env_overrides_api_url(monkeypatch):
    monkeypatch.setenv("PLANTUML_SERVER_URL", "http://plantuml.internal")
    config = parse_config({"backend": {"plantuml": {"api_url": "http://ignored"}}})
    assert config.plantuml.api_url == "http://plantuml.internal"


def test_unknown_color_key():
    with pytest.raises(ConfigError, match="Unknown color keys: worker_sleepy"):
        parse_config({"backend": {"colors": {"worker_sleepy": "blue"}}})


def test_load_config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("PLANTUML_SERVER_URL", raising=False)
    path = tmp_path / "planner.cfg.toml"
    path.write_text(
        "[backend.plantuml]\n"
        "use_api = false\n"
        'local_cmd = "java -jar plantuml.jar <INPUT> -o <OUTPUT_DIR>"\n\n'
        "[backend.colors]\n"
        'worker_holidays = "Aquamarine"\n'
    )
    config = load_config(path)

    assert config.plantuml.local_cmd.startswith("java -jar")
    assert config.day_color(WorkerDay.HOLIDAYS) == "Aquamarine"


def test_load_config_invalid_toml(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[backend\n")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(path)
