"""
Tests for Config: YAML loading, environment overrides, validation.
"""
import textwrap

import pytest

from taskboard.config import Config
from taskboard.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("TASKBOARD_DB", raising=False)
    monkeypatch.delenv("TASKBOARD_SECRET_KEY", raising=False)


def _write(tmp_path, content: str):
    path = tmp_path / "taskboard.yaml"
    path.write_text(textwrap.dedent(content))
    return str(path)


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("taskboard.config.CONFIG_PATH", tmp_path / "absent.yaml")
    cfg = Config.load()
    assert cfg.token_ttl_hours == 24.0
    assert cfg.token_ttl_seconds == 86400
    assert cfg.latency_scale == 1.0
    assert cfg.port == 3000
    assert cfg.db_path.endswith("taskboard.db")
    assert cfg.secret_key


def test_load_from_yaml(tmp_path):
    path = _write(tmp_path, f"""
        db_path: {tmp_path / 'board.db'}
        token_ttl_hours: 1
        latency_scale: 0
        port: 8080
        unknown_key: ignored
    """)
    cfg = Config.load(path)
    assert cfg.db_path == str(tmp_path / "board.db")
    assert cfg.token_ttl_seconds == 3600
    assert cfg.latency_scale == 0
    assert cfg.port == 8080
    assert not hasattr(cfg, "unknown_key")


def test_env_db_wins_over_file(tmp_path, monkeypatch):
    monkeypatch.setenv("TASKBOARD_DB", str(tmp_path / "env.db"))
    path = _write(tmp_path, f"db_path: {tmp_path / 'file.db'}\n")
    assert Config.load(path).db_path == str(tmp_path / "env.db")


def test_secret_key_from_env(monkeypatch):
    monkeypatch.setenv("TASKBOARD_SECRET_KEY", "s3cret")
    cfg = Config(db_path="x.db")
    cfg.resolve()
    assert cfg.secret_key == "s3cret"


def test_empty_file_gives_defaults(tmp_path):
    cfg = Config.load(_write(tmp_path, ""))
    assert cfg.port == 3000


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        Config.load(str(tmp_path / "nope.yaml"))


def test_invalid_yaml_raises(tmp_path):
    with pytest.raises(ConfigError, match="Invalid YAML"):
        Config.load(_write(tmp_path, "port: [1, 2\n"))


def test_non_mapping_raises(tmp_path):
    with pytest.raises(ConfigError, match="mapping"):
        Config.load(_write(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize("field,value", [("token_ttl_hours", 0), ("latency_scale", -1)])
def test_out_of_range_values_raise(field, value):
    cfg = Config(db_path="x.db", **{field: value})
    with pytest.raises(ConfigError):
        cfg.resolve()


def test_quoted_numbers_are_converted(tmp_path):
    path = _write(tmp_path, """
        token_ttl_hours: "24"
        latency_scale: "0.5"
        port: "8080"
        secret_key: 1234
    """)
    cfg = Config.load(path)
    assert cfg.token_ttl_seconds == 86400
    assert cfg.latency_scale == 0.5
    assert cfg.port == 8080
    assert cfg.secret_key == "1234"


def test_null_value_keeps_default(tmp_path):
    cfg = Config.load(_write(tmp_path, "port:\n"))
    assert cfg.port == 3000


@pytest.mark.parametrize("line", [
    'token_ttl_hours: "a day"',
    "latency_scale: [1, 2]",
    "port: eighty",
    "port: true",
    "port: 70000",
    "token_ttl_hours: .nan",
    "latency_scale: .inf",
])
def test_invalid_values_raise_config_error(tmp_path, line):
    with pytest.raises(ConfigError):
        Config.load(_write(tmp_path, line + "\n"))


def test_error_names_the_key(tmp_path):
    with pytest.raises(ConfigError, match="port"):
        Config.load(_write(tmp_path, "port: eighty\n"))
