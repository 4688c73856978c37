# TaskBoard — configuration
# Override defaults via taskboard.yaml, environment variables, or CLI args.

import math
import os
import secrets
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError
from .store import default_db_path

CONFIG_PATH = Path.cwd() / "taskboard.yaml"


def _coerce(key: str, value, kind):
    """Convert a YAML value to the field's declared type."""
    if isinstance(value, bool) or isinstance(value, (dict, list)):
        raise ConfigError(f"Invalid value for {key}: {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {key}: {value!r} (expected {kind.__name__})") from e


@dataclass
class Config:
    """Runtime configuration for the board server."""

    # Storage
    db_path: str = ""

    # Identity
    token_ttl_hours: float = 24.0

    # Simulated network latency multiplier (0 disables)
    latency_scale: float = 1.0

    # Web
    secret_key: str = ""
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    def resolve(self):
        """Apply environment overrides and fill generated defaults."""
        env_db = os.environ.get("TASKBOARD_DB")
        if env_db:
            self.db_path = env_db
        if not self.db_path:
            self.db_path = default_db_path()
        self.db_path = str(Path(self.db_path).expanduser())

        if not self.secret_key:
            self.secret_key = os.environ.get("TASKBOARD_SECRET_KEY") or secrets.token_hex(16)

        if not math.isfinite(self.token_ttl_hours) or self.token_ttl_hours <= 0:
            raise ConfigError(f"token_ttl_hours must be > 0, got: {self.token_ttl_hours}")
        if not math.isfinite(self.latency_scale) or self.latency_scale < 0:
            raise ConfigError(f"latency_scale must be >= 0, got: {self.latency_scale}")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be between 1 and 65535, got: {self.port}")

    @property
    def token_ttl_seconds(self) -> int:
        return int(self.token_ttl_hours * 3600)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """
        Load config from a YAML file, falling back to defaults.

        A missing default file is fine; an explicit path that is missing or
        does not hold a mapping raises ConfigError.
        """
        cfg_path = Path(path) if path else CONFIG_PATH
        if not cfg_path.exists():
            if path:
                raise ConfigError(f"Config file not found: {cfg_path}")
            cfg = cls()
            cfg.resolve()
            return cfg

        try:
            with open(cfg_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {cfg_path} must be a mapping, got {type(data).__name__}")

        known = {f.name: f.type for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            values[key] = _coerce(key, value, known[key])
        cfg = cls(**values)
        cfg.resolve()
        return cfg
