"""System configuration for tradestats.

One configuration for the whole system, loaded from YAML and merged over
built-in defaults.

Search order for the configuration file:
1. Explicit path passed to SystemConfig.load() / get_system_config()
2. TRADESTATS_CONFIG environment variable
3. config/system.yaml in the working directory
4. Built-in defaults (no file required)

String values may reference environment variables as ${VAR}; undefined
variables keep their placeholder.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from tradestats.system.log_system import LoggingConfig as LoggerConfig

DEFAULT_CONFIG_PATH = Path("config/system.yaml")
CONFIG_ENV_VAR = "TRADESTATS_CONFIG"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


@dataclass
class ReportingConfig:
    """Where and how reports are written."""

    output_dir: str = "output/reports"
    filename_template: str = "trade_report_{timestamp}.json"
    timestamp_format: str = "%Y%m%d_%H%M%S"
    validate_schema: bool = True
    default_options: str | None = None  # Path to an ExportOptions YAML file


@dataclass
class TradeSourceConfig:
    """Default trade file used by the CLI when --trades is not given."""

    path: str = "data/trades.csv"
    encoding: str = "utf-8"


@dataclass
class LoggingConfig:
    """Logging section of system.yaml (converted to log_system.LoggingConfig)."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json"] = "console"
    timestamp_format: Literal["iso", "compact", "time"] = "compact"
    enable_file: bool = False
    file_path: str = "logs/tradestats.log"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the pydantic config consumed by LoggerFactory."""
        return LoggerConfig(
            level=self.level,
            format=self.format,
            timestamp_format=self.timestamp_format,
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Complete system configuration."""

    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    trades: TradeSourceConfig = field(default_factory=TradeSourceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration from YAML, falling back to defaults.

        Args:
            path: Explicit config file. If None, uses TRADESTATS_CONFIG or
                  config/system.yaml when present.

        Returns:
            SystemConfig with file values merged over defaults
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        merged = _deep_merge(_defaults_as_dict(), raw)
        return cls._from_dict(_substitute_env_vars(merged))

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dictionary.

        Raises:
            ValueError: If a section is not a mapping or has unknown keys
        """
        sections = {}
        for name, section_cls in (
            ("reporting", ReportingConfig),
            ("trades", TradeSourceConfig),
            ("logging", LoggingConfig),
        ):
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ValueError(f"Invalid system config: '{name}' must be a mapping")
            try:
                sections[name] = section_cls(**values)
            except TypeError as e:
                raise ValueError(f"Invalid system config section '{name}': {e}") from e
        return cls(**sections)


def _defaults_as_dict() -> dict[str, Any]:
    defaults = SystemConfig()
    return {
        "reporting": dict(vars(defaults.reporting)),
        "trades": dict(vars(defaults.trades)),
        "logging": dict(vars(defaults.logging)),
    }


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base, returning a new dict."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} references in strings, recursing into dicts and lists."""
    if isinstance(value, dict):
        return {key: _substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: Path | str | None = None) -> SystemConfig:
    """Get the cached system config, loading it on first use (or when a path is given)."""
    global _system_config
    if path is not None or _system_config is None:
        _system_config = SystemConfig.load(path)
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force a reload of the system config."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
