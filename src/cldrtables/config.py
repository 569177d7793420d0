"""Settings for cldrtables.

Settings come from environment variables or a settings file:

    CLDRTABLES_DATA_DIR=/srv/cldr      # directory or registry document
    CLDRTABLES_LAZY=false              # load every table up front
    CLDRTABLES_VALIDATE=true           # shape-check tables as they load
    CLDRTABLES_LOG_LEVEL=DEBUG

A settings file (JSON, YAML or TOML) uses the same names in lower case:

    data_dir = "/srv/cldr"
    validate = true
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from cldrtables.errors import ConfigError

try:
    import yaml

    HAS_YAML = True
except ImportError:
    HAS_YAML = False

try:
    import tomllib

    HAS_TOML = True
except ImportError:
    try:
        import tomli as tomllib  # type: ignore

        HAS_TOML = True
    except ImportError:
        HAS_TOML = False


logger = logging.getLogger(__name__)

ENV_PREFIX = "CLDRTABLES"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_value(value: str) -> Any:
    """Parse an environment string to bool, None, number or JSON."""
    if value.lower() in ("true", "yes", "1", "on"):
        return True
    if value.lower() in ("false", "no", "0", "off"):
        return False

    if value.lower() in ("null", "none", ""):
        return None

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        data_dir: Data directory or registry document; None uses the
            tables bundled with the package.
        lazy: Load tables on first access instead of up front.
        validate: Reject tables with shape violations while loading.
        log_level: Level for the ``cldrtables`` logger.
    """

    data_dir: Path | None = None
    lazy: bool = True
    validate: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level {self.log_level!r}. Expected one of: {', '.join(LOG_LEVELS)}"
            )
        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.data_dir is not None and not isinstance(self.data_dir, Path):
            object.__setattr__(self, "data_dir", Path(self.data_dir).expanduser())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a mapping, ignoring unknown names.

        Raises:
            ConfigError: If a value has the wrong type.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for name, value in data.items():
            if name not in known:
                logger.warning("Ignoring unknown setting %r", name)
                continue
            if value is None:
                continue
            if name in ("lazy", "validate") and not isinstance(value, bool):
                raise ConfigError(f"Setting {name!r} must be a boolean, got {value!r}")
            if name in ("data_dir", "log_level"):
                value = str(value)
            values[name] = value
        return cls(**values)

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> "Settings":
        """Read settings from ``<prefix>_*`` environment variables.

        Args:
            prefix: Variable prefix.
            environ: Environment to read; defaults to ``os.environ``.

        Returns:
            Settings.
        """
        environ = os.environ if environ is None else environ
        start = f"{prefix}_"
        data: dict[str, Any] = {}
        for key, raw in environ.items():
            if not key.startswith(start):
                continue
            name = key[len(start):].lower()
            # Paths and level names are kept as written.
            if name in ("data_dir", "log_level"):
                data[name] = raw or None
            else:
                data[name] = _parse_value(raw)
        return cls.from_mapping(data)

    @classmethod
    def from_file(cls, path: Path | str) -> "Settings":
        """Read settings from a JSON, YAML or TOML file.

        Raises:
            ConfigError: If the file is missing, unsupported or malformed.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Settings file not found: {path}")

        suffix = path.suffix.lower()
        try:
            content = path.read_text(encoding="utf-8")
            if suffix in (".yaml", ".yml"):
                if not HAS_YAML:
                    raise ConfigError("PyYAML not installed")
                data = yaml.safe_load(content) or {}
            elif suffix == ".json":
                data = json.loads(content)
            elif suffix == ".toml":
                if not HAS_TOML:
                    raise ConfigError("tomllib/tomli not installed")
                data = tomllib.loads(content)
            else:
                raise ConfigError(f"Unsupported settings format: {suffix}")
        except ConfigError:
            raise
        except Exception as e:
            raise ConfigError(f"Failed to load settings from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        return cls.from_mapping(data)


def get_settings() -> Settings:
    """Settings from the environment."""
    return Settings.from_env()
