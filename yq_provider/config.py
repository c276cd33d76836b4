"""Provider configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .command import DEFAULT_TIMEOUT_SECONDS, YqCommand
from .errors import ConfigError
from .utils import YAML_EXTENSIONS, read_yaml_file

DEFAULT_YQ_PATH = "yq"
PROVIDER_SPECIFIC_KEY = "providerSpecificConfig"


@dataclass
class ProviderConfig:
    location: Path = field(default_factory=Path.cwd)
    yq_path: str = DEFAULT_YQ_PATH
    yq_args: Tuple[str, ...] = ()
    env: Dict[str, str] = field(default_factory=dict)
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS
    extensions: Tuple[str, ...] = YAML_EXTENSIONS

    def base_command(self) -> YqCommand:
        return YqCommand.create(
            self.yq_path,
            args=self.yq_args,
            env=self.env,
            timeout=self.timeout_seconds,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base_dir: Optional[Path] = None) -> "ProviderConfig":
        """Build a config from the host's init-config shaped mapping.

        ``location`` sits at the top level; yq settings live under
        ``providerSpecificConfig``. Relative locations resolve against
        ``base_dir``.
        """

        if not isinstance(data, Mapping):
            raise ConfigError("provider config must be a mapping")
        config = cls()

        location = data.get("location")
        if location is not None:
            if not isinstance(location, str):
                raise ConfigError("location must be a string")
            path = Path(location)
            if not path.is_absolute() and base_dir is not None:
                path = base_dir / path
            config.location = path

        specific = data.get(PROVIDER_SPECIFIC_KEY) or {}
        if not isinstance(specific, Mapping):
            raise ConfigError(f"{PROVIDER_SPECIFIC_KEY} must be a mapping")

        yq_path = specific.get("yqPath")
        if yq_path is not None:
            if not isinstance(yq_path, str) or not yq_path:
                raise ConfigError("yqPath must be a non-empty string")
            config.yq_path = yq_path

        yq_args = specific.get("yqArgs")
        if yq_args is not None:
            if not isinstance(yq_args, (list, tuple)):
                raise ConfigError("yqArgs must be a list of strings")
            config.yq_args = tuple(str(arg) for arg in yq_args)

        env = specific.get("env")
        if env is not None:
            if not isinstance(env, Mapping):
                raise ConfigError("env must be a mapping")
            config.env = {str(key): str(value) for key, value in env.items()}

        timeout = specific.get("timeoutSeconds")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError("timeoutSeconds must be a positive number")
            config.timeout_seconds = float(timeout)

        return config


def load_config(path: Path) -> ProviderConfig:
    """Load a provider config file, resolving paths relative to it."""

    try:
        data = read_yaml_file(path)
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"unable to read config {path}: {exc}", cause=exc) from exc
    if data is None:
        raise ConfigError(f"config file {path} is missing or empty")
    return ProviderConfig.from_mapping(data, base_dir=path.parent)
