"""
Config system - layered registry configuration.

Sources, later overrides earlier:
1. Defaults
2. ``.env`` file (python-dotenv)
3. Environment variables (``LIBRARIUM_*`` prefix)
4. Manual overrides
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import dotenv_values

from .faults import ConfigInvalidFault

logger = logging.getLogger("librarium.config")

CALLBACK_ERROR_POLICIES = ("log", "raise")


class ConfigLoader:
    """
    Loads and merges configuration with precedence:
    overrides > environment variables > .env file > defaults

    Keys are upper-case with the prefix stripped; a double underscore
    nests, so ``LIBRARIUM_REGISTRY__CALLBACK_ERRORS=raise`` becomes
    ``{"registry": {"callback_errors": "raise"}}``.
    """

    def __init__(self, env_prefix: str = "LIBRARIUM_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_prefix: str = "LIBRARIUM_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        use_environ: bool = True,
    ) -> "ConfigLoader":
        """
        Load configuration from every source.

        Args:
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)
            use_environ: Read ``os.environ`` (tests switch this off)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(env_file)

        if use_environ:
            loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        env_path = Path(path)
        if not env_path.exists():
            logger.debug("No env file at %s", env_path)
            return

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert LIBRARIUM_REGISTRY__RESERVED_NAMES to nested dict."""
        key = key[len(self.env_prefix):]

        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current = self.config_data

        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.config_data)


@dataclass(frozen=True)
class RegistryConfig:
    """
    Registry settings.

    Attributes:
        reserved_names: Names reserved on top of the built-in operation names
        callback_errors: ``"log"`` keeps notifier exceptions away from the
            caller, ``"raise"`` lets them propagate after the state change
    """

    reserved_names: Tuple[str, ...] = field(default_factory=tuple)
    callback_errors: str = "log"

    def __post_init__(self):
        if self.callback_errors not in CALLBACK_ERROR_POLICIES:
            raise ConfigInvalidFault(
                "registry.callback_errors",
                f"expected one of {', '.join(CALLBACK_ERROR_POLICIES)}, got {self.callback_errors!r}",
            )
        for name in self.reserved_names:
            if not isinstance(name, str) or not name:
                raise ConfigInvalidFault(
                    "registry.reserved_names",
                    f"reserved names must be non-empty strings, got {name!r}",
                )

    @classmethod
    def from_loader(cls, loader: ConfigLoader) -> "RegistryConfig":
        """Build from the ``registry`` section of a loader."""
        reserved = loader.get("registry.reserved_names", ())
        if isinstance(reserved, str):
            reserved = [part.strip() for part in reserved.split(",") if part.strip()]
        elif not isinstance(reserved, (list, tuple)):
            raise ConfigInvalidFault(
                "registry.reserved_names",
                f"expected a list or comma separated string, got {type(reserved).__name__}",
            )

        policy = loader.get("registry.callback_errors", "log")
        if not isinstance(policy, str):
            raise ConfigInvalidFault(
                "registry.callback_errors",
                f"expected a string, got {type(policy).__name__}",
            )

        return cls(reserved_names=tuple(reserved), callback_errors=policy.lower())

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "RegistryConfig":
        """Shortcut for ``from_loader(ConfigLoader.load(env_file=env_file))``."""
        return cls.from_loader(ConfigLoader.load(env_file=env_file))
