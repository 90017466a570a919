"""
htmlforge Configuration Management
==================================

Layered build configuration with support for:
- Built-in defaults
- Environment variable overrides (HTMLFORGE_*)
- Runtime overrides
- Hierarchical configuration with dot notation
- Type-safe access with defaults

Configuration Loading Priority (highest to lowest):
1. Runtime overrides
2. Environment variables (HTMLFORGE_<SECTION>__<KEY>)
3. Default values

Example:
    config = Config.from_env()

    max_depth = config.get_int("engine.max_depth")
    minify = config.get_bool("build.minify", True)

    # HTMLFORGE_ENGINE__MAX_DEPTH=16 overrides engine.max_depth
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, TypeVar, Union

T = TypeVar("T")

ENV_PREFIX = "HTMLFORGE_"

DEFAULTS: Dict[str, Any] = {
    "engine": {
        "max_depth": 64,
        "max_passes": 32,
    },
    "build": {
        "minify": True,
        "template_suffix": ".html",
        "component_suffix": ".html",
    },
    "log": {
        "level": "INFO",
        "format": "text",
    },
}


@dataclass
class ConfigSource:
    """Represents a configuration source with priority."""
    name: str
    data: Dict[str, Any]
    priority: int = 0


class Config:
    """
    Build configuration container.

    Provides hierarchical configuration access with type coercion
    and default values. Configuration values can be nested using
    dot notation.

    Example:
        config = Config()
        config.set("build.minify", False)

        config.get("build.minify")  # False
        config.get("build.missing", "default")  # "default"
    """

    def __init__(self) -> None:
        self._sources: List[ConfigSource] = []
        self._cache: Dict[str, Any] = {}
        self._merged: Dict[str, Any] = {}
        self._dirty = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build a configuration from the defaults and the environment.

        Args:
            environ: Environment mapping (os.environ if None)
        """
        config = cls()
        config.add_source("defaults", json.loads(json.dumps(DEFAULTS)), priority=0)
        config.load_env_overrides(os.environ if environ is None else environ)
        return config

    def load_env_overrides(self, environ: Mapping[str, str]) -> None:
        """Load overrides from HTMLFORGE_* environment variables."""
        overrides: Dict[str, Any] = {}

        for key, value in environ.items():
            if key.startswith(ENV_PREFIX):
                # HTMLFORGE_ENGINE__MAX_DEPTH -> engine.max_depth
                config_key = key[len(ENV_PREFIX):].lower().replace("__", ".")
                overrides[config_key] = self._parse_env_value(value)

        if overrides:
            self.add_source("env_vars", self._unflatten(overrides), priority=100)

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def _unflatten(self, flat: Dict[str, Any]) -> Dict[str, Any]:
        """Convert flat dot-notation keys to nested dict."""
        result: Dict[str, Any] = {}

        for key, value in flat.items():
            parts = key.split(".")
            current = result

            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            current[parts[-1]] = value

        return result

    def add_source(
        self,
        name: str,
        data: Dict[str, Any],
        priority: int = 0,
    ) -> None:
        """Add a configuration source."""
        source = ConfigSource(name=name, data=data, priority=priority)
        self._sources.append(source)
        self._dirty = True

    def _merge(self) -> None:
        """Merge all sources into single configuration."""
        if not self._dirty:
            return

        # Lower priority first, so higher overrides
        sorted_sources = sorted(self._sources, key=lambda s: s.priority)

        self._merged = {}
        for source in sorted_sources:
            self._deep_merge(self._merged, source.data)

        self._dirty = False
        self._cache.clear()

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        """Deep merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            elif isinstance(value, dict):
                base[key] = {}
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(
        self,
        key: str,
        default: T = None,
    ) -> Union[Any, T]:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "engine.max_depth")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        self._merge()

        if key in self._cache:
            return self._cache[key]

        parts = key.split(".")
        current: Any = self._merged

        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        self._cache[key] = current
        return current

    def get_int(self, key: str, default: int = 0) -> int:
        """Get configuration value as integer."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "on", "1")
        return bool(value)

    def get_str(self, key: str, default: str = "") -> str:
        """Get configuration value as string."""
        value = self.get(key, default)
        return default if value is None else str(value)

    def set(self, key: str, value: Any) -> None:
        """
        Set a runtime configuration value.

        Runtime values have the highest priority.
        """
        runtime_source = None
        for source in self._sources:
            if source.name == "runtime":
                runtime_source = source
                break

        if runtime_source is None:
            runtime_source = ConfigSource(name="runtime", data={}, priority=1000)
            self._sources.append(runtime_source)

        parts = key.split(".")
        current = runtime_source.data

        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value
        self._dirty = True

    def has(self, key: str) -> bool:
        """Check if configuration key exists."""
        return self.get(key) is not None

    def all(self) -> Dict[str, Any]:
        """Get all configuration as dict."""
        self._merge()
        return json.loads(json.dumps(self._merged))

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.has(key)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance (defaults + environment)."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Forget the global configuration so the next access re-reads the environment."""
    global _config
    _config = None
