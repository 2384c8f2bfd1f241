"""
anonvp configuration

Configuration sources (in order of precedence):
    1. Environment variables (ANONVP_*)
    2. Values loaded from a YAML file or set at runtime
    3. Default values

Only presentation *formatting* and driver behaviour are configurable. The
wire keys and fixed literals of the presentation are constants in
`anonvp.presentation`.

Copyright (c) 2026 anonvp contributors. All rights reserved.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

import yaml

from anonvp.errors import ConfigError, ConfigValidationError

T = TypeVar("T")

CONFIG_PATH_ENV = "ANONVP_CONFIG"
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class ConfigValue(Generic[T]):
    """
    A single configuration value with metadata.

    Supports default values, environment variable binding and validation.
    """
    default: T
    env_var: Optional[str] = None
    description: str = ""
    validator: Optional[Callable[[T], bool]] = None
    _value: Optional[T] = field(default=None, repr=False)

    def get(self) -> T:
        """Get the current value."""
        if self.env_var and self.env_var in os.environ:
            value = self._coerce(os.environ[self.env_var])
            if self.validator and not self.validator(value):
                raise ConfigValidationError(f"Invalid value for {self.env_var}: {value!r}")
            return value

        return self._value if self._value is not None else self.default

    def set(self, value: T) -> None:
        """Set the value with validation."""
        if self.validator and not self.validator(value):
            raise ConfigValidationError(f"Invalid value for config: {value!r}")
        self._value = value

    def _coerce(self, value: str) -> T:
        """Coerce string value to target type."""
        target_type = type(self.default)

        if target_type == bool:
            return value.strip().lower() in ("true", "1", "yes", "on")  # type: ignore
        elif target_type == int:
            try:
                return int(value)  # type: ignore
            except ValueError as ex:
                raise ConfigValidationError(f"{self.env_var} must be an integer, got {value!r}") from ex
        else:
            return value.strip().lower()  # type: ignore


@dataclass
class AnonVPConfig:
    """Root configuration."""
    log_level: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="warning",
        env_var="ANONVP_LOG_LEVEL",
        description="Log level (debug, info, warning, error, critical)",
        validator=lambda x: isinstance(x, str) and x.lower() in LOG_LEVELS,
    ))
    pretty: ConfigValue[bool] = field(default_factory=lambda: ConfigValue(
        default=False,
        env_var="ANONVP_PRETTY",
        description="Pretty-print presentations written by the CLI",
        validator=lambda x: isinstance(x, bool),
    ))
    indent: ConfigValue[int] = field(default_factory=lambda: ConfigValue(
        default=2,
        env_var="ANONVP_INDENT",
        description="Indent width used when pretty-printing",
        validator=lambda x: isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= 8,
    ))
    canonical: ConfigValue[bool] = field(default_factory=lambda: ConfigValue(
        default=False,
        env_var="ANONVP_CANONICAL",
        description="Emit sorted-key canonical JSON instead of wire order",
        validator=lambda x: isinstance(x, bool),
    ))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "AnonVPConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as ex:
            raise ConfigError(f"Invalid YAML in {path}: {ex}") from ex

        cfg = cls()
        if data is None:
            return cfg
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must be a mapping: {path}")
        cfg.apply(data)
        return cfg

    def apply(self, values: Dict[str, Any]) -> None:
        """Apply a mapping of values; unknown keys are rejected."""
        for key, value in values.items():
            attr = getattr(self, key, None)
            if not isinstance(attr, ConfigValue):
                raise ConfigError(f"Unknown configuration key: {key}")
            attr.set(value)

    def to_dict(self) -> Dict[str, Any]:
        return {k: getattr(self, k).get() for k in self.__dataclass_fields__}

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False)

    def validate(self) -> List[str]:
        """Validate all values. Returns list of validation errors."""
        errors: List[str] = []
        for name in self.__dataclass_fields__:
            try:
                getattr(self, name).get()
            except ConfigError as e:
                errors.append(f"{name}: {e}")
        return errors

    def logging_level(self) -> int:
        return getattr(logging, self.log_level.get().upper())


def load_config(path: Optional[Union[str, Path]] = None) -> AnonVPConfig:
    """Load configuration from `path`, `$ANONVP_CONFIG`, or defaults."""
    path = path or os.environ.get(CONFIG_PATH_ENV) or None
    if path:
        return AnonVPConfig.from_yaml(path)
    return AnonVPConfig()
