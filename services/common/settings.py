"""
Lightweight settings base class for the platform services.

Mirrors the parts of the pydantic-settings API the services use (``Field``,
``AliasChoices``, ``SettingsConfigDict``) while staying trivially mockable:
tests construct ``Settings(...)`` with keyword arguments, or set environment
variables, and nothing is cached at import time.

Resolution order for every annotated field:
    1. keyword arguments passed to the constructor
    2. process environment (aliases first, then the upper-cased field name)
    3. the ``.env`` file named in ``model_config``
    4. the field default (``...`` marks a field as required)
"""

from __future__ import annotations

import json
import os
import types
from abc import ABC
from pathlib import Path
from typing import Any, Dict, List, Optional, Union, get_args, get_origin, get_type_hints


class AliasChoices:
    """Multiple environment variable names accepted for one field."""

    def __init__(self, *choices: str) -> None:
        self.choices = list(choices)


class FieldInfo:
    """Information about a field in a settings class."""

    def __init__(
        self,
        default: Any = None,
        description: str = "",
        validation_alias: Optional[Union[str, List[str], AliasChoices]] = None,
        required: bool = False,
    ) -> None:
        self.default = default
        self.description = description
        self.validation_alias = validation_alias
        self.required = required

    def env_names(self) -> List[str]:
        alias = self.validation_alias
        if alias is None:
            return []
        if isinstance(alias, AliasChoices):
            return list(alias.choices)
        if isinstance(alias, list):
            return list(alias)
        return [alias]


def Field(
    default: Any = None,
    *,
    description: str = "",
    validation_alias: Optional[Union[str, List[str], AliasChoices]] = None,
    **kwargs: Any,
) -> Any:
    """Create a field descriptor for settings. ``default=...`` means required."""
    required = default is ...
    return FieldInfo(
        default=None if required else default,
        description=description,
        validation_alias=validation_alias,
        required=required,
    )


class SettingsConfigDict:
    """Configuration for settings loading."""

    def __init__(
        self,
        env_file: Optional[str] = None,
        env_file_encoding: str = "utf-8",
        case_sensitive: bool = True,
        extra: str = "forbid",
    ) -> None:
        self.env_file = env_file
        self.env_file_encoding = env_file_encoding
        self.case_sensitive = case_sensitive
        self.extra = extra


class BaseSettings(ABC):
    """Base class for settings that loads from environment variables."""

    model_config: SettingsConfigDict = SettingsConfigDict()

    def __init__(self, **kwargs: Any) -> None:
        env_file_values: Dict[str, str] = {}
        if self.model_config.env_file:
            env_file_values = self._load_env_file(self.model_config.env_file)

        for field_name, field_type in get_type_hints(self.__class__).items():
            if field_name.startswith("_") or field_name == "model_config":
                continue

            field_info = getattr(self.__class__, field_name, None)
            if not isinstance(field_info, FieldInfo):
                field_info = FieldInfo(default=field_info)

            if field_name in kwargs:
                value = kwargs[field_name]
            else:
                value = self._lookup(
                    field_info.env_names() + [field_name.upper()], env_file_values
                )
                if value is None:
                    if field_info.required:
                        raise ValueError(
                            f"Required field '{field_name}' not found in environment"
                        )
                    value = field_info.default

            setattr(self, field_name, self._convert_value(value, field_type))

    def _lookup(self, env_names: List[str], env_file_values: Dict[str, str]) -> Any:
        if not self.model_config.case_sensitive:
            env_names = env_names + [name.lower() for name in env_names]
        for env_name in env_names:
            if env_name in os.environ:
                return os.environ[env_name]
            if env_name in env_file_values:
                return env_file_values[env_name]
        return None

    def _load_env_file(self, env_file_path: str) -> Dict[str, str]:
        """Load KEY=VALUE pairs from a .env file, if it exists."""
        env_vars: Dict[str, str] = {}
        env_path = Path(env_file_path)
        if not env_path.exists():
            return env_vars

        with open(
            env_path, "r", encoding=self.model_config.env_file_encoding
        ) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    env_vars[key.strip()] = value.strip().strip("\"'")
        return env_vars

    def _convert_value(self, value: Any, target_type: Any) -> Any:
        """Convert a string value to the annotated type."""
        if value is None or not isinstance(value, str):
            return value

        origin = get_origin(target_type)
        if origin is Union or origin is types.UnionType:
            # Optional[X]: an empty string means "unset"
            if value == "":
                return None
            non_none = [arg for arg in get_args(target_type) if arg is not type(None)]
            if non_none:
                return self._convert_value(value, non_none[0])
            return value

        if target_type is bool or target_type == "bool":
            return value.lower() in ("true", "1", "yes", "on")
        if target_type is int or target_type == "int":
            return int(value)
        if target_type is float or target_type == "float":
            return float(value)
        if origin is list:
            if value.startswith("[") and value.endswith("]"):
                return json.loads(value)
            return [item.strip() for item in value.split(",") if item.strip()]

        return value
