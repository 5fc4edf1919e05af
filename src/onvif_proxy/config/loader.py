"""Settings loading and validation."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from onvif_proxy.models.settings import ProxySettings

logger = logging.getLogger(__name__)


class ConfigErrorCode(str, Enum):
    """Stable settings error codes."""

    FILE_NOT_FOUND = "CONFIG_FILE_NOT_FOUND"
    YAML_INVALID = "CONFIG_YAML_INVALID"
    ROOT_NOT_MAPPING = "CONFIG_ROOT_NOT_MAPPING"
    VALIDATION_FAILED = "CONFIG_VALIDATION_FAILED"
    ENV_VAR_MISSING = "CONFIG_ENV_VAR_MISSING"


class ConfigError(Exception):
    """Settings loading or validation error."""

    def __init__(
        self,
        message: str,
        *,
        code: ConfigErrorCode,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.path = path
        self.__cause__ = cause


def load_settings(path: Path) -> ProxySettings:
    """Load and validate proxy settings from a YAML file.

    An empty file yields the default settings.

    Raises:
        ConfigError: If file not found, YAML invalid, or validation fails
    """
    if not path.exists():
        raise ConfigError(
            f"Settings file not found: {path}",
            code=ConfigErrorCode.FILE_NOT_FOUND,
            path=path,
        )

    try:
        with path.open() as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {path}: {e}",
            code=ConfigErrorCode.YAML_INVALID,
            path=path,
            cause=e,
        ) from e

    if raw is None:
        logger.debug("Settings file is empty, using defaults: %s", path)
        return ProxySettings()

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Settings must be a YAML mapping, got {type(raw).__name__}",
            code=ConfigErrorCode.ROOT_NOT_MAPPING,
            path=path,
        )

    return load_settings_from_dict(raw, path=path)


def load_settings_from_dict(data: dict[str, Any], *, path: Path | None = None) -> ProxySettings:
    """Validate settings from an already-parsed mapping.

    Raises:
        ConfigError: If validation fails
    """
    try:
        return ProxySettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            format_validation_error(e, path),
            code=ConfigErrorCode.VALIDATION_FAILED,
            path=path,
            cause=e,
        ) from e


def resolve_env_var(env_var_name: str, required: bool = True) -> str | None:
    """Resolve environment variable by name.

    Raises:
        ConfigError: If required and not found
    """
    value = os.environ.get(env_var_name)
    if value is None and required:
        raise ConfigError(
            f"Required environment variable not set: {env_var_name}",
            code=ConfigErrorCode.ENV_VAR_MISSING,
        )
    return value


def format_validation_error(e: ValidationError, path: Path | None = None) -> str:
    """Format Pydantic validation error for human readability."""
    prefix = f"Settings validation failed ({path}):" if path else "Settings validation failed:"
    errors = []
    for err in e.errors():
        loc = " -> ".join(str(x) for x in err["loc"])
        msg = err["msg"]
        errors.append(f"  {loc}: {msg}")
    return prefix + "\n" + "\n".join(errors)
