"""Settings loading and validation."""

from onvif_proxy.config.loader import (
    ConfigError,
    ConfigErrorCode,
    load_settings,
    load_settings_from_dict,
    resolve_env_var,
)

__all__ = [
    "ConfigError",
    "ConfigErrorCode",
    "load_settings",
    "load_settings_from_dict",
    "resolve_env_var",
]
