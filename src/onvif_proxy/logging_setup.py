"""Console logging for onvif-proxy runs.

Logs go to stderr so the generated YAML on stdout stays clean. Each line is
tagged with the device being discovered, and structured ``extra`` fields such
as the retry attempt and error kind are appended as a JSON block.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os

_CURRENT_DEVICE_LABEL = "-"
_STANDARD_LOGRECORD_ATTRS = {
    "name",
    "msg",
    "message",
    "asctime",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}


class _DeviceLabelFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "device") or getattr(record, "device") in (None, ""):
            record.device = _CURRENT_DEVICE_LABEL
        return True


class _JsonExtraFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = _extract_extras(record)
        if not extras:
            return base
        extras_json = json.dumps(extras, indent=2, default=str, sort_keys=True)
        return f"{base}\n{extras_json}"


def _extract_extras(record: logging.LogRecord) -> dict[str, object]:
    extras: dict[str, object] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOGRECORD_ATTRS:
            continue
        if key == "device":
            continue
        extras[key] = value
    return extras


def set_device_label(label: str | None) -> None:
    """Set the `device` value injected into log records."""
    global _CURRENT_DEVICE_LABEL
    _CURRENT_DEVICE_LABEL = label or "-"


def _install_device_filter() -> None:
    root = logging.getLogger()
    for handler in root.handlers:
        if any(isinstance(f, _DeviceLabelFilter) for f in handler.filters):
            continue
        handler.addFilter(_DeviceLabelFilter())


def configure_logging(*, log_level: str = "INFO", device: str | None = None) -> None:
    """Configure root logging with a consistent format.

    Format includes the `device` label plus `module:lineno`. Override the
    console format with the `CONSOLE_LOG_FORMAT` environment variable.
    """
    console_level_name = str(log_level).upper()
    default_console_fmt = (
        "%(asctime)s %(levelname)s [%(device)s] %(module)s:%(lineno)d %(message)s"
    )
    console_fmt = os.getenv("CONSOLE_LOG_FORMAT", default_console_fmt)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": "onvif_proxy.logging_setup._JsonExtraFormatter",
                    "format": console_fmt,
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": console_level_name,
                    "formatter": "default",
                    # stdout carries the generated YAML.
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {"level": "DEBUG", "handlers": ["console"]},
        }
    )

    _install_device_filter()
    set_device_label(device)
    logging.captureWarnings(True)

    # Reduce noisy SOAP transport logs by default.
    logging.getLogger("zeep").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
