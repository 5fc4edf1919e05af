"""Clock-skew tolerant wrapper around a discovery attempt."""

from __future__ import annotations

import logging
from datetime import timedelta
from enum import StrEnum
from typing import Protocol

from onvif_proxy.builder.discovery import discover_device
from onvif_proxy.errors import DeviceError, DeviceErrorKind
from onvif_proxy.models.config import DeviceConfig
from onvif_proxy.models.settings import ProxySettings

logger = logging.getLogger(__name__)


class AttemptState(StrEnum):
    PRIMARY = "primary"
    RETRIED = "retried"


class DiscoveryAttempt(Protocol):
    async def __call__(
        self,
        host_address: str,
        username: str,
        password: str,
        *,
        settings: ProxySettings | None = None,
        clock_offset: timedelta | None = None,
    ) -> DeviceConfig: ...


async def build_config(
    host_address: str,
    username: str,
    password: str,
    *,
    settings: ProxySettings | None = None,
    attempt: DiscoveryAttempt = discover_device,
) -> DeviceConfig | None:
    """Discover a device and synthesize its proxy config.

    Devices whose clock disagrees with ours reject the signed request with a
    "time check failed" fault. That case gets exactly one retry with the
    WS-Security timestamp shifted forward by ``settings.retry_clock_offset_hours``.
    The offset only applies to the retry's own client.

    Returns:
        The config, or None when discovery failed. Failures are logged, not
        raised.
    """
    resolved = settings or ProxySettings()

    try:
        return await attempt(host_address, username, password, settings=resolved, clock_offset=None)
    except DeviceError as exc:
        if exc.kind is not DeviceErrorKind.AUTH_TIMING:
            _log_failure(host_address, exc, state=AttemptState.PRIMARY)
            return None
        logger.warning(
            "Device %s rejected request timestamp: %s",
            host_address,
            exc,
            extra={"attempt": AttemptState.PRIMARY.value, "error_kind": exc.kind.value},
        )

    offset = timedelta(hours=resolved.retry_clock_offset_hours)
    logger.info("Retrying %s with clock offset %s", host_address, offset)
    try:
        return await attempt(host_address, username, password, settings=resolved, clock_offset=offset)
    except DeviceError as exc:
        _log_failure(host_address, exc, state=AttemptState.RETRIED)
        return None


def _log_failure(host_address: str, exc: DeviceError, *, state: AttemptState) -> None:
    logger.error(
        "Config discovery failed for %s: %s",
        host_address,
        exc,
        extra={"attempt": state.value, "error_kind": exc.kind.value},
    )
