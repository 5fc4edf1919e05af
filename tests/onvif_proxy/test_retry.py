"""Tests for the clock-skew tolerant retry controller."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from onvif_proxy.builder.retry import build_config
from onvif_proxy.errors import (
    AuthenticationTimingError,
    DeviceError,
    MalformedEndpointError,
    ProtocolFaultError,
    TransportFailureError,
)
from onvif_proxy.models.config import DeviceConfig
from onvif_proxy.models.settings import ProxySettings
from tests.onvif_proxy.mocks import MockDeviceClient, MockDeviceClientFactory, make_summary


class _ScriptedAttempt:
    """Discovery attempt that replays a scripted sequence of outcomes."""

    def __init__(self, *outcomes: DeviceConfig | Exception) -> None:
        self.outcomes = list(outcomes)
        self.offsets: list[timedelta | None] = []

    async def __call__(
        self,
        host_address: str,
        username: str,
        password: str,
        *,
        settings: ProxySettings | None = None,
        clock_offset: timedelta | None = None,
    ) -> DeviceConfig:
        self.offsets.append(clock_offset)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


async def test_build_config_returns_primary_result_without_retry() -> None:
    """A successful first attempt should be returned as-is."""
    expected = DeviceConfig()
    attempt = _ScriptedAttempt(expected)

    result = await build_config("cam", "admin", "pw", attempt=attempt)

    assert result is expected
    assert attempt.offsets == [None]


async def test_build_config_retries_once_with_clock_offset_after_timing_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """A timing failure should trigger one retry with a one-hour offset."""
    # Given: The first attempt is rejected for its timestamp, the second succeeds
    expected = DeviceConfig()
    attempt = _ScriptedAttempt(AuthenticationTimingError("time check failed"), expected)

    # When: Building the config
    with caplog.at_level(logging.INFO, logger="onvif_proxy.builder.retry"):
        result = await build_config("cam", "admin", "pw", attempt=attempt)

    # Then: Exactly two attempts ran and only the second was skewed
    assert result is expected
    assert attempt.offsets == [None, timedelta(hours=1)]
    assert "Retrying cam" in caplog.text


async def test_build_config_gives_up_after_second_timing_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Two timing failures should yield no config and a logged diagnostic."""
    attempt = _ScriptedAttempt(
        AuthenticationTimingError("time check failed"),
        AuthenticationTimingError("time check failed"),
    )

    with caplog.at_level(logging.ERROR, logger="onvif_proxy.builder.retry"):
        result = await build_config("cam", "admin", "pw", attempt=attempt)

    assert result is None
    assert attempt.offsets == [None, timedelta(hours=1)]
    failure = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(failure) == 1
    assert getattr(failure[0], "attempt") == "retried"
    assert getattr(failure[0], "error_kind") == "AUTH_TIMING"


@pytest.mark.parametrize(
    "error",
    [
        ProtocolFaultError("The requested profile token does not exist"),
        TransportFailureError("Connection refused"),
        MalformedEndpointError("cam:x", "port 'x' is not a number"),
    ],
)
async def test_build_config_does_not_retry_other_failures(error: DeviceError) -> None:
    """Only timing failures are recoverable."""
    attempt = _ScriptedAttempt(error)

    result = await build_config("cam", "admin", "pw", attempt=attempt)

    assert result is None
    assert attempt.offsets == [None]


async def test_build_config_returns_none_when_retry_hits_other_failure() -> None:
    attempt = _ScriptedAttempt(
        AuthenticationTimingError("time check failed"),
        ProtocolFaultError("Sender not authorized"),
    )

    result = await build_config("cam", "admin", "pw", attempt=attempt)

    assert result is None
    assert len(attempt.offsets) == 2


async def test_build_config_uses_configured_offset() -> None:
    attempt = _ScriptedAttempt(AuthenticationTimingError("time check failed"), DeviceConfig())

    await build_config(
        "cam", "admin", "pw", settings=ProxySettings(retry_clock_offset_hours=2), attempt=attempt
    )

    assert attempt.offsets == [None, timedelta(hours=2)]


async def test_build_config_skews_only_the_retry_client() -> None:
    """End to end: the retry builds a fresh client carrying the offset."""
    # Given: The first client is rejected for its timestamp, the second works
    first = MockDeviceClient(
        [make_summary("a")],
        fail_on="resolve_snapshot_uri",
        error=AuthenticationTimingError("time check failed"),
    )
    second = MockDeviceClient([make_summary("a")])
    factory = MockDeviceClientFactory(first, second)

    async def _attempt(
        host_address: str,
        username: str,
        password: str,
        *,
        settings: ProxySettings | None = None,
        clock_offset: timedelta | None = None,
    ) -> DeviceConfig:
        from onvif_proxy.builder.discovery import discover_device

        return await discover_device(
            host_address,
            username,
            password,
            settings=settings,
            clock_offset=clock_offset,
            client_factory=factory,
        )

    # When: Building the config
    result = await build_config("10.0.0.5", "admin", "pw", attempt=_attempt)

    # Then: Both clients were closed and only the second was skewed
    assert result is not None
    assert len(result.onvif) == 1
    assert [created["clock_offset"] for created in factory.created] == [None, timedelta(hours=1)]
    assert first.closed is True
    assert second.closed is True


async def test_build_config_propagates_unexpected_errors() -> None:
    """Programming errors are not device failures and should not be swallowed."""
    attempt = _ScriptedAttempt(KeyError("bug"))

    with pytest.raises(KeyError):
        await build_config("cam", "admin", "pw", attempt=attempt)
