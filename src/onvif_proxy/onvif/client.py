"""ONVIF client wrapper for media profiles, stream URIs, and snapshot URIs."""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, TypeVar, cast

from onvif_proxy.endpoints import extract_path
from onvif_proxy.errors import (
    DEFAULT_TIME_CHECK_PHRASES,
    DeviceError,
    IncompleteProfileError,
    classify_device_error,
)

try:
    import onvif as _onvif_pkg  # type: ignore[import-not-found]
    from onvif import ONVIFCamera as _ONVIFCamera  # type: ignore[import-not-found]
except Exception:  # pragma: no cover - exercised via dependency guard tests
    _onvif_pkg = None
    _ONVIFCamera = None

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_RTSP_STREAM_SETUP = {
    "Stream": "RTP-Unicast",
    "Transport": {"Protocol": "RTSP"},
}


@dataclass(frozen=True, slots=True)
class OnvifMediaProfile:
    """Summary of one ONVIF media profile as reported by GetProfiles."""

    token: str
    name: str
    source_token: str
    source_name: str
    quality: float
    width: int
    height: int
    frame_rate_limit: int
    bitrate_limit: int


class OnvifCameraClient:
    """Thin async wrapper around onvif-zeep-async ONVIFCamera.

    ``clock_offset`` shifts the WS-Security ``Created`` timestamp of every
    request made through this client. It is scoped to the client instance, so
    two clients with different offsets can run side by side.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        port: int = 80,
        wsdl_dir: str | None = None,
        clock_offset: timedelta | None = None,
        time_check_phrases: Iterable[str] = DEFAULT_TIME_CHECK_PHRASES,
    ) -> None:
        camera_class = _require_onvif_camera_class()
        if clock_offset is not None:
            camera_class = _with_fixed_clock_offset(camera_class, clock_offset)
        resolved_wsdl = wsdl_dir if wsdl_dir is not None else _default_wsdl_dir()
        self._camera = camera_class(host, port, username, password, resolved_wsdl)
        self._time_check_phrases = tuple(time_check_phrases)
        self._initialized = False
        self._media_service: Any | None = None

    async def close(self) -> None:
        """Close the underlying ONVIFCamera and its transport sessions."""
        close = getattr(self._camera, "close", None)
        if close is not None:
            await close()

    async def list_profiles(self) -> list[OnvifMediaProfile]:
        """Return the device's media profiles in device-reported order.

        Raises:
            IncompleteProfileError: If a profile lacks its video source or
                encoder configuration.
            DeviceError: On SOAP faults or transport failures.
        """
        media = await self._media()
        raw_profiles = list(await self._call(media.GetProfiles) or [])
        profiles = [
            _parse_profile(profile, index=index) for index, profile in enumerate(raw_profiles)
        ]
        logger.debug("Device reported %d media profiles", len(profiles))
        return profiles

    async def resolve_stream_uri(self, profile_token: str) -> str:
        """Return the absolute RTSP unicast URI for ``profile_token``."""
        media = await self._media()
        request = {"StreamSetup": _RTSP_STREAM_SETUP, "ProfileToken": profile_token}
        response = await self._call(media.GetStreamUri, request)
        return _checked_uri(response, profile_token=profile_token, operation="GetStreamUri")

    async def resolve_snapshot_uri(self, profile_token: str) -> str:
        """Return the absolute snapshot URI for ``profile_token``."""
        media = await self._media()
        response = await self._call(media.GetSnapshotUri, {"ProfileToken": profile_token})
        return _checked_uri(response, profile_token=profile_token, operation="GetSnapshotUri")

    async def _call(self, operation: Callable[..., Awaitable[_T]], *args: Any) -> _T:
        try:
            return await operation(*args)
        except DeviceError:
            raise
        except Exception as exc:
            raise classify_device_error(
                exc, time_check_phrases=self._time_check_phrases
            ) from exc

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self._call(self._camera.update_xaddrs)
            self._initialized = True

    async def _media(self) -> Any:
        await self._ensure_initialized()
        if self._media_service is None:
            self._media_service = await self._call(self._camera.create_media_service)
        return self._media_service


def _require_onvif_camera_class() -> type[Any]:
    if _ONVIFCamera is None:
        raise RuntimeError(
            "Missing dependency: onvif-zeep-async. Install with: pip install onvif-zeep-async"
        )
    return cast(type[Any], _ONVIFCamera)


def _with_fixed_clock_offset(camera_class: type[Any], offset: timedelta) -> type[Any]:
    """Return a camera class whose services all sign with ``offset``.

    ``ONVIFCamera.dt_diff`` is added to the WS-Security ``Created`` timestamp
    when a service is built. ``update_xaddrs`` resets it to None before it
    creates the devicemgmt service, so the offset is pinned again on every
    ``create_onvif_service`` call.
    """

    class _OffsetOnvifCamera(camera_class):  # type: ignore[misc, valid-type]
        fixed_clock_offset = offset

        async def create_onvif_service(self, *args: Any, **kwargs: Any) -> Any:
            self.dt_diff = self.fixed_clock_offset
            return await super().create_onvif_service(*args, **kwargs)

    return _OffsetOnvifCamera


def _default_wsdl_dir() -> str:
    """Resolve the WSDL directory bundled with onvif-zeep-async.

    The library's own default (``site-packages/wsdl/``) relies on
    ``data_files`` placement which is unreliable across installers, so the
    ``onvif`` package directory is checked first.
    """
    if _onvif_pkg is None:
        return ""
    pkg_dir = os.path.dirname(_onvif_pkg.__file__)
    inside_pkg = os.path.join(pkg_dir, "wsdl")
    if os.path.isdir(inside_pkg):
        return inside_pkg
    site_packages = os.path.dirname(pkg_dir)
    return os.path.join(site_packages, "wsdl")


def _parse_profile(profile: Any, *, index: int) -> OnvifMediaProfile:
    token = _profile_token(profile, index=index)
    source_cfg = getattr(profile, "VideoSourceConfiguration", None)
    video_cfg = getattr(profile, "VideoEncoderConfiguration", None)
    if source_cfg is None:
        raise IncompleteProfileError(token, "missing VideoSourceConfiguration")
    if video_cfg is None:
        raise IncompleteProfileError(token, "missing VideoEncoderConfiguration")

    source_token = _as_optional_string(getattr(source_cfg, "SourceToken", None))
    if not source_token:
        raise IncompleteProfileError(token, "missing VideoSourceConfiguration.SourceToken")

    source_name = _as_optional_string(getattr(source_cfg, "Name", None))
    if not source_name:
        raise IncompleteProfileError(token, "missing VideoSourceConfiguration.Name")

    resolution = getattr(video_cfg, "Resolution", None)
    rate_control = getattr(video_cfg, "RateControl", None)
    return OnvifMediaProfile(
        token=token,
        name=_as_string(getattr(profile, "Name", None), fallback=token),
        source_token=source_token,
        source_name=source_name,
        quality=_required_number(video_cfg, "Quality", token=token, cast_to=float),
        width=_required_number(resolution, "Width", token=token, cast_to=int),
        height=_required_number(resolution, "Height", token=token, cast_to=int),
        frame_rate_limit=_required_number(rate_control, "FrameRateLimit", token=token, cast_to=int),
        bitrate_limit=_required_number(rate_control, "BitrateLimit", token=token, cast_to=int),
    )


def _required_number(container: Any, attr: str, *, token: str, cast_to: type[_T]) -> _T:
    value = getattr(container, attr, None) if container is not None else None
    if value is None or isinstance(value, bool):
        raise IncompleteProfileError(token, f"missing encoder field {attr}")
    try:
        return cast_to(value)  # type: ignore[call-arg]
    except (TypeError, ValueError) as exc:
        raise IncompleteProfileError(token, f"invalid encoder field {attr}={value!r}") from exc


def _checked_uri(response: Any, *, profile_token: str, operation: str) -> str:
    uri = _as_optional_string(getattr(response, "Uri", None))
    if not uri:
        raise IncompleteProfileError(profile_token, f"{operation} returned empty Uri")
    try:
        extract_path(uri)
    except ValueError as exc:
        raise IncompleteProfileError(profile_token, f"{operation} returned {exc}") from exc
    return uri


def _profile_token(profile: Any, *, index: int) -> str:
    for attr in ("token", "_token", "Token"):
        value = getattr(profile, attr, None)
        if isinstance(value, str) and value:
            return value
    raise IncompleteProfileError(f"#{index}", "missing profile token")


def _as_string(value: Any, *, fallback: str = "") -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return fallback
    return str(value)


def _as_optional_string(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


__all__ = ["OnvifCameraClient", "OnvifMediaProfile"]
