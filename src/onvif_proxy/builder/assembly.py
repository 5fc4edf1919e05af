"""Turn selected stream pairs into proxy camera configs."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable

from onvif_proxy.builder.selection import select_streams
from onvif_proxy.endpoints import extract_path
from onvif_proxy.models.config import (
    CameraConfig,
    CameraPorts,
    DeviceConfig,
    StreamTier,
    TargetPorts,
    UpstreamTarget,
)
from onvif_proxy.models.profile import MediaProfile, StreamPair, VideoSourceGroup
from onvif_proxy.models.settings import ProxySettings

logger = logging.getLogger(__name__)


def _new_uuid() -> str:
    return str(uuid.uuid4())


def assemble_config(
    groups: Iterable[VideoSourceGroup],
    *,
    hostname: str,
    device_port: int,
    settings: ProxySettings | None = None,
    uuid_factory: Callable[[], str] = _new_uuid,
) -> DeviceConfig:
    """Build one camera entry per video source, in group order.

    Server ports are handed out from ``settings.base_server_port`` upward;
    the RTSP and snapshot relay ports are the same for every camera.
    """
    resolved = settings or ProxySettings()
    cameras: list[CameraConfig] = []
    server_port = resolved.base_server_port
    for group in groups:
        pair = select_streams(group)
        cameras.append(
            _camera_config(
                pair,
                server_port=server_port,
                hostname=hostname,
                device_port=device_port,
                settings=resolved,
                camera_uuid=uuid_factory(),
            )
        )
        logger.debug(
            "Assembled camera %s: high=%s low=%s server_port=%d",
            pair.source_token,
            pair.high.token,
            pair.low.token,
            server_port,
        )
        server_port += 1
    return DeviceConfig(onvif=cameras)


def _camera_config(
    pair: StreamPair,
    *,
    server_port: int,
    hostname: str,
    device_port: int,
    settings: ProxySettings,
    camera_uuid: str,
) -> CameraConfig:
    return CameraConfig(
        mac=settings.mac_placeholder,
        ports=CameraPorts(
            server=server_port,
            rtsp=settings.rtsp_port,
            snapshot=settings.snapshot_port,
        ),
        name=pair.high.source_name,
        uuid=camera_uuid,
        high_quality=_tier(pair.high, weight=settings.high_quality_weight),
        low_quality=_tier(pair.low, weight=settings.low_quality_weight),
        target=UpstreamTarget(
            hostname=hostname,
            ports=TargetPorts(rtsp=settings.target_rtsp_port, snapshot=device_port),
        ),
    )


def _tier(profile: MediaProfile, *, weight: float) -> StreamTier:
    return StreamTier(
        rtsp=extract_path(profile.stream_uri),
        snapshot=extract_path(profile.snapshot_uri),
        width=profile.width,
        height=profile.height,
        framerate=profile.frame_rate_limit,
        bitrate=profile.bitrate_limit,
        quality=weight,
    )
