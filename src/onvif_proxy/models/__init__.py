"""Data models for discovery and proxy configuration."""

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

__all__ = [
    "CameraConfig",
    "CameraPorts",
    "DeviceConfig",
    "MediaProfile",
    "ProxySettings",
    "StreamPair",
    "StreamTier",
    "TargetPorts",
    "UpstreamTarget",
    "VideoSourceGroup",
]
