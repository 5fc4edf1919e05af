"""Proxy configuration models produced by config synthesis."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CameraPorts(_FrozenModel):
    """Local proxy listening ports for one camera."""

    server: int
    rtsp: int
    snapshot: int


class StreamTier(_FrozenModel):
    """One quality tier (main or sub stream) re-exposed by the proxy."""

    rtsp: str
    snapshot: str
    width: int
    height: int
    framerate: int
    bitrate: int
    quality: float


class TargetPorts(_FrozenModel):
    """Upstream device ports."""

    rtsp: int
    snapshot: int


class UpstreamTarget(_FrozenModel):
    """Upstream device the proxy forwards to."""

    hostname: str
    ports: TargetPorts


class CameraConfig(_FrozenModel):
    """Synthesized proxy configuration for one physical camera."""

    mac: str
    ports: CameraPorts
    name: str
    uuid: str
    high_quality: StreamTier = Field(alias="highQuality")
    low_quality: StreamTier = Field(alias="lowQuality")
    target: UpstreamTarget


class DeviceConfig(_FrozenModel):
    """Top-level output: one camera entry per discovered video source."""

    onvif: list[CameraConfig] = Field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Return the config with camelCase keys, ready for YAML/JSON output."""
        return self.model_dump(by_alias=True, mode="json")
