"""Discovery-time media profile records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MediaProfile:
    """One ONVIF media profile with its resolved stream and snapshot URIs."""

    token: str
    name: str
    source_token: str
    source_name: str
    quality: float
    width: int
    height: int
    frame_rate_limit: int
    bitrate_limit: int
    stream_uri: str
    snapshot_uri: str


@dataclass(frozen=True, slots=True)
class VideoSourceGroup:
    """Profiles advertised for one physical video source, in device order."""

    source_token: str
    profiles: tuple[MediaProfile, ...]


@dataclass(frozen=True, slots=True)
class StreamPair:
    """High/low stream selection for one video source."""

    source_token: str
    high: MediaProfile
    low: MediaProfile
