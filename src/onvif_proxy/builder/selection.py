"""Pick the main and sub stream for each video source."""

from __future__ import annotations

from onvif_proxy.models.profile import MediaProfile, StreamPair, VideoSourceGroup


def select_streams(group: VideoSourceGroup) -> StreamPair:
    """Return the (high, low) pair for one video source.

    Only the first two profiles in device order are compared; quality score is
    the primary key and horizontal resolution breaks ties. With a single
    profile both tiers point at it.
    """
    if not group.profiles:
        raise ValueError(f"video source {group.source_token} has no profiles")

    first = group.profiles[0]
    second = group.profiles[1] if len(group.profiles) > 1 else first
    if _outranks(second, first):
        return StreamPair(source_token=group.source_token, high=second, low=first)
    return StreamPair(source_token=group.source_token, high=first, low=second)


def _outranks(candidate: MediaProfile, incumbent: MediaProfile) -> bool:
    if candidate.quality > incumbent.quality:
        return True
    return candidate.quality == incumbent.quality and candidate.width > incumbent.width
