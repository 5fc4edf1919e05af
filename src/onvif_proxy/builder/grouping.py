"""Partition media profiles by physical video source."""

from __future__ import annotations

from collections.abc import Iterable

from onvif_proxy.models.profile import MediaProfile, VideoSourceGroup


def group_profiles(profiles: Iterable[MediaProfile]) -> list[VideoSourceGroup]:
    """Group profiles by video-source token in first-seen order.

    The returned order drives local port allocation, so it depends only on the
    order the device reported profiles in. Nothing is sorted.
    """
    order: list[str] = []
    members: dict[str, list[MediaProfile]] = {}
    for profile in profiles:
        bucket = members.get(profile.source_token)
        if bucket is None:
            bucket = []
            members[profile.source_token] = bucket
            order.append(profile.source_token)
        bucket.append(profile)
    return [VideoSourceGroup(source_token=token, profiles=tuple(members[token])) for token in order]
