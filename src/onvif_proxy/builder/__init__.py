"""Discovery pipeline and proxy config synthesis."""

from onvif_proxy.builder.assembly import assemble_config
from onvif_proxy.builder.discovery import discover_device, discover_profiles
from onvif_proxy.builder.grouping import group_profiles
from onvif_proxy.builder.retry import AttemptState, build_config
from onvif_proxy.builder.selection import select_streams

__all__ = [
    "AttemptState",
    "assemble_config",
    "build_config",
    "discover_device",
    "discover_profiles",
    "group_profiles",
    "select_streams",
]
