"""Single discovery attempt: connect, enumerate, resolve, group, assemble."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Protocol

from onvif_proxy.builder.assembly import assemble_config
from onvif_proxy.builder.grouping import group_profiles
from onvif_proxy.endpoints import parse_endpoint
from onvif_proxy.models.config import DeviceConfig
from onvif_proxy.models.profile import MediaProfile
from onvif_proxy.models.settings import ProxySettings
from onvif_proxy.onvif.client import OnvifCameraClient, OnvifMediaProfile

logger = logging.getLogger(__name__)


class DeviceClient(Protocol):
    async def list_profiles(self) -> list[OnvifMediaProfile]: ...

    async def resolve_stream_uri(self, profile_token: str) -> str: ...

    async def resolve_snapshot_uri(self, profile_token: str) -> str: ...

    async def close(self) -> None: ...


class DeviceClientFactory(Protocol):
    def __call__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        port: int,
        wsdl_dir: str | None,
        clock_offset: timedelta | None,
        time_check_phrases: Any,
    ) -> DeviceClient: ...


async def discover_device(
    host_address: str,
    username: str,
    password: str,
    *,
    settings: ProxySettings | None = None,
    clock_offset: timedelta | None = None,
    client_factory: DeviceClientFactory = OnvifCameraClient,
) -> DeviceConfig:
    """Run one full discovery-and-assembly attempt against a device.

    Fails fast: the first device error propagates and no partial config is
    returned.

    Raises:
        MalformedEndpointError: If ``host_address`` cannot be parsed.
        DeviceError: On any SOAP fault, transport failure, or unusable profile.
    """
    resolved = settings or ProxySettings()
    hostname, port = parse_endpoint(host_address, default_port=resolved.default_device_port)
    profiles = await discover_profiles(
        hostname,
        port,
        username,
        password,
        settings=resolved,
        clock_offset=clock_offset,
        client_factory=client_factory,
    )

    groups = group_profiles(profiles)
    logger.info(
        "Discovered %d profiles across %d video sources on %s:%d",
        len(profiles),
        len(groups),
        hostname,
        port,
    )
    return assemble_config(groups, hostname=hostname, device_port=port, settings=resolved)


async def discover_profiles(
    hostname: str,
    port: int,
    username: str,
    password: str,
    *,
    settings: ProxySettings,
    clock_offset: timedelta | None = None,
    client_factory: DeviceClientFactory = OnvifCameraClient,
) -> list[MediaProfile]:
    """Return every media profile with its stream and snapshot URIs resolved."""
    client = client_factory(
        hostname,
        username,
        password,
        port=port,
        wsdl_dir=settings.wsdl_dir,
        clock_offset=clock_offset,
        time_check_phrases=settings.time_check_phrases,
    )
    try:
        return await _fetch_profiles(client)
    finally:
        await client.close()


async def _fetch_profiles(client: DeviceClient) -> list[MediaProfile]:
    profiles: list[MediaProfile] = []
    # One profile at a time; output order must follow device order.
    for summary in await client.list_profiles():
        snapshot_uri = await client.resolve_snapshot_uri(summary.token)
        stream_uri = await client.resolve_stream_uri(summary.token)
        profiles.append(
            MediaProfile(
                token=summary.token,
                name=summary.name,
                source_token=summary.source_token,
                source_name=summary.source_name,
                quality=summary.quality,
                width=summary.width,
                height=summary.height,
                frame_rate_limit=summary.frame_rate_limit,
                bitrate_limit=summary.bitrate_limit,
                stream_uri=stream_uri,
                snapshot_uri=snapshot_uri,
            )
        )
    return profiles
