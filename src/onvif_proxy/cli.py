"""CLI for generating ONVIF proxy configs."""

from __future__ import annotations

import asyncio
import getpass
import sys
from pathlib import Path
from typing import NoReturn, cast

from dotenv import load_dotenv

load_dotenv()

import fire  # type: ignore[import-untyped]
import yaml

from onvif_proxy.builder import build_config, discover_profiles, group_profiles, select_streams
from onvif_proxy.config import ConfigError, load_settings, resolve_env_var
from onvif_proxy.endpoints import parse_endpoint
from onvif_proxy.errors import DeviceError
from onvif_proxy.logging_setup import configure_logging
from onvif_proxy.models.profile import MediaProfile
from onvif_proxy.models.settings import ProxySettings

PASSWORD_ENV_VAR = "ONVIF_PASSWORD"


class OnvifProxyCLI:
    """Generate virtual-camera proxy configs from a real ONVIF device."""

    def create_config(
        self,
        host: str,
        u: str,
        p: str | None = None,
        settings: str | None = None,
        output: str | None = None,
        password_env: str | None = None,
        log_level: str = "INFO",
    ) -> None:
        """Discover a device and print its proxy config as YAML.

        Args:
            host: Device address, 'host' or 'host:port'
            u: ONVIF username
            p: ONVIF password (falls back to $ONVIF_PASSWORD, then a prompt)
            settings: Optional YAML settings file
            output: Write YAML here instead of stdout
            password_env: Read the password from this variable; it must be set
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        configure_logging(log_level=log_level, device=host)
        resolved = _load_settings_or_exit(settings)
        password = _resolve_password(p, password_env)

        config = asyncio.run(build_config(host, u, password, settings=resolved))
        if config is None:
            _exit_with_error(f"No configuration produced for {host}; see log for details")

        rendered = yaml.safe_dump(config.to_dict(), sort_keys=False)
        if output is None:
            print(rendered, end="")
            return

        Path(output).write_text(rendered)
        print(f"✓ Config written: {output} ({len(config.onvif)} cameras)", file=sys.stderr)

    def profiles(
        self,
        host: str,
        u: str,
        p: str | None = None,
        settings: str | None = None,
        password_env: str | None = None,
        log_level: str = "WARNING",
    ) -> None:
        """Show media profiles per video source and the high/low selection.

        The host argument accepts 'host' or 'host:port'.
        """
        configure_logging(log_level=log_level, device=host)
        resolved = _load_settings_or_exit(settings)
        password = _resolve_password(p, password_env)

        try:
            hostname, port = parse_endpoint(host, default_port=resolved.default_device_port)
            media_profiles = asyncio.run(
                discover_profiles(hostname, port, u, password, settings=resolved)
            )
        except DeviceError as exc:
            _exit_with_error(str(exc))

        if not media_profiles:
            print("No media profiles reported.")
            return

        print(f"Media profiles for ONVIF device {hostname}:{port}:")
        for group in group_profiles(media_profiles):
            pair = select_streams(group)
            print(f"- video source {group.source_token} ({pair.high.source_name})")
            for profile in group.profiles:
                print(f"  {_profile_line(profile, high=pair.high, low=pair.low)}")


def _profile_line(profile: MediaProfile, *, high: MediaProfile, low: MediaProfile) -> str:
    tiers = [label for label, chosen in (("high", high), ("low", low)) if chosen is profile]
    marker = f"[{'/'.join(tiers)}]" if tiers else "[unused]"
    return (
        f"{marker} token={profile.token} name={profile.name}"
        f" quality={profile.quality:g} {profile.width}x{profile.height}"
        f" fps_limit={profile.frame_rate_limit} bitrate_kbps={profile.bitrate_limit}"
        f" rtsp={profile.stream_uri} snapshot={profile.snapshot_uri}"
    )


def _load_settings_or_exit(path: str | None) -> ProxySettings:
    if path is None:
        return ProxySettings()
    try:
        return load_settings(Path(path))
    except ConfigError as exc:
        _exit_with_error(f"Settings invalid: {exc}")


def _resolve_password(password: str | None, password_env: str | None) -> str:
    if password is not None:
        return password
    if password_env is not None:
        try:
            return cast(str, resolve_env_var(password_env))
        except ConfigError as exc:
            _exit_with_error(str(exc))
    from_env = resolve_env_var(PASSWORD_ENV_VAR, required=False)
    if from_env is not None:
        return from_env
    return getpass.getpass("ONVIF password: ")


def _exit_with_error(message: str) -> NoReturn:
    print(f"✗ {message}", file=sys.stderr)
    raise SystemExit(1)


def main() -> None:
    """CLI entrypoint."""
    fire.Fire(OnvifProxyCLI)


if __name__ == "__main__":
    main()
