"""Host/port parsing and media URI re-basing helpers."""

from __future__ import annotations

from urllib.parse import urlsplit

from onvif_proxy.errors import MalformedEndpointError

DEFAULT_DEVICE_PORT = 80


def parse_endpoint(addr: str, default_port: int = DEFAULT_DEVICE_PORT) -> tuple[str, int]:
    """Parse 'host' or 'host:port' into (host, port), including IPv6 literals.

    Raises:
        MalformedEndpointError: If the host is empty or the port is not a
            number in 1-65535.
    """
    normalized_addr = addr.strip()
    if not normalized_addr:
        raise MalformedEndpointError(addr, "empty address")

    if normalized_addr.startswith("["):
        closing_idx = normalized_addr.find("]")
        if closing_idx == -1:
            raise MalformedEndpointError(addr, "unterminated IPv6 literal")
        host = normalized_addr[1:closing_idx]
        remainder = normalized_addr[closing_idx + 1 :]
        if remainder == "":
            return _checked_host(addr, host), default_port
        if not remainder.startswith(":"):
            raise MalformedEndpointError(addr, "unexpected text after IPv6 literal")
        return _checked_host(addr, host), _parse_port(addr, remainder[1:])

    # More than one colon without brackets is a bare IPv6 literal.
    if normalized_addr.count(":") == 1:
        host, port_str = normalized_addr.split(":", 1)
        return _checked_host(addr, host), _parse_port(addr, port_str)
    return normalized_addr, default_port


def extract_path(uri: str) -> str:
    """Return the path, query and fragment of an absolute URI.

    ``rtsp://10.0.0.5:554/Streaming/101?transport=tcp`` becomes
    ``/Streaming/101?transport=tcp`` so the stream can be re-based behind the
    local proxy.

    Raises:
        ValueError: If ``uri`` has no scheme or no network location.
    """
    parsed = urlsplit(uri)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"not an absolute URI: {uri!r}")
    path = parsed.path or "/"
    if parsed.query:
        path = f"{path}?{parsed.query}"
    if parsed.fragment:
        path = f"{path}#{parsed.fragment}"
    return path


def _checked_host(addr: str, host: str) -> str:
    if not host:
        raise MalformedEndpointError(addr, "empty hostname")
    return host


def _parse_port(addr: str, port_str: str) -> int:
    if not (port_str.isascii() and port_str.isdigit()):
        raise MalformedEndpointError(addr, f"port {port_str!r} is not a number")
    port = int(port_str)
    if not 1 <= port <= 65535:
        raise MalformedEndpointError(addr, f"port {port} out of range")
    return port


__all__ = ["DEFAULT_DEVICE_PORT", "extract_path", "parse_endpoint"]
