"""Tests for endpoint parsing and URI path extraction."""

from __future__ import annotations

import pytest

from onvif_proxy.endpoints import extract_path, parse_endpoint
from onvif_proxy.errors import DeviceErrorKind, MalformedEndpointError


class TestParseEndpoint:
    def test_host_with_port(self) -> None:
        """parse_endpoint should split host and numeric port."""
        # Given: An address with an explicit port
        addr = "10.0.0.5:8000"

        # When: Parsing address
        host, port = parse_endpoint(addr)

        # Then: Host and port are split
        assert (host, port) == ("10.0.0.5", 8000)

    def test_host_without_port_defaults_to_80(self) -> None:
        """parse_endpoint should default to port 80 when no port is given."""
        assert parse_endpoint("10.0.0.5") == ("10.0.0.5", 80)

    def test_does_not_mutate_input(self) -> None:
        """parse_endpoint should leave the caller's string untouched."""
        addr = "camera.local:8080"

        parse_endpoint(addr)

        assert addr == "camera.local:8080"

    def test_custom_default_port(self) -> None:
        """parse_endpoint should honour a caller-provided default port."""
        assert parse_endpoint("camera.local", default_port=8899) == ("camera.local", 8899)

    def test_bracketed_ipv6_with_port(self) -> None:
        """parse_endpoint should accept bracketed IPv6 literals with a port."""
        assert parse_endpoint("[fe80::1]:8080") == ("fe80::1", 8080)

    def test_bare_ipv6_literal_keeps_default_port(self) -> None:
        """parse_endpoint should not misinterpret bare IPv6 literals as host:port."""
        assert parse_endpoint("fe80::1") == ("fe80::1", 80)

    @pytest.mark.parametrize(
        "addr",
        ["10.0.0.5:", "10.0.0.5:abc", "10.0.0.5:80a", ":8000", "", "10.0.0.5:70000", "[fe80::1"],
    )
    def test_malformed_endpoint_raises(self, addr: str) -> None:
        """parse_endpoint should reject unparseable ports and hosts."""
        # When/Then: Parsing raises a typed error instead of producing garbage
        with pytest.raises(MalformedEndpointError) as exc_info:
            parse_endpoint(addr)

        assert exc_info.value.kind is DeviceErrorKind.MALFORMED_ENDPOINT


class TestExtractPath:
    @pytest.mark.parametrize(
        "prefix",
        ["rtsp://10.0.0.5:554", "rtsp://10.0.0.5", "http://user:pw@camera.local:8080"],
    )
    @pytest.mark.parametrize(
        "path",
        ["/Streaming/Channels/101", "/onvif-media/media.amp?profile=1&sessiontimeout=60", "/"],
    )
    def test_strips_scheme_host_and_port(self, prefix: str, path: str) -> None:
        """extract_path should drop everything before the path."""
        assert extract_path(prefix + path) == path

    def test_uri_without_path_maps_to_root(self) -> None:
        """extract_path should return '/' when the URI has no path."""
        assert extract_path("rtsp://10.0.0.5:554") == "/"

    @pytest.mark.parametrize("uri", ["/already/relative", "", "camera.local/stream"])
    def test_rejects_relative_uri(self, uri: str) -> None:
        """extract_path should reject URIs without scheme and host."""
        with pytest.raises(ValueError, match="not an absolute URI"):
            extract_path(uri)
