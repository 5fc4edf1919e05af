"""Mock implementations for testing."""

from tests.onvif_proxy.mocks.device_client import MockDeviceClient, MockDeviceClientFactory
from tests.onvif_proxy.mocks.profiles import make_profile, make_summary

__all__ = [
    "MockDeviceClient",
    "MockDeviceClientFactory",
    "make_profile",
    "make_summary",
]
