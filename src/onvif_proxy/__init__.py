"""ONVIF camera discovery and proxy config synthesis."""

__version__ = "0.1.0"

# Export commonly used types
from onvif_proxy.builder import build_config, discover_device
from onvif_proxy.errors import DeviceError, DeviceErrorKind
from onvif_proxy.models.config import CameraConfig, DeviceConfig
from onvif_proxy.models.settings import ProxySettings

__all__ = [
    "CameraConfig",
    "DeviceConfig",
    "DeviceError",
    "DeviceErrorKind",
    "ProxySettings",
    "__version__",
    "build_config",
    "discover_device",
]
