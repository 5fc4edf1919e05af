"""ONVIF device access."""

from onvif_proxy.onvif.client import OnvifCameraClient, OnvifMediaProfile

__all__ = ["OnvifCameraClient", "OnvifMediaProfile"]
