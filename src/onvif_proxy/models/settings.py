"""Tunable constants for config synthesis and discovery."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from onvif_proxy.errors import DEFAULT_TIME_CHECK_PHRASES

MAC_PLACEHOLDER = "<ONVIF PROXY MAC ADDRESS HERE>"


class ProxySettings(BaseModel):
    """Proxy port layout, tier weights, and discovery behaviour."""

    base_server_port: int = Field(default=8081, ge=1, le=65535)
    rtsp_port: int = Field(default=8554, ge=1, le=65535)
    snapshot_port: int = Field(default=8580, ge=1, le=65535)
    target_rtsp_port: int = Field(default=554, ge=1, le=65535)
    default_device_port: int = Field(default=80, ge=1, le=65535)
    mac_placeholder: str = MAC_PLACEHOLDER
    high_quality_weight: float = 4.0
    low_quality_weight: float = 1.0
    retry_clock_offset_hours: int = Field(default=1, ge=1)
    time_check_phrases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TIME_CHECK_PHRASES)
    )
    wsdl_dir: str | None = None

    @field_validator("time_check_phrases")
    @classmethod
    def _require_phrases(cls, value: list[str]) -> list[str]:
        phrases = [phrase.strip() for phrase in value if phrase.strip()]
        if not phrases:
            raise ValueError("at least one non-empty phrase is required")
        return phrases

    @field_validator("wsdl_dir", mode="before")
    @classmethod
    def _empty_wsdl_dir_is_default(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
