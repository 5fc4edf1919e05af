"""Shared pytest fixtures for onvif-proxy tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to sys.path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path.resolve()) not in sys.path:
    sys.path.insert(0, str(src_path.resolve()))

import pytest

from onvif_proxy.models.settings import ProxySettings


@pytest.fixture
def settings() -> ProxySettings:
    """Default proxy settings."""
    return ProxySettings()
