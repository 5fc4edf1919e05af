"""Module entrypoint for ``python -m onvif_proxy``."""

from __future__ import annotations

from onvif_proxy.cli import main

if __name__ == "__main__":
    main()
