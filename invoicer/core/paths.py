from __future__ import annotations

import sys
from pathlib import Path


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def base_path() -> Path:
    """Return the directory bundled resources are resolved against.

    - In a PyInstaller onefile build, resources are extracted to sys._MEIPASS.
    - Otherwise, the installed ``invoicer`` package directory.
    """
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass) / "invoicer"
    return Path(__file__).resolve().parents[1]


def resource_path(rel: str | Path) -> Path:
    """Resolve a packaged resource (e.g. 'assets/fonts') for the current runtime."""
    return base_path() / Path(rel)
