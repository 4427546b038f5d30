"""Host environment tags attached to every Sentry report.

Gathered once when a sink is constructed: locale, process bitness,
server edition, elevated privileges and graphical session.
"""

from __future__ import annotations

import locale
import os
import platform
import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class HostInfo:
    """Static facts about the host process.

    Attributes:
        culture: Locale name (e.g. "en-US"), empty if unknown
        is_64bit: Running as a 64-bit process
        is_server: Windows Server edition
        is_admin: Running with elevated privileges
        is_gui: A graphical session is available
    """

    culture: str
    is_64bit: bool
    is_server: bool
    is_admin: bool
    is_gui: bool

    def as_tags(self) -> dict[str, str]:
        """Render as Sentry tags (booleans as "True"/"False")."""
        return {
            "culture": self.culture,
            "64_process": str(self.is_64bit),
            "is_server": str(self.is_server),
            "is_admin": str(self.is_admin),
            "is_gui": str(self.is_gui),
        }


def _culture() -> str:
    try:
        name = locale.getlocale()[0]
    except ValueError:
        return ""
    return name.replace("_", "-") if name else ""


def _is_windows_server() -> bool:
    if sys.platform != "win32":
        return False
    edition = platform.win32_edition() or ""
    return "server" in edition.lower()


def _is_admin() -> bool:
    if sys.platform == "win32":
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError):
            return False
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _is_gui() -> bool:
    if sys.platform in ("win32", "darwin"):
        return True
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


def collect_host_info() -> HostInfo:
    """Collect host facts for the current process."""
    return HostInfo(
        culture=_culture(),
        is_64bit=sys.maxsize > 2**32,
        is_server=_is_windows_server(),
        is_admin=_is_admin(),
        is_gui=_is_gui(),
    )
