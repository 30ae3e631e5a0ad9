"""Registriert die Erinnerung als Anmeldeobjekt."""

from __future__ import annotations

import logging
import plistlib
import shlex
import sys
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

LAUNCH_AGENT_LABEL = "com.togglnag"


def _launch_agent(command: Sequence[str], home: Path) -> Path:
    path = home / "Library" / "LaunchAgents" / f"{LAUNCH_AGENT_LABEL}.plist"
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        plistlib.dump(
            {"Label": LAUNCH_AGENT_LABEL, "ProgramArguments": list(command), "RunAtLoad": True},
            handle,
        )
    return path


def _xdg_autostart(command: Sequence[str], home: Path) -> Path:
    path = home / ".config" / "autostart" / "togglnag.desktop"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "[Desktop Entry]\n"
        "Type=Application\n"
        "Name=TogglNag\n"
        f"Exec={shlex.join(command)}\n"
        "X-GNOME-Autostart-enabled=true\n",
        encoding="utf-8",
    )
    return path


def register_autostart(command: Optional[Sequence[str]] = None, *, home: Optional[Path] = None,
                       platform: str = sys.platform) -> Optional[Path]:
    """Schreibt das Anmeldeobjekt für die Plattform. Liefert den Pfad oder None."""

    command = list(command or [sys.executable, "-m", "togglnag_desktop"])
    home = home or Path.home()
    try:
        if platform == "darwin":
            path = _launch_agent(command, home)
        elif platform.startswith("linux"):
            path = _xdg_autostart(command, home)
        else:
            logger.info("Autostart not supported on %s", platform)
            return None
    except OSError as exc:
        logger.warning("Could not register autostart: %s", exc)
        return None
    logger.debug("Autostart registered at %s", path)
    return path


__all__ = ["register_autostart"]
