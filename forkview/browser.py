"""Open URLs in the platform's default browser.

Launcher output is discarded so it cannot scribble over the full-screen UI.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys

from .errors import BrowserLaunchError

logger = logging.getLogger(__name__)

LINUX_LAUNCHERS: tuple[str, ...] = ("xdg-open", "wslview", "x-www-browser")


def browser_command(url: str, platform: str | None = None) -> list[str]:
    """Return the launcher argv for ``url`` on ``platform``."""
    platform = sys.platform if platform is None else platform
    if platform.startswith("win"):
        return ["powershell", "Start-Process", url]
    if platform == "darwin":
        return ["open", url]
    if platform.startswith("linux"):
        for launcher in LINUX_LAUNCHERS:
            if shutil.which(launcher) is not None:
                return [launcher, url]
        raise BrowserLaunchError("no supported browser launcher found")
    raise BrowserLaunchError(f"unsupported OS: {platform}")


def open_url(url: str, platform: str | None = None) -> None:
    """Launch the default browser on ``url`` and wait for the launcher to exit."""
    command = browser_command(url, platform)
    logger.debug("launching browser: %s", command)
    try:
        proc = subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        raise BrowserLaunchError(f"failed to launch {command[0]}: {exc}") from exc
    if proc.returncode != 0:
        raise BrowserLaunchError(f"{command[0]} exited with status {proc.returncode}")


__all__ = ["LINUX_LAUNCHERS", "browser_command", "open_url"]
