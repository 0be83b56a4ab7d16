"""Clipboard backends: wl-copy on Wayland, xclip on X11."""

from __future__ import annotations

from backends.process import run
from common.logger import get_logger
from sshstore.base import ClipboardBase
from sshstore.config import Settings


class WaylandClipboard(ClipboardBase):
    def copy(self, data: bytes) -> bool:
        process = run(["wl-copy"], data, check=False)
        return process.returncode == 0


class XClipboard(ClipboardBase):
    def __init__(self, selection: str = "clipboard"):
        self.selection = selection

    def copy(self, data: bytes) -> bool:
        process = run(["xclip", "-selection", self.selection], data, check=False)
        return process.returncode == 0


def clipboard_for(settings: Settings) -> ClipboardBase:
    if settings.wayland:
        get_logger(__name__).debug("clipboard: using wl-copy")
        return WaylandClipboard()
    get_logger(__name__).debug("clipboard: using xclip selection=%s", settings.x_selection)
    return XClipboard(settings.x_selection)
