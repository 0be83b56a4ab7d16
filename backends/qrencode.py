from __future__ import annotations

from backends.process import run
from sshstore.base import QrRendererBase


class QrencodeRenderer(QrRendererBase):
    """Render with `qrencode -t utf8` for display in a terminal."""

    def __init__(self, qrencode: str = "qrencode"):
        self.qrencode = qrencode

    def render(self, data: bytes) -> bytes:
        return run([self.qrencode, "-t", "utf8"], data).stdout
