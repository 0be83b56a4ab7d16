from backends.clipboard import WaylandClipboard, XClipboard, clipboard_for
from backends.fzf import FzfSelector
from backends.git import GitVersioner
from backends.gpg import GpgEncryptor
from backends.qrencode import QrencodeRenderer
from backends.ssh_agent import SshAddAgent

__all__ = [
    "GpgEncryptor",
    "FzfSelector",
    "WaylandClipboard",
    "XClipboard",
    "clipboard_for",
    "QrencodeRenderer",
    "GitVersioner",
    "SshAddAgent",
]
