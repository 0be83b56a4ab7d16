"""Collaborator base classes (abstract).

The orchestrator depends on these types only, so the external programs it
drives (gpg, fzf, clipboard tools, qrencode, git, ssh-add) can be swapped for
in-memory fakes without changing command logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence


class EncryptorBase(ABC):
    @abstractmethod
    def recipients_for(self, directory: Path) -> list[str]:
        """Resolve the encryption recipients for a store directory."""
        ...

    @abstractmethod
    def encrypt(self, recipients: Sequence[str], plaintext: bytes) -> bytes:
        """Encrypt plaintext for the recipients, returning an opaque blob."""
        ...

    @abstractmethod
    def decrypt(self, blob: bytes) -> bytes:
        """Decrypt a blob produced by encrypt()."""
        ...


class SelectorBase(ABC):
    @abstractmethod
    def choose(self, names: Sequence[str]) -> Optional[str]:
        """Let the operator pick one name; None when cancelled."""
        ...


class ClipboardBase(ABC):
    @abstractmethod
    def copy(self, data: bytes) -> bool:
        """Copy data to the clipboard. Returns False on failure."""
        ...


class QrRendererBase(ABC):
    @abstractmethod
    def render(self, data: bytes) -> bytes:
        """Render data as a terminal-displayable QR code."""
        ...


class VersionerBase(ABC):
    @abstractmethod
    def is_active(self) -> bool:
        """True when the store is under version control."""
        ...

    @abstractmethod
    def stage_and_commit(self, paths: Sequence[Path], message: str) -> None:
        """Stage added, changed or removed paths and commit them."""
        ...


class AgentBase(ABC):
    @abstractmethod
    def add_key(self, private_key: bytes, passphrase: Optional[bytes] = None) -> None:
        """Load a private key into the running SSH agent."""
        ...


class PrompterBase(ABC):
    @abstractmethod
    def ask(self, text: str) -> str:
        """Read a line of text."""
        ...

    @abstractmethod
    def ask_secret(self, text: str) -> str:
        """Read a line without echo."""
        ...

    @abstractmethod
    def confirm(self, text: str, default: bool) -> bool:
        """Ask a yes/no question; an empty answer returns default."""
        ...
