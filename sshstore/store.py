"""Directory-per-key layout inside the password store.

<store_root>/<entry>/<keyfile>.gpg        private key blob
<store_root>/<entry>/<keyfile>.pub.gpg    public key blob
<store_root>/<entry>/passphrase.gpg       optional unlock passphrase blob
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from common.logger import get_logger
from sshstore.errors import NotFoundError

BLOB_SUFFIX = ".gpg"
PUBLIC_BLOB_SUFFIX = ".pub.gpg"
PASSPHRASE_BLOB = "passphrase.gpg"
# a key file with this name would share its blob with the passphrase
RESERVED_KEY_NAME = PASSPHRASE_BLOB[: -len(BLOB_SUFFIX)]


@dataclass(frozen=True)
class KeyEntry:
    name: str
    directory: Path
    key_name: str

    @property
    def private_blob(self) -> Path:
        return self.directory / (self.key_name + BLOB_SUFFIX)

    @property
    def public_blob(self) -> Path:
        return self.directory / (self.key_name + PUBLIC_BLOB_SUFFIX)

    @property
    def passphrase_blob(self) -> Path:
        return self.directory / PASSPHRASE_BLOB

    def has_passphrase(self) -> bool:
        return self.passphrase_blob.is_file()

    def is_complete(self) -> bool:
        return self.private_blob.is_file() and self.public_blob.is_file()


class KeyStore:
    """Filesystem view of the SSH keys kept in the password store."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def list_entries(self) -> list[str]:
        """Entry names, sorted. Recomputed on every call."""
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir() and not p.name.startswith("."))

    def entry_dir(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.entry_dir(name).is_dir()

    def new_entry(self, name: str, key_name: str) -> KeyEntry:
        directory = self.entry_dir(name)
        directory.mkdir(parents=True, exist_ok=True)
        get_logger(__name__).debug("store: created entry dir=%s", directory)
        return KeyEntry(name=name, directory=directory, key_name=key_name)

    def get(self, name: str) -> KeyEntry:
        """Load a complete entry; a missing private or public blob is fatal."""
        directory = self.entry_dir(name)
        public_blobs: list[Path] = []
        if directory.is_dir():
            public_blobs = sorted(directory.glob("*" + PUBLIC_BLOB_SUFFIX))
        if not public_blobs:
            raise NotFoundError("key files missing")
        key_name = public_blobs[0].name[: -len(PUBLIC_BLOB_SUFFIX)]
        entry = KeyEntry(name=name, directory=directory, key_name=key_name)
        if not entry.private_blob.is_file():
            raise NotFoundError("key files missing")
        return entry

    @staticmethod
    def write_blob(path: Path, blob: bytes) -> None:
        path.write_bytes(blob)
        get_logger(__name__).debug("store: wrote blob path=%s bytes=%d", path, len(blob))

    @staticmethod
    def read_blob(path: Path) -> bytes:
        return path.read_bytes()

    @staticmethod
    def remove_blob(path: Path) -> None:
        path.unlink()
        get_logger(__name__).debug("store: removed blob path=%s", path)

    def delete(self, name: str) -> Optional[Path]:
        directory = self.entry_dir(name)
        if not directory.is_dir():
            return None
        shutil.rmtree(directory)
        get_logger(__name__).info("store: deleted entry name=%s", name)
        return directory
