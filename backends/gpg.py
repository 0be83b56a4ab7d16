"""gpg-backed encryptor, using the same recipients and options as pass."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from backends.process import run
from common.logger import get_logger
from sshstore.base import EncryptorBase
from sshstore.errors import NotFoundError

GPG_ID_FILE = ".gpg-id"
BASE_OPTS = ["--quiet", "--yes", "--compress-algo=none", "--no-encrypt-to"]


def read_gpg_id(path: Path) -> list[str]:
    recipients = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            recipients.append(line)
    return recipients


class GpgEncryptor(EncryptorBase):
    def __init__(
        self,
        prefix: Path,
        gpg: str = "gpg",
        gpg_opts: Optional[Sequence[str]] = None,
        recipients_override: Optional[Sequence[str]] = None,
    ):
        self.prefix = Path(prefix)
        self.gpg = gpg
        self.opts = BASE_OPTS + list(gpg_opts or [])
        self.recipients_override = list(recipients_override or [])

    def recipients_for(self, directory: Path) -> list[str]:
        """PASSWORD_STORE_KEY, else the nearest .gpg-id between directory and the store prefix."""
        if self.recipients_override:
            return list(self.recipients_override)
        current = Path(directory)
        while True:
            candidate = current / GPG_ID_FILE
            if candidate.is_file():
                get_logger(__name__).debug("gpg: recipients from %s", candidate)
                return read_gpg_id(candidate)
            if current == self.prefix or current.parent == current:
                break
            current = current.parent
        raise NotFoundError(
            "You must run: pass init your-gpg-id before you may use the password store."
        )

    def encrypt(self, recipients: Sequence[str], plaintext: bytes) -> bytes:
        args: list[str] = [self.gpg, "-e"]
        for recipient in recipients:
            args.extend(["-r", recipient])
        args.extend(self.opts)
        return run(args, plaintext).stdout

    def decrypt(self, blob: bytes) -> bytes:
        return run([self.gpg, "-d", *self.opts], blob).stdout
