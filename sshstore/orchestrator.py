"""Command implementations for `pass ssh`.

Every command reads the store index fresh, lets the operator pick an entry,
does its filesystem and encryptor work, then commits through the versioner
when the store is under version control.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from common.logger import get_logger
from sshstore.base import (
    AgentBase,
    ClipboardBase,
    EncryptorBase,
    PrompterBase,
    QrRendererBase,
    SelectorBase,
    VersionerBase,
)
from sshstore.errors import CollaboratorError, NotFoundError, OperatorAbort, UsageError
from sshstore.keyfile import SourceKeyFile
from sshstore.naming import extract_collision, resolve_name
from sshstore.passphrase import (
    COMMIT_MESSAGES,
    PassphraseAction,
    PassphraseState,
    read_confirmed,
    transition,
)
from sshstore.store import RESERVED_KEY_NAME, KeyEntry, KeyStore

PRIVATE_FILE_MODE = 0o600
PUBLIC_FILE_MODE = 0o644
SSH_DIR_MODE = 0o700


class KeyStoreOrchestrator:
    def __init__(
        self,
        store: KeyStore,
        ssh_dir: Path,
        encryptor: EncryptorBase,
        selector: SelectorBase,
        prompter: PrompterBase,
        versioner: Optional[VersionerBase] = None,
        clipboard: Optional[ClipboardBase] = None,
        qr: Optional[QrRendererBase] = None,
        agent: Optional[AgentBase] = None,
        out: Optional[BinaryIO] = None,
    ):
        self.store = store
        self.ssh_dir = Path(ssh_dir)
        self.encryptor = encryptor
        self.selector = selector
        self.prompter = prompter
        self.versioner = versioner
        self.clipboard = clipboard
        self.qr = qr
        self.agent = agent
        self._out = out

    # ---------- helpers ----------

    def _emit(self, data: bytes) -> None:
        """Write raw bytes to stdout, ending with a newline."""
        sys.stdout.flush()
        out = self._out or sys.stdout.buffer
        out.write(data)
        if not data.endswith(b"\n"):
            out.write(b"\n")
        out.flush()

    def _commit(self, paths: Sequence[Path], message: str) -> None:
        if self.versioner is not None and self.versioner.is_active():
            self.versioner.stage_and_commit(paths, message)

    def _select_name(self) -> str:
        names = self.store.list_entries()
        if not names:
            raise NotFoundError("no SSH key in password store.")
        choice = self.selector.choose(names)
        if not choice:
            raise OperatorAbort()
        if choice not in names:
            raise NotFoundError(f"{choice} is not in the password store.")
        return choice

    def _select_entry(self) -> KeyEntry:
        return self.store.get(self._select_name())

    def _apply_passphrase(
        self,
        entry: KeyEntry,
        state: PassphraseState,
        value: str,
        confirm_removal: bool = False,
    ) -> PassphraseAction:
        _, action = transition(state, value, confirm_removal)
        if action is PassphraseAction.NONE:
            return action
        if action is PassphraseAction.REMOVE:
            self.store.remove_blob(entry.passphrase_blob)
        else:
            recipients = self.encryptor.recipients_for(entry.directory)
            blob = self.encryptor.encrypt(recipients, value.encode("utf-8"))
            self.store.write_blob(entry.passphrase_blob, blob)
        message = COMMIT_MESSAGES[action].format(name=entry.name)
        self._commit([entry.passphrase_blob], message)
        get_logger(__name__).info("passphrase: %s entry=%s", action.value, entry.name)
        print(message)
        return action

    def _decrypt_passphrase(self, entry: KeyEntry) -> bytes:
        return self.encryptor.decrypt(self.store.read_blob(entry.passphrase_blob)).rstrip(b"\r\n")

    # ---------- commands ----------

    def add(self) -> str:
        public_names = SourceKeyFile.public_key_names(self.ssh_dir)
        if not public_names:
            raise NotFoundError(f"no SSH public key found in {self.ssh_dir}.")
        choice = self.selector.choose(public_names)
        if not choice:
            raise OperatorAbort()

        source = SourceKeyFile.from_public_path(self.ssh_dir / choice)
        if source.key_name == RESERVED_KEY_NAME:
            raise UsageError(
                f"the key file name '{RESERVED_KEY_NAME}' is reserved; rename the key and try again."
            )
        private_key = source.read_private()
        public_key = source.read_public()
        fingerprint = source.fingerprint()

        name = resolve_name(source.comment(), self.store.exists, self.prompter, where="the store")
        recipients = self.encryptor.recipients_for(self.store.entry_dir(name))
        entry = self.store.new_entry(name, source.key_name)

        self.store.write_blob(entry.private_blob, self.encryptor.encrypt(recipients, private_key))
        self.store.write_blob(entry.public_blob, self.encryptor.encrypt(recipients, public_key))
        self._commit([entry.private_blob], f"Added {name} SSH private key.")
        self._commit([entry.public_blob], f"Added {name} SSH public key.")
        get_logger(__name__).info("add: stored key=%s entry=%s", source.key_name, name)
        print(f"Added {name} ({fingerprint}) to the password store.")

        protected = source.needs_passphrase()
        if protected is not False and self.prompter.confirm(
            f"Do you want to save the passphrase of {name}?", default=protected is True
        ):
            value = read_confirmed(self.prompter, name)
            self._apply_passphrase(entry, PassphraseState.NO_PASSPHRASE, value)
        return name

    def list_keys(self) -> list[str]:
        names = self.store.list_entries()
        if not names:
            print("No SSH key in password store.")
        for name in names:
            print(name)
        return names

    def show(
        self,
        private: bool = False,
        public: bool = False,
        passphrase: bool = False,
        copy: bool = False,
        qr: bool = False,
    ) -> None:
        if private and passphrase:
            raise UsageError("--private and --passphrase are mutually exclusive.")
        if public and (private or passphrase):
            raise UsageError("--public cannot be combined with --private or --passphrase.")

        entry = self._select_entry()
        if passphrase:
            if not entry.has_passphrase():
                raise NotFoundError("no passphrase found.")
            what, data = "passphrase", self._decrypt_passphrase(entry)
        elif private:
            what, data = "private key", self.encryptor.decrypt(self.store.read_blob(entry.private_blob))
        else:
            what, data = "public key", self.encryptor.decrypt(self.store.read_blob(entry.public_blob))

        if copy:
            if self.clipboard is None or not self.clipboard.copy(data):
                raise CollaboratorError("could not copy to clipboard.")
            print(f"Copied {what} of {entry.name} to clipboard.")
        if qr:
            if self.qr is None:
                raise CollaboratorError("no QR renderer available.")
            self._emit(self.qr.render(data))
        if not copy and not qr:
            self._emit(data)

    def edit(self) -> PassphraseAction:
        entry = self._select_entry()
        if entry.has_passphrase():
            state = PassphraseState.HAS_PASSPHRASE
            proceed = self.prompter.confirm(
                f"A passphrase already exists for {entry.name}. Do you want to overwrite it?", default=False
            )
        else:
            state = PassphraseState.NO_PASSPHRASE
            proceed = self.prompter.confirm(f"Do you want to add a passphrase for {entry.name}?", default=True)
        if not proceed:
            raise OperatorAbort()

        value = read_confirmed(self.prompter, entry.name)
        confirm_removal = False
        if not value and state is PassphraseState.HAS_PASSPHRASE:
            confirm_removal = self.prompter.confirm(
                f"Empty passphrase. Do you want to remove the existing passphrase of {entry.name}?",
                default=False,
            )
        action = self._apply_passphrase(entry, state, value, confirm_removal)
        if action is PassphraseAction.NONE:
            print(f"Passphrase of {entry.name} left unchanged.")
        return action

    def extract(self, private: bool = False, public: bool = False, print_only: bool = False) -> Optional[str]:
        if not private and not public:
            private = public = True

        entry = self._select_entry()
        public_key = self.encryptor.decrypt(self.store.read_blob(entry.public_blob)) if public else None
        private_key = self.encryptor.decrypt(self.store.read_blob(entry.private_blob)) if private else None

        if print_only:
            for data in (public_key, private_key):
                if data is not None:
                    self._emit(data)
            return None

        self.ssh_dir.mkdir(mode=SSH_DIR_MODE, parents=True, exist_ok=True)
        collides = extract_collision(lambda filename: (self.ssh_dir / filename).exists(), private, public)

        def exists(name: str) -> bool:
            return name == RESERVED_KEY_NAME or collides(name)

        name = resolve_name(entry.key_name, exists, self.prompter, where=f"'{self.ssh_dir}'")

        if public_key is not None:
            _write_file(self.ssh_dir / (name + ".pub"), public_key, PUBLIC_FILE_MODE)
        if private_key is not None:
            _write_file(self.ssh_dir / name, private_key, PRIVATE_FILE_MODE)
        get_logger(__name__).info("extract: entry=%s written as %s", entry.name, name)
        print(f"{name} keys are extracted at {self.ssh_dir}")
        return name

    def delete(self) -> str:
        name = self._select_name()
        if not self.prompter.confirm(f"Are you sure you would like to delete {name}?", default=False):
            raise OperatorAbort()
        directory = self.store.delete(name)
        if directory is not None:
            self._commit([directory], f"Removed {name} SSH keys.")
        print(f"Removed {name} from the password store.")
        return name

    def add_to_agent(self) -> None:
        if self.agent is None:
            raise CollaboratorError("no SSH agent available.")
        entry = self._select_entry()
        private_key = self.encryptor.decrypt(self.store.read_blob(entry.private_blob))
        passphrase = self._decrypt_passphrase(entry) if entry.has_passphrase() else None
        self.agent.add_key(private_key, passphrase)
        get_logger(__name__).info("agent: loaded entry=%s", entry.name)


def _write_file(path: Path, data: bytes, mode: int) -> None:
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
