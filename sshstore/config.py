"""Runtime settings read from the environment (and an optional .env file).

pass exports PREFIX and PROGRAM to its extensions; the remaining variables are
the ones pass itself honours, plus PASS_SSH_DIR and SSH_DIR.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from os import getenv
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_PASS_SSH_DIR = "ssh_keys"
DEFAULT_X_SELECTION = "clipboard"


@dataclass
class Settings:
    prefix: Path
    pass_ssh_dir: str = DEFAULT_PASS_SSH_DIR
    ssh_dir: Path = field(default_factory=lambda: Path.home() / ".ssh")
    git_repo: Optional[Path] = None
    gpg: str = "gpg"
    gpg_opts: list[str] = field(default_factory=list)
    recipients_override: list[str] = field(default_factory=list)
    x_selection: str = DEFAULT_X_SELECTION
    wayland: bool = False
    program: str = "pass"

    @property
    def store_root(self) -> Path:
        return self.prefix / self.pass_ssh_dir

    @property
    def git_dir(self) -> Path:
        return (self.git_repo or self.prefix) / ".git"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        prefix = getenv("PREFIX") or getenv("PASSWORD_STORE_DIR") or str(Path.home() / ".password-store")
        git_repo = getenv("PASSWORD_STORE_GIT")
        return cls(
            prefix=Path(prefix).expanduser(),
            pass_ssh_dir=getenv("PASS_SSH_DIR") or DEFAULT_PASS_SSH_DIR,
            ssh_dir=Path(getenv("SSH_DIR") or str(Path.home() / ".ssh")).expanduser(),
            git_repo=Path(git_repo).expanduser() if git_repo else None,
            gpg=getenv("GPG") or "gpg",
            gpg_opts=shlex.split(getenv("PASSWORD_STORE_GPG_OPTS", "")),
            recipients_override=(getenv("PASSWORD_STORE_KEY") or "").split(),
            x_selection=getenv("PASSWORD_STORE_X_SELECTION") or DEFAULT_X_SELECTION,
            wayland=bool(getenv("WAYLAND_DISPLAY")),
            program=getenv("PROGRAM") or "pass",
        )
