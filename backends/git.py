from __future__ import annotations

from pathlib import Path
from typing import Sequence

from backends.process import run
from common.logger import get_logger
from sshstore.base import VersionerBase


class GitVersioner(VersionerBase):
    """Commit store changes when the password store is a git repository."""

    def __init__(self, repo: Path, git_dir: Path):
        self.repo = Path(repo)
        self.git_dir = Path(git_dir)

    def is_active(self) -> bool:
        return self.git_dir.is_dir()

    def stage_and_commit(self, paths: Sequence[Path], message: str) -> None:
        # --all also stages deletions of paths no longer on disk
        run(["git", "-C", str(self.repo), "add", "--all", "--", *[str(p) for p in paths]])
        run(["git", "-C", str(self.repo), "commit", "-q", "-m", message])
        get_logger(__name__).info("git: committed %r", message)
