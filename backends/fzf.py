from __future__ import annotations

from typing import Optional, Sequence

from backends.process import run
from sshstore.base import SelectorBase


class FzfSelector(SelectorBase):
    """Interactive fuzzy selection; fzf draws on the tty, the choice comes back on stdout."""

    def __init__(self, fzf: str = "fzf"):
        self.fzf = fzf

    def choose(self, names: Sequence[str]) -> Optional[str]:
        data = "\n".join(names).encode("utf-8")
        process = run([self.fzf], data, check=False, capture_stderr=False)
        if process.returncode != 0:
            return None
        choice = process.stdout.decode("utf-8").strip()
        return choice or None
