"""Interactive prompts on the controlling terminal."""

from __future__ import annotations

import getpass

from sshstore.base import PrompterBase


class ConsolePrompter(PrompterBase):
    def ask(self, text: str) -> str:
        return input(text).strip()

    def ask_secret(self, text: str) -> str:
        return getpass.getpass(text)

    def confirm(self, text: str, default: bool) -> bool:
        hint = "[Y/n]" if default else "[y/N]"
        response = input(f"{text} {hint} ").strip().lower()
        if default:
            return response not in ("n", "no")
        return response in ("y", "yes")
