"""Pick a unique, non-empty name, asking the operator to resolve collisions."""

from __future__ import annotations

from typing import Callable

from sshstore.base import PrompterBase
from sshstore.errors import OperatorAbort, UsageError


def validate_name(name: str) -> str:
    if "/" in name or "\\" in name or name in (".", ".."):
        raise UsageError(f"invalid key name '{name}'.")
    return name


def _ensure_not_empty(name: str, prompter: PrompterBase) -> str:
    if name:
        return name
    if not prompter.confirm("The name of the key cannot be empty. Do you want to pick a name?", default=True):
        raise OperatorAbort()
    name = prompter.ask("Enter name: ").strip()
    if not name:
        raise UsageError("the name of the key cannot be empty.")
    return name


def resolve_name(
    proposed: str,
    exists: Callable[[str], bool],
    prompter: PrompterBase,
    where: str,
) -> str:
    """Return a name for which exists() is false.

    Raises OperatorAbort when the operator declines to rename, and UsageError
    when an empty name is confirmed.
    """
    name = validate_name(_ensure_not_empty(proposed.strip(), prompter))
    while exists(name):
        if not prompter.confirm(
            f"A key with name {name} already exists in {where}. Do you want to pick a different name?",
            default=True,
        ):
            raise OperatorAbort("Remove the existing key and try again.")
        name = validate_name(_ensure_not_empty(prompter.ask("Enter name: ").strip(), prompter))
    return name


def extract_collision(ssh_dir_exists: Callable[[str], bool], private: bool, public: bool) -> Callable[[str], bool]:
    """exists() for extraction: a name collides if any file to be written exists."""

    def exists(name: str) -> bool:
        if private and ssh_dir_exists(name):
            return True
        if public and ssh_dir_exists(name + ".pub"):
            return True
        return False

    return exists
