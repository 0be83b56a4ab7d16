"""Stored passphrase lifecycle.

Two states (no passphrase / has passphrase). transition() is pure; the
prompting lives in read_confirmed() and the orchestrator.
"""

from __future__ import annotations

import enum

from sshstore.base import PrompterBase


class PassphraseState(enum.Enum):
    NO_PASSPHRASE = "no_passphrase"
    HAS_PASSPHRASE = "has_passphrase"


class PassphraseAction(enum.Enum):
    NONE = "none"
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


COMMIT_MESSAGES = {
    PassphraseAction.ADD: "Added passphrase for {name}.",
    PassphraseAction.UPDATE: "Updated passphrase for {name}.",
    PassphraseAction.REMOVE: "Removed passphrase for {name}.",
}


def transition(
    state: PassphraseState, value: str, confirm_removal: bool = False
) -> tuple[PassphraseState, PassphraseAction]:
    """Next state and the on-disk action for a confirmed passphrase value."""
    if state is PassphraseState.NO_PASSPHRASE:
        if value:
            return PassphraseState.HAS_PASSPHRASE, PassphraseAction.ADD
        return state, PassphraseAction.NONE
    if value:
        return PassphraseState.HAS_PASSPHRASE, PassphraseAction.UPDATE
    if confirm_removal:
        return PassphraseState.NO_PASSPHRASE, PassphraseAction.REMOVE
    return state, PassphraseAction.NONE


def read_confirmed(prompter: PrompterBase, name: str) -> str:
    """Ask for the passphrase twice until both entries match."""
    while True:
        first = prompter.ask_secret(f"Enter passphrase for {name}: ")
        second = prompter.ask_secret(f"Retype passphrase for {name}: ")
        if first == second:
            return first
        print("Error: the entered passphrases do not match.")
