"""Error taxonomy. The CLI turns these into messages and exit codes."""

from __future__ import annotations

from typing import Optional


class PassSshError(Exception):
    """Base error; carries the process exit code."""

    exit_code = 1

    def __init__(self, message: str = "", exit_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(PassSshError):
    """Invalid flag combination, unknown flag or invalid name."""


class NotFoundError(PassSshError):
    """Empty store, missing key blob or missing passphrase."""


class CollaboratorError(PassSshError):
    """An external program failed; exit code is the child's."""

    def __init__(self, message: str, exit_code: int = 1, stderr: str = ""):
        # a child killed by signal N reports -N; shells report 128 + N
        if exit_code < 0:
            exit_code = 128 - exit_code
        super().__init__(message, exit_code=exit_code or 1)
        self.stderr = stderr


class OperatorAbort(PassSshError):
    """The operator declined a prompt. Not a failure."""

    exit_code = 0
