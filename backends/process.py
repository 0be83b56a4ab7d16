"""Run external programs, mapping failures to CollaboratorError."""

from __future__ import annotations

import subprocess
from typing import Mapping, Optional, Sequence

from common.logger import get_logger
from sshstore.errors import CollaboratorError

COMMAND_NOT_FOUND = 127


def run(
    command: Sequence[str],
    input_data: Optional[bytes] = None,
    env: Optional[Mapping[str, str]] = None,
    check: bool = True,
    capture_stdout: bool = True,
    capture_stderr: bool = True,
) -> subprocess.CompletedProcess:
    """Run command with input_data on stdin.

    stdout and stderr are captured unless capture_stdout / capture_stderr is
    False (then the child writes straight to the terminal). With check=True a
    non-zero exit raises CollaboratorError carrying the child's return code.
    """
    log = get_logger(__name__)
    log.debug("process: run %s", command[0])
    try:
        process = subprocess.run(
            list(command),
            input=input_data,
            stdout=subprocess.PIPE if capture_stdout else None,
            stderr=subprocess.PIPE if capture_stderr else None,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as e:
        raise CollaboratorError(f"'{command[0]}' is not installed.", exit_code=COMMAND_NOT_FOUND) from e

    if check and process.returncode != 0:
        stderr = (process.stderr or b"").decode("utf-8", errors="replace").strip()
        log.debug("process: %s exited with %d", command[0], process.returncode)
        raise CollaboratorError(
            f"'{command[0]}' failed" + (f": {stderr}" if stderr else "."),
            exit_code=process.returncode,
            stderr=stderr,
        )
    return process
