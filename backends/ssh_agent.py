"""Load keys into the running agent with `ssh-add -`."""

from __future__ import annotations

import os
import shlex
import stat
import sys
import tempfile
from pathlib import Path
from typing import Optional

from backends import askpass
from backends.askpass import PASSPHRASE_ENV
from backends.process import run
from common.logger import get_logger
from sshstore.base import AgentBase

ASKPASS_SCRIPT = "#!/bin/sh\nexec {python} -I {askpass} \"$@\"\n"


class SshAddAgent(AgentBase):
    def __init__(self, ssh_add: str = "ssh-add"):
        self.ssh_add = ssh_add

    def add_key(self, private_key: bytes, passphrase: Optional[bytes] = None) -> None:
        log = get_logger(__name__)
        if passphrase is None:
            log.debug("agent: adding key without stored passphrase")
            run([self.ssh_add, "-"], private_key, capture_stdout=False, capture_stderr=False)
            return

        # the helper script runs the askpass module by path with -I, so the
        # working directory never lands on sys.path; the passphrase reaches
        # it through the child environment
        content = ASKPASS_SCRIPT.format(
            python=shlex.quote(sys.executable), askpass=shlex.quote(os.path.abspath(askpass.__file__))
        )
        with tempfile.TemporaryDirectory(prefix="pass-ssh-") as tmp:
            script = Path(tmp) / "askpass"
            script.write_text(content, encoding="utf-8")
            script.chmod(stat.S_IRWXU)
            env = dict(os.environ)
            env.update(
                {
                    "SSH_ASKPASS": str(script),
                    "SSH_ASKPASS_REQUIRE": "force",
                    "DISPLAY": os.environ.get("DISPLAY", ":0"),
                    PASSPHRASE_ENV: passphrase.decode("utf-8"),
                }
            )
            log.debug("agent: adding key with stored passphrase via askpass")
            run([self.ssh_add, "-"], private_key, env=env, capture_stdout=False, capture_stderr=False)
