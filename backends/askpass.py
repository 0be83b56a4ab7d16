"""SSH_ASKPASS helper: answers ssh-add's prompt with the passphrase handed
down in the environment by SshAddAgent.
"""

from __future__ import annotations

import os
import sys

PASSPHRASE_ENV = "PASS_SSH_ASKPASS_PASSPHRASE"


def main() -> None:
    passphrase = os.environ.get(PASSPHRASE_ENV)
    if passphrase is None:
        sys.exit(1)
    print(passphrase)
    sys.exit(0)


if __name__ == "__main__":
    main()
