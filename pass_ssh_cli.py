#!/usr/bin/env python3
"""
pass ssh: keep SSH keys in the password store.

Usage:
  pass ssh add
  pass ssh list|ls
  pass ssh show|cat [--private|--public|--passphrase] [--copy] [--qr]
  pass ssh edit
  pass ssh extract [--private] [--public] [--print]
  pass ssh delete|remove|rm
  pass ssh agent

Environment:
  PREFIX / PASSWORD_STORE_DIR   password store location
  PASS_SSH_DIR                  sub-directory holding the keys (default: ssh_keys)
  SSH_DIR                       user SSH directory (default: ~/.ssh)
"""
import argparse
import sys
from typing import Optional, Sequence

from backends import FzfSelector, GitVersioner, GpgEncryptor, QrencodeRenderer, SshAddAgent, clipboard_for
from common.logger import get_logger
from sshstore import KeyStore, KeyStoreOrchestrator, OperatorAbort, PassSshError, Settings, UsageError
from sshstore.prompts import ConsolePrompter

COMMANDS = {
    "add": "add",
    "list": "list",
    "ls": "list",
    "show": "show",
    "cat": "show",
    "edit": "edit",
    "extract": "extract",
    "delete": "delete",
    "remove": "delete",
    "rm": "delete",
    "agent": "agent",
}

FLAGS = ("private", "public", "passphrase", "copy", "qr", "print")

SUPPORTED_FLAGS = {
    "add": (),
    "list": (),
    "show": ("private", "public", "passphrase", "copy", "qr"),
    "edit": (),
    "extract": ("private", "public", "print"),
    "delete": (),
    "agent": (),
}


def print_usage(program: str) -> None:
    print(f"Usage: {program} ssh action [options]")
    print("Actions:")
    print("  add:               add new key to password store")
    print("  list|ls:           list keys in password store")
    print("  show|cat:          print the public key to stdout")
    print("      --private      print the private key instead")
    print("      --passphrase   print the saved passphrase instead")
    print("      --copy         copy to clipboard instead of printing")
    print("      --qr           display as a QR code")
    print("  edit:              add, change or remove the saved passphrase of a key")
    print("  extract:           extract keys from password store and save to user SSH directory")
    print("      --private      only the private key")
    print("      --public       only the public key")
    print("      --print        print to stdout instead of writing files")
    print("  delete|remove|rm:  remove keys from password store")
    print("  agent:             add key to SSH agent")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pass ssh", add_help=False, allow_abbrev=False)
    parser.add_argument("command", nargs="?")
    parser.add_argument("args", nargs="*")
    for flag in FLAGS:
        parser.add_argument(f"--{flag}", action="store_true")
    return parser


def build_orchestrator(settings: Settings) -> KeyStoreOrchestrator:
    return KeyStoreOrchestrator(
        store=KeyStore(settings.store_root),
        ssh_dir=settings.ssh_dir,
        encryptor=GpgEncryptor(
            settings.prefix,
            gpg=settings.gpg,
            gpg_opts=settings.gpg_opts,
            recipients_override=settings.recipients_override,
        ),
        selector=FzfSelector(),
        prompter=ConsolePrompter(),
        versioner=GitVersioner(settings.git_repo or settings.prefix, settings.git_dir),
        clipboard=clipboard_for(settings),
        qr=QrencodeRenderer(),
        agent=SshAddAgent(),
    )


def dispatch(orchestrator: KeyStoreOrchestrator, command: str, parsed: argparse.Namespace) -> None:
    if command == "add":
        orchestrator.add()
    elif command == "list":
        orchestrator.list_keys()
    elif command == "show":
        orchestrator.show(
            private=parsed.private,
            public=parsed.public,
            passphrase=parsed.passphrase,
            copy=parsed.copy,
            qr=parsed.qr,
        )
    elif command == "edit":
        orchestrator.edit()
    elif command == "extract":
        orchestrator.extract(private=parsed.private, public=parsed.public, print_only=parsed.print)
    elif command == "delete":
        orchestrator.delete()
    elif command == "agent":
        orchestrator.add_to_agent()


def check_flags(command: str, parsed: argparse.Namespace, unknown: Sequence[str]) -> None:
    if unknown:
        raise UsageError(f"unknown argument {unknown[0]}.")
    if parsed.args:
        raise UsageError(f"unexpected argument {parsed.args[0]}.")
    for flag in FLAGS:
        if getattr(parsed, flag) and flag not in SUPPORTED_FLAGS[command]:
            raise UsageError(f"option --{flag} is not supported by {command}.")


def main(argv: Optional[Sequence[str]] = None, orchestrator: Optional[KeyStoreOrchestrator] = None) -> None:
    parser = build_parser()
    parsed, unknown = parser.parse_known_args(argv)
    settings = Settings.from_env()

    command = COMMANDS.get((parsed.command or "").lower())
    if not command:
        print_usage(settings.program)
        sys.exit(0)

    log = get_logger("pass_ssh")
    try:
        check_flags(command, parsed, unknown)
        dispatch(orchestrator or build_orchestrator(settings), command, parsed)
    except OperatorAbort as e:
        if e.message:
            print(e.message)
        sys.exit(0)
    except EOFError:
        # end of input at a prompt declines it
        print()
        sys.exit(0)
    except PassSshError as e:
        log.debug("command %s failed: %r", command, e)
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(e.exit_code)
    except OSError as e:
        log.debug("command %s failed: %r", command, e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
