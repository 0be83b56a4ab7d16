import io

import pytest

import pass_ssh_cli
from fakes import FakeEncryptor, FakePrompter, FakeSelector, FakeVersioner
from pass_ssh_cli import main
from sshstore.errors import CollaboratorError
from sshstore.orchestrator import KeyStoreOrchestrator
from sshstore.store import KeyStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("PROGRAM", raising=False)


@pytest.fixture
def mock_orchestrator(mocker):
    return mocker.MagicMock(spec=KeyStoreOrchestrator)


def real_orchestrator(tmp_path, choice=None, prompter=None):
    return KeyStoreOrchestrator(
        store=KeyStore(tmp_path / "ssh_keys"),
        ssh_dir=tmp_path / "ssh",
        encryptor=FakeEncryptor(),
        selector=FakeSelector(choice),
        prompter=prompter or FakePrompter(),
        versioner=FakeVersioner(),
        out=io.BytesIO(),
    )


def run_main(argv, orchestrator=None):
    """Run main() and return its exit code (0 when it returns normally)."""
    try:
        main(argv, orchestrator=orchestrator)
    except SystemExit as e:
        return e.code
    return 0


class TestUsage:
    @pytest.mark.parametrize("argv", [[], ["bogus"], ["help"]])
    def test_usage_exits_zero(self, argv, capsys, mock_orchestrator):
        assert run_main(argv, mock_orchestrator) == 0
        out = capsys.readouterr().out
        assert out.startswith("Usage: pass ssh action")
        assert "extract" in out
        assert mock_orchestrator.method_calls == []

    def test_program_name_from_env(self, monkeypatch, capsys, mock_orchestrator):
        monkeypatch.setenv("PROGRAM", "gopass")
        run_main([], mock_orchestrator)
        assert capsys.readouterr().out.startswith("Usage: gopass ssh")


class TestDispatch:
    @pytest.mark.parametrize(
        "argv,method",
        [
            (["add"], "add"),
            (["list"], "list_keys"),
            (["ls"], "list_keys"),
            (["edit"], "edit"),
            (["delete"], "delete"),
            (["remove"], "delete"),
            (["rm"], "delete"),
            (["agent"], "add_to_agent"),
        ],
    )
    def test_aliases(self, argv, method, mock_orchestrator):
        assert run_main(argv, mock_orchestrator) == 0
        getattr(mock_orchestrator, method).assert_called_once_with()

    @pytest.mark.parametrize("command", ["show", "cat"])
    def test_show_flags(self, command, mock_orchestrator):
        run_main([command, "--passphrase", "--copy"], mock_orchestrator)
        mock_orchestrator.show.assert_called_once_with(
            private=False, public=False, passphrase=True, copy=True, qr=False
        )

    def test_extract_flags(self, mock_orchestrator):
        run_main(["extract", "--public", "--print"], mock_orchestrator)
        mock_orchestrator.extract.assert_called_once_with(private=False, public=True, print_only=True)


class TestUsageErrors:
    @pytest.mark.parametrize(
        "argv",
        [
            ["show", "--bogus"],
            ["extract", "--qr"],
            ["add", "--private"],
            ["list", "extra"],
            ["show", "--priv"],
        ],
    )
    def test_exit_one(self, argv, capsys, mock_orchestrator):
        assert run_main(argv, mock_orchestrator) == 1
        assert capsys.readouterr().err.startswith("Error: ")
        assert mock_orchestrator.method_calls == []


class TestErrors:
    def test_empty_store_show(self, tmp_path, capsys):
        assert run_main(["show"], real_orchestrator(tmp_path)) == 1
        assert capsys.readouterr().err == "Error: no SSH key in password store.\n"

    def test_private_and_passphrase(self, tmp_path, capsys):
        assert run_main(["show", "--private", "--passphrase"], real_orchestrator(tmp_path)) == 1
        assert "mutually exclusive" in capsys.readouterr().err

    def test_missing_passphrase(self, tmp_path, capsys):
        orchestrator = real_orchestrator(tmp_path, choice="work")
        entry = orchestrator.store.new_entry("work", "work")
        entry.private_blob.write_bytes(orchestrator.encryptor.encrypt(["r"], b"priv"))
        entry.public_blob.write_bytes(orchestrator.encryptor.encrypt(["r"], b"pub"))
        assert run_main(["show", "--passphrase"], orchestrator) == 1
        assert capsys.readouterr().err == "Error: no passphrase found.\n"

    def test_empty_list_is_success(self, tmp_path, capsys):
        assert run_main(["list"], real_orchestrator(tmp_path)) == 0
        assert capsys.readouterr().out == "No SSH key in password store.\n"

    def test_operator_abort_exits_zero(self, tmp_path, capsys):
        orchestrator = real_orchestrator(tmp_path, choice="work", prompter=FakePrompter(confirms=[False]))
        orchestrator.store.new_entry("work", "work")
        assert run_main(["delete"], orchestrator) == 0
        assert orchestrator.store.list_entries() == ["work"]

    def test_collaborator_exit_code_propagates(self, mock_orchestrator, capsys):
        mock_orchestrator.add_to_agent.side_effect = CollaboratorError("'ssh-add' failed.", exit_code=2)
        assert run_main(["agent"], mock_orchestrator) == 2
        assert "ssh-add" in capsys.readouterr().err


class TestBuildOrchestrator:
    def test_wires_backends_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PREFIX", str(tmp_path / "store"))
        monkeypatch.setenv("PASS_SSH_DIR", "keys")
        monkeypatch.setenv("SSH_DIR", str(tmp_path / "ssh"))
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        monkeypatch.delenv("PASSWORD_STORE_GIT", raising=False)
        orchestrator = pass_ssh_cli.build_orchestrator(pass_ssh_cli.Settings.from_env())
        assert orchestrator.store.root == tmp_path / "store" / "keys"
        assert orchestrator.ssh_dir == tmp_path / "ssh"
        assert type(orchestrator.clipboard).__name__ == "XClipboard"
        assert not orchestrator.versioner.is_active()


class ClosedInputPrompter(FakePrompter):
    def confirm(self, text, default):
        raise EOFError()


class TestSystemErrors:
    def test_end_of_input_at_prompt_exits_zero(self, tmp_path, capsys):
        orchestrator = real_orchestrator(tmp_path, choice="work", prompter=ClosedInputPrompter())
        orchestrator.store.new_entry("work", "work")
        assert run_main(["delete"], orchestrator) == 0
        assert orchestrator.store.list_entries() == ["work"]
        assert capsys.readouterr().err == ""

    def test_filesystem_error_exits_one(self, tmp_path, capsys):
        orchestrator = real_orchestrator(tmp_path, choice="work")
        entry = orchestrator.store.new_entry("work", "work")
        entry.private_blob.write_bytes(orchestrator.encryptor.encrypt(["r"], b"priv"))
        entry.public_blob.write_bytes(orchestrator.encryptor.encrypt(["r"], b"pub"))
        orchestrator.ssh_dir.write_text("not a directory")
        assert run_main(["extract"], orchestrator) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "Traceback" not in err
