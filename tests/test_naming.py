import pytest

from fakes import FakePrompter
from sshstore.errors import OperatorAbort, UsageError
from sshstore.naming import extract_collision, resolve_name, validate_name


def exists_in(taken):
    return lambda name: name in taken


class TestResolveName:
    def test_free_name_returned_without_prompting(self):
        prompter = FakePrompter()
        assert resolve_name("work", exists_in(set()), prompter, "the store") == "work"
        assert prompter.asked == []

    def test_collision_renamed(self):
        prompter = FakePrompter(confirms=[True], answers=["work2"])
        assert resolve_name("work", exists_in({"work"}), prompter, "the store") == "work2"
        assert "already exists in the store" in prompter.asked[0]

    def test_collision_rechecked_until_free(self):
        taken = {"work", "work2", "work3"}
        prompter = FakePrompter(confirms=[True, True, True], answers=["work2", "work3", "work4"])
        name = resolve_name("work", exists_in(taken), prompter, "the store")
        assert name == "work4"
        assert name not in taken

    def test_collision_default_is_rename(self):
        prompter = FakePrompter(confirms=[None], answers=["other"])
        assert resolve_name("work", exists_in({"work"}), prompter, "the store") == "other"

    def test_collision_declined_aborts(self):
        prompter = FakePrompter(confirms=[False])
        with pytest.raises(OperatorAbort) as exc:
            resolve_name("work", exists_in({"work"}), prompter, "the store")
        assert exc.value.exit_code == 0
        assert "Remove the existing key" in exc.value.message

    def test_empty_name_supplied(self):
        prompter = FakePrompter(confirms=[True], answers=["laptop"])
        assert resolve_name("", exists_in(set()), prompter, "the store") == "laptop"
        assert "cannot be empty" in prompter.asked[0]

    def test_empty_name_declined_aborts(self):
        prompter = FakePrompter(confirms=[False])
        with pytest.raises(OperatorAbort):
            resolve_name("   ", exists_in(set()), prompter, "the store")

    def test_empty_name_still_empty_is_error(self):
        prompter = FakePrompter(confirms=[True], answers=[""])
        with pytest.raises(UsageError, match="cannot be empty") as exc:
            resolve_name("", exists_in(set()), prompter, "the store")
        assert exc.value.exit_code == 1

    def test_supplied_name_still_checked_for_collision(self):
        prompter = FakePrompter(confirms=[True, True], answers=["work", "work-new"])
        assert resolve_name("", exists_in({"work"}), prompter, "the store") == "work-new"

    def test_never_returns_colliding_name(self):
        taken = {"a", "b"}
        for answers in (["a", "c"], ["b", "a", "d"]):
            prompter = FakePrompter(confirms=[True] * 4, answers=list(answers))
            assert resolve_name("a", exists_in(taken), prompter, "x") not in taken


class TestValidateName:
    @pytest.mark.parametrize("name", ["../evil", "a/b", ".", ".."])
    def test_rejects_path_like_names(self, name):
        with pytest.raises(UsageError):
            validate_name(name)

    def test_accepts_comment_style_names(self):
        assert validate_name("user@host") == "user@host"


class TestExtractCollision:
    def test_modes(self):
        present = {"home"}
        on_disk = lambda filename: filename in present  # noqa: E731
        assert extract_collision(on_disk, private=True, public=True)("home")
        assert extract_collision(on_disk, private=True, public=False)("home")
        assert not extract_collision(on_disk, private=False, public=True)("home")

    def test_public_only_collision(self):
        present = {"home.pub"}
        on_disk = lambda filename: filename in present  # noqa: E731
        assert extract_collision(on_disk, private=True, public=True)("home")
        assert not extract_collision(on_disk, private=True, public=False)("home")
        assert extract_collision(on_disk, private=False, public=True)("home")
