"""Tests for the interactive yes/no prompt."""

import io

import pytest

from cc_ci_setup.console import confirm


@pytest.fixture
def answer(monkeypatch):
    def set_stdin(text):
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return set_stdin


class TestConfirm:
    @pytest.mark.parametrize("reply", ["y\n", "Y\n", "yes\n", " YES \n"])
    def test_yes(self, answer, reply):
        answer(reply)
        assert confirm("Overwrite?") is True

    @pytest.mark.parametrize("reply", ["n\n", "no\n"])
    def test_no(self, answer, reply):
        answer(reply)
        assert confirm("Overwrite?") is False

    def test_empty_answer_defaults_to_no(self, answer):
        answer("\n")
        assert confirm("Overwrite?") is False

    def test_unrecognized_answer_is_no_without_asking_again(self, answer):
        answer("maybe\ny\n")
        assert confirm("Overwrite?") is False

    def test_closed_stdin_is_no(self, answer):
        answer("")
        assert confirm("Overwrite?") is False

    def test_prompt_is_shown(self, answer, capsys):
        answer("n\n")
        confirm("Overwrite existing claude job?")
        assert "Overwrite existing claude job? [y/N]" in capsys.readouterr().out
