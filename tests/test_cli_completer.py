"""Tests for TeldriveCompleter."""

import pytest

from prompt_toolkit.document import Document

from cli.completer import TeldriveCompleter
from cli.constants import COMMANDS


@pytest.fixture
def completer():
    """Create a TeldriveCompleter instance."""
    return TeldriveCompleter()


@pytest.fixture
def local_dir(tmp_path, monkeypatch):
    """
    Create a working directory with files to upload.

    Returns:
        Path to the temporary directory, also made the cwd
    """
    (tmp_path / "document.txt").write_text("content")
    (tmp_path / "data.csv").write_text("content")
    (tmp_path / ".hidden").write_text("content")
    (tmp_path / "media").mkdir()
    (tmp_path / "media" / "clip.mp4").write_text("content")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        """Empty input should suggest all commands."""
        completions = get_completions_list(completer, "")
        assert completions == list(COMMANDS)

    def test_partial_command_filters(self, completer):
        """Partial command should filter to matching commands."""
        completions = get_completions_list(completer, "re")
        assert completions == ["rename"]

    def test_no_argument_completion_for_other_commands(self, completer, local_dir):
        """Only put completes local paths."""
        assert get_completions_list(completer, "rm ") == []


class TestPutCompletion:
    """Tests for local path completion after put."""

    def test_lists_visible_entries(self, completer, local_dir):
        completions = get_completions_list(completer, "put ")
        assert completions == ["data.csv", "document.txt", "media/"]

    def test_filters_by_prefix(self, completer, local_dir):
        completions = get_completions_list(completer, "put do")
        assert completions == ["document.txt"]

    def test_descends_into_directories(self, completer, local_dir):
        completions = get_completions_list(completer, "put media/")
        assert completions == ["media/clip.mp4"]

    def test_skips_already_typed_files(self, completer, local_dir):
        completions = get_completions_list(completer, "put data.csv ")
        assert "data.csv" not in completions
        assert "document.txt" in completions

    def test_missing_directory_yields_nothing(self, completer, local_dir):
        assert get_completions_list(completer, "put nowhere/") == []
