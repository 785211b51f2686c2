"""Custom completer for the Teldrive shell with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class TeldriveCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the 'put' command
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "put":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        already_typed = set(tokens[1:])
        if not is_typing_new_token:
            already_typed.discard(current_word)

        yield from self._complete_local_paths(current_word, already_typed)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_local_paths(
        self, partial: str, exclude: set
    ) -> Iterable[Completion]:
        """
        Complete local file and directory paths.

        Directories complete with a trailing '/' so the user can descend.
        """
        expanded = Path(partial).expanduser() if partial else Path(".")
        if partial.endswith("/") or not partial:
            directory, prefix = expanded, ""
        else:
            directory, prefix = expanded.parent, expanded.name

        try:
            entries = sorted(directory.iterdir())
        except OSError:
            return

        base = partial[: len(partial) - len(prefix)]
        for entry in entries:
            if not entry.name.startswith(prefix) or entry.name.startswith("."):
                continue
            candidate = base + entry.name + ("/" if entry.is_dir() else "")
            if candidate in exclude:
                continue
            yield Completion(candidate, start_position=-len(partial))
