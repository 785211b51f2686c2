"""Command request data types for the CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ListCommand:
    """List the current folder."""

    command: Literal["ls"] = "ls"


@dataclass(frozen=True)
class ChangeDirCommand:
    """Change the current folder."""

    target: str
    command: Literal["cd"] = "cd"


@dataclass(frozen=True)
class PwdCommand:
    """Show the current folder path."""

    command: Literal["pwd"] = "pwd"


@dataclass(frozen=True)
class MakeDirCommand:
    """Create a folder in the current folder."""

    name: str
    command: Literal["mkdir"] = "mkdir"


@dataclass(frozen=True)
class PutCommand:
    """Upload local files into the current folder."""

    local_paths: tuple[str, ...]
    command: Literal["put"] = "put"


@dataclass(frozen=True)
class MoveCommand:
    """Move an entry into another folder."""

    name: str
    destination: str
    command: Literal["mv"] = "mv"


@dataclass(frozen=True)
class RenameCommand:
    """Rename an entry of the current folder."""

    name: str
    new_name: str
    command: Literal["rename"] = "rename"


@dataclass(frozen=True)
class CopyCommand:
    """Copy an entry into another folder."""

    name: str
    destination: str
    command: Literal["cp"] = "cp"


@dataclass(frozen=True)
class RemoveCommand:
    """Delete entries of the current folder."""

    names: tuple[str, ...]
    command: Literal["rm"] = "rm"


@dataclass(frozen=True)
class LinkCommand:
    """Print the download link of a file."""

    name: str
    command: Literal["link"] = "link"


CommandRequest = (
    ListCommand
    | ChangeDirCommand
    | PwdCommand
    | MakeDirCommand
    | PutCommand
    | MoveCommand
    | RenameCommand
    | CopyCommand
    | RemoveCommand
    | LinkCommand
)
