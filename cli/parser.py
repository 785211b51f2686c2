"""Command parser for CLI input."""

import shlex

from cli.models import (
    ChangeDirCommand,
    CommandRequest,
    CopyCommand,
    LinkCommand,
    ListCommand,
    MakeDirCommand,
    MoveCommand,
    PutCommand,
    PwdCommand,
    RemoveCommand,
    RenameCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], tokens[1:]

    if command_name == "ls":
        _expect_count("ls", args, 0)
        return ListCommand()
    elif command_name == "pwd":
        _expect_count("pwd", args, 0)
        return PwdCommand()
    elif command_name == "cd":
        _expect_count("cd", args, 1, "<folder|..|/>")
        return ChangeDirCommand(target=args[0])
    elif command_name == "mkdir":
        _expect_count("mkdir", args, 1, "<name>")
        return MakeDirCommand(name=args[0])
    elif command_name == "put":
        if not args:
            raise ParseError("put requires at least one local file")
        return PutCommand(local_paths=tuple(args))
    elif command_name == "mv":
        _expect_count("mv", args, 2, "<name> <folder>")
        return MoveCommand(name=args[0], destination=args[1])
    elif command_name == "rename":
        _expect_count("rename", args, 2, "<name> <new-name>")
        return RenameCommand(name=args[0], new_name=args[1])
    elif command_name == "cp":
        _expect_count("cp", args, 2, "<name> <folder>")
        return CopyCommand(name=args[0], destination=args[1])
    elif command_name == "rm":
        if not args:
            raise ParseError("rm requires at least one name")
        return RemoveCommand(names=tuple(args))
    elif command_name == "link":
        _expect_count("link", args, 1, "<name>")
        return LinkCommand(name=args[0])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _expect_count(command: str, args: list[str], count: int, usage: str = "") -> None:
    """Fail unless exactly count arguments were given."""
    if len(args) == count:
        return
    if count == 0:
        raise ParseError(f"{command} takes no arguments")
    plural = "argument" if count == 1 else "arguments"
    raise ParseError(f"{command} requires exactly {count} {plural}: {usage}")
