"""Tests for the CLI command parser."""

import pytest

from cli.models import (
    ChangeDirCommand,
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
from cli.parser import ParseError, parse_command


@pytest.mark.parametrize('line,expected', [
    ('ls', ListCommand()),
    ('pwd', PwdCommand()),
    ('cd ..', ChangeDirCommand(target='..')),
    ('mkdir photos', MakeDirCommand(name='photos')),
    ('put a.txt b.txt', PutCommand(local_paths=('a.txt', 'b.txt'))),
    ('mv a.txt docs', MoveCommand(name='a.txt', destination='docs')),
    ('rename a.txt b.txt', RenameCommand(name='a.txt', new_name='b.txt')),
    ('cp a.txt docs', CopyCommand(name='a.txt', destination='docs')),
    ('rm a.txt b.txt', RemoveCommand(names=('a.txt', 'b.txt'))),
    ('link a.txt', LinkCommand(name='a.txt')),
])
def test_parse_valid_commands(line, expected):
    assert parse_command(line) == expected


def test_parse_quoted_names():
    """Test that quoted names with spaces stay one argument."""
    cmd = parse_command('rename "my file.txt" \'new name.txt\'')

    assert cmd == RenameCommand(name='my file.txt', new_name='new name.txt')


@pytest.mark.parametrize('line,message', [
    ('', 'Empty command'),
    ('   ', 'Empty command'),
    ('ls extra', 'ls takes no arguments'),
    ('cd', 'cd requires exactly 1 argument'),
    ('mv a.txt', 'mv requires exactly 2 arguments'),
    ('put', 'put requires at least one local file'),
    ('rm', 'rm requires at least one name'),
    ('frobnicate', 'Unknown command: frobnicate'),
    ('mkdir "unterminated', 'Invalid syntax'),
])
def test_parse_errors(line, message):
    with pytest.raises(ParseError) as exc_info:
        parse_command(line)

    assert message in str(exc_info.value)
