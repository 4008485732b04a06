"""Tests for CLI command parsing."""

import pytest

from cli.models import (
    CatCommand,
    ChecksumCommand,
    ChmodCommand,
    CopyCommand,
    GetCommand,
    ListCommand,
    MakeDirectoryCommand,
    MoveCommand,
    PutCommand,
    RemoveCommand,
    StatCommand,
)
from cli.parser import ParseError, parse_command


@pytest.mark.parametrize('line, expected', [
    ('ls', ListCommand(path='', recursive=False)),
    ('ls docs', ListCommand(path='docs', recursive=False)),
    ('ls -r docs', ListCommand(path='docs', recursive=True)),
    ('ls docs --recursive', ListCommand(path='docs', recursive=True)),
    ('cat docs/a.txt', CatCommand(path='docs/a.txt')),
    ('put local.txt', PutCommand(local_path='local.txt')),
    ('put local.txt docs/remote.txt', PutCommand(local_path='local.txt', remote_path='docs/remote.txt')),
    ('get docs/a.txt', GetCommand(remote_path='docs/a.txt')),
    ('get docs/a.txt out.txt', GetCommand(remote_path='docs/a.txt', local_path='out.txt')),
    ('rm docs', RemoveCommand(path='docs')),
    ('mkdir a/b', MakeDirectoryCommand(path='a/b')),
    ('mv a.txt b.txt', MoveCommand(source='a.txt', destination='b.txt')),
    ('cp a.txt b.txt', CopyCommand(source='a.txt', destination='b.txt')),
    ('stat a.txt', StatCommand(path='a.txt')),
    ('checksum a.txt', ChecksumCommand(path='a.txt')),
    ('checksum a.txt SHA256', ChecksumCommand(path='a.txt', algorithm='sha256')),
    ('chmod a.txt PUBLIC', ChmodCommand(path='a.txt', visibility='public')),
])
def test_parse_command(line, expected):
    assert parse_command(line) == expected


def test_parse_quoted_paths():
    """Test shell-style quoting keeps spaces inside paths."""
    assert parse_command('mv "my file.txt" \'other dir/file.txt\'') == MoveCommand(
        source='my file.txt', destination='other dir/file.txt'
    )


@pytest.mark.parametrize('line, message', [
    ('', 'Empty command'),
    ('   ', 'Empty command'),
    ('frobnicate', 'Unknown command'),
    ('cat', 'cat requires exactly 1 argument'),
    ('cat a b', 'cat requires exactly 1 argument'),
    ('put', 'put requires 1 or 2 arguments'),
    ('mv a.txt', 'mv requires exactly 2 arguments'),
    ('ls a b', 'at most one path'),
    ('ls -x', 'unknown option'),
    ('chmod a.txt world', 'chmod visibility must be one of'),
    ('cat "unterminated', 'Invalid syntax'),
])
def test_parse_errors(line, message):
    with pytest.raises(ParseError) as exc_info:
        parse_command(line)

    assert message in str(exc_info.value)
