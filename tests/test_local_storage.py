"""Tests for the local filesystem collaborator."""

import hashlib
import os
import stat

import pytest

from common.attributes import DirectoryAttributes, FileAttributes
from common.exceptions import InvalidVisibilityProvided, PathTraversalDetected
from server.local_storage import LocalStorage


@pytest.fixture
def storage(storage_root):
    return LocalStorage(str(storage_root), piece_size=4)


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


def test_root_is_created(tmp_path):
    root = tmp_path / 'fresh' / 'root'

    LocalStorage(str(root))

    assert root.is_dir()


def test_write_creates_parents_and_reads_back(storage, storage_root):
    storage.write('path/to/file.bin', b'\x00\x01binary')

    assert (storage_root / 'path' / 'to' / 'file.bin').read_bytes() == b'\x00\x01binary'
    assert storage.read('path/to/file.bin') == b'\x00\x01binary'
    assert storage.file_exists('path/to/file.bin')
    assert storage.directory_exists('path/to')
    assert not storage.file_exists('path/to')


def test_read_stream_yields_pieces(storage):
    storage.write('a.txt', b'0123456789')

    assert list(storage.read_stream('a.txt')) == [b'0123', b'4567', b'89']


def test_append(storage):
    storage.write('a.txt', b'abc')
    storage.append('a.txt', b'def')

    assert storage.read('a.txt') == b'abcdef'


def test_append_to_missing_file(storage):
    with pytest.raises(FileNotFoundError):
        storage.append('missing/a.txt', b'abc')


def test_full_path_rejects_traversal(storage):
    with pytest.raises(PathTraversalDetected):
        storage.full_path('../outside.txt')


def test_full_path_rejects_symlink_escape(storage, storage_root, tmp_path):
    """Test a symlink leading out of the root is treated as traversal."""
    outside = tmp_path / 'outside'
    outside.mkdir()
    (storage_root / 'link').symlink_to(outside, target_is_directory=True)

    with pytest.raises(PathTraversalDetected):
        storage.full_path('link/secret.txt')


def test_visibility_on_write(storage, storage_root):
    storage.write('public.txt', b'x', visibility='public')
    storage.write('private.txt', b'x', visibility='private')

    assert _mode(storage_root / 'public.txt') == 0o644
    assert _mode(storage_root / 'private.txt') == 0o600
    assert storage.visibility('public.txt') == 'public'
    assert storage.visibility('private.txt') == 'private'


def test_directory_visibility_applies_to_created_parent(storage, storage_root):
    storage.write('docs/a.txt', b'x', directory_visibility='private')

    assert _mode(storage_root / 'docs') == 0o700


def test_set_visibility(storage, storage_root):
    storage.write('a.txt', b'x', visibility='private')
    storage.set_visibility('a.txt', 'public')

    assert storage.visibility('a.txt') == 'public'
    assert _mode(storage_root / 'a.txt') == 0o644


def test_invalid_visibility(storage):
    with pytest.raises(InvalidVisibilityProvided):
        storage.write('a.txt', b'x', visibility='world')


def test_create_directory(storage, storage_root):
    storage.create_directory('a/b/c', visibility='public')

    assert (storage_root / 'a' / 'b' / 'c').is_dir()
    assert _mode(storage_root / 'a' / 'b' / 'c') == 0o755


def test_copy_and_move(storage):
    storage.write('src.txt', b'payload')

    storage.copy('src.txt', 'copies/dst.txt')
    assert storage.read('copies/dst.txt') == b'payload'
    assert storage.file_exists('src.txt')

    storage.move('src.txt', 'moved/dst.txt')
    assert storage.read('moved/dst.txt') == b'payload'
    assert not storage.file_exists('src.txt')


def test_delete_and_delete_directory(storage):
    storage.write('dir/sub/a.txt', b'x')
    storage.write('b.txt', b'x')

    storage.delete('b.txt')
    storage.delete_directory('dir')

    assert not storage.file_exists('b.txt')
    assert not storage.directory_exists('dir')


def test_delete_root_empties_it(storage, storage_root):
    storage.write('dir/a.txt', b'x')
    storage.write('b.txt', b'x')

    storage.delete_directory('')

    assert storage_root.is_dir()
    assert list(storage_root.iterdir()) == []


def test_checksum(storage):
    storage.write('a.txt', b'checksum me')

    assert storage.checksum('a.txt') == hashlib.md5(b'checksum me').hexdigest()
    assert storage.checksum('a.txt', 'sha256') == hashlib.sha256(b'checksum me').hexdigest()


def test_checksum_unknown_algorithm(storage):
    storage.write('a.txt', b'x')

    with pytest.raises(ValueError):
        storage.checksum('a.txt', 'not-a-hash')


@pytest.mark.parametrize('name, contents, expected', [
    ('readme.txt', b'hello', 'text/plain'),
    ('data.json', b'{}', 'application/json'),
    ('noext', b'plain words', 'text/plain'),
    ('blob', b'\x00\x01\x02', 'application/octet-stream'),
    ('latin', b'\xff\xfe\xfa', 'application/octet-stream'),
])
def test_mime_type(storage, name, contents, expected):
    storage.write(name, contents)

    assert storage.mime_type(name) == expected


def test_attributes(storage):
    storage.write('path/readme.txt', b'hello', visibility='public')

    file_attributes = storage.attributes('path/readme.txt')
    directory_attributes = storage.attributes('path')

    assert file_attributes == FileAttributes(
        path='path/readme.txt',
        file_size=5,
        visibility='public',
        last_modified=file_attributes.last_modified,
        mime_type='text/plain',
    )
    assert isinstance(file_attributes.last_modified, int)
    assert isinstance(directory_attributes, DirectoryAttributes)
    assert directory_attributes.path == 'path'


def test_attributes_of_missing_path(storage):
    with pytest.raises(FileNotFoundError):
        storage.attributes('missing.txt')


def test_list_contents_shallow_and_deep(storage):
    storage.write('path/readme.txt', b'1')
    storage.write('path/to/one/readme.txt', b'2')
    storage.write('path/to/two/readme.txt', b'3')

    shallow = [item.path for item in storage.list_contents('path')]
    deep = [item.path for item in storage.list_contents('', deep=True)]

    assert shallow == ['path/readme.txt', 'path/to']
    assert deep == [
        'path',
        'path/readme.txt',
        'path/to',
        'path/to/one',
        'path/to/one/readme.txt',
        'path/to/two',
        'path/to/two/readme.txt',
    ]


def test_list_contents_skips_links_leaving_the_root(storage, storage_root, tmp_path):
    """Test a symlink pointing out of the root is left out of listings."""
    outside = tmp_path / 'outside'
    outside.mkdir()
    (outside / 'secret.txt').write_bytes(b'secret')
    storage.write('path/readme.txt', b'1')
    (storage_root / 'path' / 'escape').symlink_to(outside, target_is_directory=True)
    (storage_root / 'path' / 'escape.txt').symlink_to(outside / 'secret.txt')

    shallow = [item.path for item in storage.list_contents('path')]
    deep = [item.path for item in storage.list_contents('', deep=True)]

    assert shallow == ['path/readme.txt']
    assert deep == ['path', 'path/readme.txt']
