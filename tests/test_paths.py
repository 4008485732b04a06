"""Tests for path normalization and prefixing."""

import pytest

from common.exceptions import MalformedRequest, PathTraversalDetected
from common.paths import PathPrefixer, normalize_path


@pytest.mark.parametrize('raw, expected', [
    ('path/to/file.txt', 'path/to/file.txt'),
    ('/path/to/file.txt', 'path/to/file.txt'),
    ('path//to///file.txt/', 'path/to/file.txt'),
    ('./path/./to/file.txt', 'path/to/file.txt'),
    ('path\\to\\file.txt', 'path/to/file.txt'),
    ('/', ''),
    ('', ''),
])
def test_normalize_path(raw, expected):
    """Test slashes and dot segments are folded into the canonical form."""
    assert normalize_path(raw) == expected


@pytest.mark.parametrize('raw', ['../etc/passwd', 'path/../../secret', 'path/..', 'bad\0name'])
def test_normalize_path_rejects_traversal(raw):
    """Test parent segments and NUL bytes are rejected."""
    with pytest.raises(PathTraversalDetected) as exc_info:
        normalize_path(raw)

    assert isinstance(exc_info.value, MalformedRequest)
    assert exc_info.value.path == raw


def test_normalize_path_keeps_dotted_names():
    """Test names that merely contain dots are not traversal."""
    assert normalize_path('path/..hidden/file..txt') == 'path/..hidden/file..txt'


def test_prefixer_without_prefix_is_identity():
    prefixer = PathPrefixer()

    assert prefixer.prefix_path('a/b.txt') == 'a/b.txt'
    assert prefixer.strip_prefix('/a/b.txt') == 'a/b.txt'


def test_prefixer_applies_and_strips_prefix():
    """Test prefix round trip, including the bare prefix mapping to the root."""
    prefixer = PathPrefixer('/tenant/')

    assert prefixer.prefix_path('a/b.txt') == 'tenant/a/b.txt'
    assert prefixer.prefix_path('/a/b.txt') == 'tenant/a/b.txt'
    assert prefixer.strip_prefix('tenant/a/b.txt') == 'a/b.txt'
    assert prefixer.strip_prefix('tenant') == ''
    assert prefixer.strip_prefix('tenant/') == ''


def test_prefixer_leaves_foreign_paths_unchanged():
    """Test a path outside the prefix is not partially stripped."""
    prefixer = PathPrefixer('tenant')

    assert prefixer.strip_prefix('tenants/a.txt') == 'tenants/a.txt'
    assert prefixer.strip_prefix('other/a.txt') == 'other/a.txt'


def test_prefixer_contains():
    prefixer = PathPrefixer('tenant')

    assert prefixer.contains('tenant')
    assert prefixer.contains('tenant/a.txt')
    assert not prefixer.contains('')
    assert not prefixer.contains('a.txt')
    assert not prefixer.contains('tenants/a.txt')
    assert PathPrefixer().contains('anything/at/all')


def test_prefix_directory_path():
    prefixer = PathPrefixer('tenant')

    assert prefixer.prefix_directory_path('docs') == 'tenant/docs/'
    assert prefixer.prefix_directory_path('docs/') == 'tenant/docs/'
    assert PathPrefixer().prefix_directory_path('') == ''
