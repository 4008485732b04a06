"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from common.capability import sign_path
from cli.config import Config
from client.adapter import RemoteFilesystemAdapter
from client.filesystem import Filesystem
from server.auth import get_settings
from server.config import ServerSettings
from server.main import app

SECRET = 'test-secret'


@pytest.fixture
def bearer():
    """Build the Authorization header carrying the token for a canonical path."""
    def build(path: str, secret: str = SECRET) -> dict:
        return {'Authorization': f'Bearer {sign_path(secret, path)}'}
    return build


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .nerest directory
    """
    config_dir = tmp_path / '.nerest'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir, monkeypatch):
    """
    Create temporary config instance, isolated from NEREST_* variables.

    Returns:
        Config instance with temp config file
    """
    for env_var in Config.ENV_OVERRIDES.values():
        monkeypatch.delenv(env_var, raising=False)
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def storage_root(tmp_path):
    """Empty directory exposed by the server under test."""
    root = tmp_path / 'storage'
    root.mkdir()
    return root


def _serve(settings: ServerSettings):
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(storage_root):
    """FastAPI test client for a server over storage_root."""
    yield from _serve(ServerSettings(secret=SECRET, storage_root=str(storage_root)))


@pytest.fixture
def prefixed_client(storage_root):
    """FastAPI test client for a server configured with the 'tenant' prefix."""
    yield from _serve(ServerSettings(secret=SECRET, storage_root=str(storage_root), path_prefix='tenant'))


@pytest.fixture
def adapter(client):
    """Adapter speaking to the in-process server through the test client."""
    return RemoteFilesystemAdapter(secret=SECRET, http_client=client)


@pytest.fixture
def filesystem(adapter):
    """Filesystem facade over the in-process server."""
    return Filesystem(adapter)
