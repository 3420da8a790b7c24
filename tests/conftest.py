# tests/conftest.py
"""
Global pytest fixtures for easydb tests. No test talks to the network: the HTTP session is a mock.
"""

from unittest.mock import MagicMock

import pytest

from easydb import EasyDB
from easydb.config import get_config, load

ENV_VARS = (
    "EASYDB_UUID",
    "EASYDB_TOKEN",
    "EASYDB_URL",
    "EASYDB_CONFIG_FILE",
    "EASYDB_SETTINGS_FILE",
    "EASYDB_VERBOSE",
    "EASYDB_VERIFY_CERT",
    "EASYDB_EXTRA_RETRY_CODES",
)

UUID = "my-uuid"
TOKEN = "my-token"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Ignore the user's environment variables and ~/easydb.conf."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("easydb.config.defs.LOCAL_SETTINGS_FILES", [])
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def config():
    """Packaged default settings."""
    return load()


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def edb(config, session):
    return EasyDB(UUID, TOKEN, config=config, http_session=session)


def make_response(status_code=200, body=b'""'):
    """Build a mock requests.Response returning `body`."""
    res = MagicMock()
    res.status_code = status_code
    res.text = body.decode("utf-8")
    res.iter_content.return_value = [body] if body else []
    return res


@pytest.fixture
def credentials_file(tmp_path):
    path = tmp_path / "easydb.toml"
    path.write_text(
        'UUID = "file-uuid"\n'
        'Token = "file-token"\n',
        encoding="utf-8",
    )
    return path
