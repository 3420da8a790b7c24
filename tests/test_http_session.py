"""
Tests for the retrying HTTP session.
"""

import logging

import pytest
from pyhocon import ConfigFactory
from urllib3.util import Retry

from easydb import EasyDB
from easydb.errors import ConfigurationError
from easydb.http_session import (
    RETRY_CODES,
    TLSv12HTTPAdapter,
    _RetryFilter,
    get_http_session_with_retry,
    get_retry_codes,
)


class TestRetryCodes:
    """Tests for get_retry_codes."""

    def test_defaults(self, config):
        assert get_retry_codes(config) == sorted(RETRY_CODES)
        assert 503 in RETRY_CODES and 429 in RETRY_CODES

    def test_extra_from_settings(self, config):
        config.put("api.http.extra_retry_codes", [500, 504])
        assert get_retry_codes(config) == sorted(RETRY_CODES + [500, 504])

    def test_extra_from_environment(self, config, monkeypatch):
        config.put("api.http.extra_retry_codes", [500])
        monkeypatch.setenv("EASYDB_EXTRA_RETRY_CODES", "504, 599")
        assert get_retry_codes(config) == sorted(RETRY_CODES + [504, 599])

    def test_malformed_environment_codes(self, config, monkeypatch):
        monkeypatch.setenv("EASYDB_EXTRA_RETRY_CODES", "504,oops")
        with pytest.raises(ConfigurationError, match="EASYDB_EXTRA_RETRY_CODES"):
            get_retry_codes(config)

    def test_invalid_code_is_skipped(self, config):
        config.put("api.http.extra_retry_codes", ["oops", 500])
        assert get_retry_codes(config) == sorted(RETRY_CODES + [500])


class TestSession:
    """Tests for get_http_session_with_retry."""

    def test_retry_adapter(self, config):
        session = get_http_session_with_retry(
            total=3, connect=2, status_forcelist=[503], backoff_factor=0.5, backoff_max=10.0, config=config)

        adapter = session.get_adapter("https://app.easydb.io/database/")
        assert isinstance(adapter, TLSv12HTTPAdapter)
        assert adapter.max_retries.total == 3
        assert adapter.max_retries.connect == 2
        assert adapter.max_retries.backoff_factor == 0.5
        assert 503 in adapter.max_retries.status_forcelist
        assert session.get_adapter("http://localhost/") is not None
        assert session.verify is True

    def test_bad_retry_values(self, config):
        with pytest.raises(ValueError):
            get_http_session_with_retry(total="3", config=config)
        with pytest.raises(ValueError):
            get_http_session_with_retry(status_forcelist=["503"], config=config)

    def test_disable_verification_from_environment(self, config, monkeypatch):
        monkeypatch.setenv("EASYDB_VERIFY_CERT", "false")
        session = get_http_session_with_retry(config=config)
        assert session.verify is False

    def test_ca_bundle_from_environment(self, config, monkeypatch):
        monkeypatch.setenv("EASYDB_VERIFY_CERT", "/etc/ssl/easydb-ca.pem")
        session = get_http_session_with_retry(config=config)
        assert session.verify == "/etc/ssl/easydb-ca.pem"

    def test_ca_bundle_from_settings(self):
        config = ConfigFactory.from_dict({"api": {"verify_certificate": "/etc/ssl/easydb-ca.pem"}})
        session = get_http_session_with_retry(config=config)
        assert session.verify == "/etc/ssl/easydb-ca.pem"

    def test_client_builds_session_from_settings(self, config):
        config.put("api.http.retries.total", 4)
        edb = EasyDB("my-uuid", "my-token", config=config)
        # noinspection PyProtectedMember
        adapter = edb._EasyDB__http_session.get_adapter(edb.database_url)
        assert adapter.max_retries.total == 4
        assert 502 in adapter.max_retries.status_forcelist
        edb.close()


class TestRetryFilter:
    """Tests for the urllib3 retry warning filter."""

    @staticmethod
    def _record(retry):
        return logging.LogRecord(
            "urllib3.connectionpool", logging.WARNING, __file__, 1, "Retrying (%r) after failure", (retry, ), None)

    def test_first_retries_are_silenced(self):
        retry_filter = _RetryFilter(warning_after=3)
        assert not retry_filter.filter(self._record(Retry(total=9, connect=10)))

    def test_later_retries_are_shown(self):
        retry_filter = _RetryFilter(warning_after=3)
        assert retry_filter.filter(self._record(Retry(total=5, connect=10)))

    def test_other_records_pass(self):
        record = logging.LogRecord("urllib3.connectionpool", logging.WARNING, __file__, 1, "plain", None, None)
        assert _RetryFilter().filter(record)
