import json as json_lib
import logging
import sys
from io import BytesIO
from typing import Any, BinaryIO, Dict, Optional, Text
from urllib.parse import urlparse, quote

import requests
from pyhocon import ConfigTree

from .config import get_config
from .config.credentials import Credentials
from .config.defs import DEFAULT_URL, ENV_UUID, ENV_TOKEN, ENV_URL, ENV_VERBOSE, get_credentials_file
from .debugging import get_logger, resolve_logging_level
from .errors import (
    ConfigurationError,
    DecodeError,
    InvalidKeyError,
    InvalidURLError,
    MissingConfigError,
    RequestError,
    ResponseError,
    ValueTypeError,
)
from .http_session import get_http_session_with_retry, get_retry_codes, urllib_log_warning_setup

Json = Any
""" Any JSON-compatible value: dict, list, str, int, float, bool or None """


class EasyDB(object):
    """
    An easydb.io database.

    Create one using :meth:`new` (reads `./easydb.toml`), :meth:`from_uuid_token` or :meth:`from_str`.

    The four calls :meth:`get`, :meth:`put`, :meth:`delete` and :meth:`list` correspond to the four
    easydb.io APIs. They deal with string values and fail if a stored value is not a JSON string.
    :meth:`get_json`, :meth:`put_json` and :meth:`list_json` work with any JSON value.

    Reading just after writing may return either the new or the old value.
    """

    _TOKEN_HEADER = "token"
    _JSON_CONTENT_TYPE = "application/json"

    @property
    def uuid(self):
        # type: () -> Text
        return self.__uuid

    @property
    def token(self):
        # type: () -> Text
        return self.__token

    @property
    def url(self):
        # type: () -> Text
        return self.__url

    @property
    def database_url(self):
        # type: () -> Text
        return self.__database_url

    def __init__(
        self,
        uuid,
        token,
        url=None,
        config=None,
        logger=None,
        verbose=None,
        http_session=None,
    ):
        # type: (Text, Text, Optional[Text], Optional[ConfigTree], Optional[logging.Logger], Optional[bool], Optional[requests.Session]) -> None  # noqa: E501
        self.config = config if config is not None else get_config()

        self._verbose = verbose if verbose is not None else ENV_VERBOSE.get()
        self._logger = logger
        if self._verbose and not self._logger:
            level = resolve_logging_level(ENV_VERBOSE.get(converter=str)) or logging.DEBUG
            self._logger = get_logger(level=level, stream=sys.stderr)

        if not isinstance(uuid, str) or not uuid.strip():
            raise InvalidURLError("Invalid database UUID: {!r}".format(uuid))
        if not isinstance(token, str) or not token.strip():
            raise ConfigurationError("Invalid database token: {!r}".format(token))

        self.__uuid = uuid
        self.__token = token
        self.__url = self._validate_url(url or self.config.get("api.url", None) or DEFAULT_URL)
        self.__database_url = self.__url + quote(uuid, safe="")

        self._timeout = self._get_timeout()
        self._chunk_size = int(self.config.get("api.http.chunk_size", 8192))

        if http_session is not None:
            self.__http_session = http_session
        else:
            http_retries_config = self.config.get("api.http.retries", ConfigTree()).as_plain_ordered_dict()
            http_retries_config["status_forcelist"] = get_retry_codes(self.config)
            http_retries_config["config"] = self.config
            self.__http_session = get_http_session_with_retry(**http_retries_config)
            # one consecutive retry is not worth a warning, a few are
            urllib_log_warning_setup(display_warning_after=3)

    @classmethod
    def new(cls, path=None, **kwargs):
        # type: (Optional[str], Any) -> EasyDB
        """
        Create an EasyDB from a credentials file.

        :param path: Credentials file. Default is EASYDB_CONFIG_FILE, or `easydb.toml` in the current directory
        :param kwargs: Passed to the constructor
        :raise MissingConfigError: The file could not be read and EASYDB_UUID / EASYDB_TOKEN are not both set
        :raise ConfigurationError: The file is not valid
        """
        path = get_credentials_file(path)
        try:
            credentials = Credentials.from_file(path)
        except MissingConfigError:
            if not (ENV_UUID.get() and ENV_TOKEN.get()):
                raise
            credentials = None

        # environment overrides single fields
        return cls(
            ENV_UUID.get() or credentials.uuid,
            ENV_TOKEN.get() or credentials.token,
            url=ENV_URL.get() or (credentials.url if credentials else None),
            **kwargs
        )

    @classmethod
    def from_uuid_token(cls, uuid, token, url=None, **kwargs):
        # type: (Text, Text, Optional[Text], Any) -> EasyDB
        """
        Create an EasyDB using a UUID, Token and optional URL (defaults to https://app.easydb.io/database/)

        :raise InvalidURLError: url or uuid do not form a valid URL
        """
        return cls(uuid, token, url=url, **kwargs)

    @classmethod
    def from_credentials(cls, credentials, **kwargs):
        # type: (Credentials, Any) -> EasyDB
        return cls(credentials.uuid, credentials.token, url=credentials.url, **kwargs)

    @classmethod
    def from_str(cls, text, **kwargs):
        # type: (Text, Any) -> EasyDB
        """
        Create an EasyDB from a string in the `easydb.toml` format:

            UUID = "abcd"
            Token = "efgh"
        """
        return cls.from_credentials(Credentials.from_string(text), **kwargs)

    def get_credentials(self):
        # type: () -> Credentials
        return Credentials(uuid=self.uuid, token=self.token, url=self.url)

    def get(self, key):
        # type: (Text) -> Text
        """
        Get the string value associated with `key`. A key that was never set (or was deleted) returns "".

        :raise ValueTypeError: The stored value is not a string
        """
        value = self.get_json(key)
        if not isinstance(value, str):
            raise ValueTypeError("Value was not a string")
        return value

    def get_json(self, key):
        # type: (Text) -> Json
        """ Get the value associated with `key`, decoded from JSON """
        buffer = BytesIO()
        status_code = self.get_writer(key, buffer)
        return self._decode(buffer.getvalue(), status_code, "get {!r}".format(key))

    def put(self, key, value):
        # type: (Text, Text) -> int
        """ Assign a string `value` to `key` and return the HTTP status code """
        if not isinstance(value, str):
            raise ValueTypeError("Value must be a string, got {}".format(type(value).__name__))
        return self.put_json(key, value)

    def put_json(self, key, value):
        # type: (Text, Json) -> int
        """ Assign a JSON `value` to `key` and return the HTTP status code """
        try:
            body = json_lib.dumps({"value": value}, allow_nan=False)
        except (TypeError, ValueError) as ex:
            raise ValueTypeError("Value is not JSON serializable: {}".format(ex))

        res = self._send_request(
            "post",
            self._key_url(key),
            headers={"Content-Type": self._JSON_CONTENT_TYPE},
            data=body.encode("utf-8"),
        )
        self._check_status(res, "put {!r}".format(key))
        return res.status_code

    def delete(self, key):
        # type: (Text) -> int
        """ Delete the value associated with `key` and return the HTTP status code """
        res = self._send_request("delete", self._key_url(key), headers={"Content-Type": self._JSON_CONTENT_TYPE})
        self._check_status(res, "delete {!r}".format(key))
        return res.status_code

    def list(self):
        # type: () -> Dict[Text, Text]
        """
        Return all the data in this database.

        :raise ValueTypeError: Any of the values is not a string
        """
        result = {}
        for key, value in self.list_json().items():
            if not isinstance(value, str):
                raise ValueTypeError(
                    "A value was not a string: key: {}, value: {}".format(key, json_lib.dumps(value)))
            result[key] = value
        return result

    def list_json(self):
        # type: () -> Dict[Text, Json]
        """ Return all the data in this database, with values decoded from JSON """
        buffer = BytesIO()
        status_code = self.list_writer(buffer)
        data = self._decode(buffer.getvalue(), status_code, "list")
        if not isinstance(data, dict):
            raise ValueTypeError("Database listing was not a JSON object: {}".format(json_lib.dumps(data)[:100]))
        return data

    def clear(self):
        # type: () -> None
        """ Delete every item in the database """
        keys = list(self.list_json())
        for key in keys:
            self.delete(key)
        if self._verbose and self._logger:
            self._logger.debug("Cleared %d keys from %s", len(keys), self.database_url)

    def get_writer(self, key, value):
        # type: (Text, BinaryIO) -> int
        """
        Fetch the data associated with `key` and write the raw response into the binary stream `value`,
        returning the HTTP status code.

        The response is the value originally set, in JSON form. If the key was never set, was deleted,
        or has no data, the response is an empty JSON string: `""`.
        """
        res = self._send_request("get", self._key_url(key), stream=True)
        return self._copy_to(res, value)

    def list_writer(self, list_):
        # type: (BinaryIO) -> int
        """
        Fetch all the data in the database and write the raw JSON response into the binary stream `list_`,
        returning the HTTP status code.
        """
        res = self._send_request("get", self.database_url, stream=True)
        return self._copy_to(res, list_)

    def close(self):
        self.__http_session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _key_url(self, key):
        # type: (Text) -> Text
        # "." and ".." are removed as dot segments when the URL is prepared
        if not isinstance(key, str) or key in ("", ".", ".."):
            raise InvalidKeyError("Invalid key: {!r}".format(key))
        # a key is always exactly one path segment
        return "{}/{}".format(self.database_url, quote(key, safe=""))

    @staticmethod
    def _validate_url(url):
        # type: (Text) -> Text
        if not isinstance(url, str):
            raise InvalidURLError("Invalid URL: {!r}".format(url))
        try:
            parsed = urlparse(url)
        except ValueError as ex:
            raise InvalidURLError("Invalid URL {}: {}".format(url, ex))
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidURLError("Invalid URL: {}".format(url))
        # the database UUID is appended as a child of the URL path, not as a replacement of its last segment
        return url if url.endswith("/") else url + "/"

    def _get_timeout(self):
        timeout = self.config.get("api.http.timeout", None)
        if isinstance(timeout, (list, tuple)):
            return tuple(float(t) for t in timeout)
        return float(timeout) if timeout is not None else None

    def _send_request(self, method, url, headers=None, data=None, stream=False):
        headers = headers.copy() if headers else {}
        headers[self._TOKEN_HEADER] = self.token

        if self._verbose and self._logger:
            self._logger.debug("%s: %s [%d bytes]", method.upper(), url, len(data or b""))
        try:
            res = self.__http_session.request(
                method, url, headers=headers, data=data, timeout=self._timeout, stream=stream)
        except requests.RequestException as ex:
            raise RequestError("{} {} failed: {}".format(method.upper(), url, ex))
        if self._verbose and self._logger:
            self._logger.debug("--> %s took %s", res.status_code, res.elapsed)
        return res

    def _copy_to(self, res, stream):
        try:
            for chunk in res.iter_content(chunk_size=self._chunk_size):
                if chunk:
                    stream.write(chunk)
        except requests.RequestException as ex:
            raise RequestError("Failed reading response from {}: {}".format(self.database_url, ex))
        finally:
            res.close()
        return res.status_code

    def _check_status(self, res, what):
        if res.status_code >= 400:
            (self._logger or get_logger()).warning(
                "easydb {} returned status {}: {}".format(what, res.status_code, res.text))

    @staticmethod
    def _decode(data, status_code, what):
        # type: (bytes, int, Text) -> Json
        if status_code >= 400:
            raise ResponseError(status_code, data.decode("utf-8", errors="replace"))
        try:
            return json_lib.loads(data.decode("utf-8"))
        except ValueError as ex:
            raise DecodeError("Failed decoding easydb {} response: {}".format(what, ex))

    def __str__(self):
        return "{self.__class__.__name__}[{self.database_url}, {token}]".format(
            self=self, token=self.token[:4] + "*" * max(0, len(self.token) - 4)
        )

    __repr__ = __str__
