"""
Database credentials, as stored in an `easydb.toml` file:

    UUID = "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"
    Token = "ffffffff-0000-1111-2222-333333333333"
    URL = "https://app.easydb.io/database/"

`URL` is optional and falls back to the `api.url` setting.
"""
import json
from typing import Optional, Text

import attr
from attr.validators import instance_of, optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from ..errors import ConfigurationError, MissingConfigError


@attr.s(frozen=True)
class Credentials(object):
    _UUID_KEY = "UUID"
    _TOKEN_KEY = "Token"
    _URL_KEY = "URL"

    uuid = attr.ib(validator=instance_of(str))
    token = attr.ib(validator=instance_of(str), repr=lambda t: t[:4] + "***")
    url = attr.ib(default=None, validator=optional(instance_of(str)))

    @classmethod
    def from_string(cls, text, file_path=None):
        # type: (Text, Optional[str]) -> Credentials
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as ex:
            raise ConfigurationError(
                "Failed parsing credentials{}: {}".format(" file " + file_path if file_path else "", ex),
                file_path=file_path
            )

        missing = [k for k in (cls._UUID_KEY, cls._TOKEN_KEY) if k not in data]
        if missing:
            raise ConfigurationError(
                "Missing field(s) {} in credentials{}".format(
                    ", ".join(missing), " file " + file_path if file_path else ""),
                file_path=file_path
            )

        for key in (cls._UUID_KEY, cls._TOKEN_KEY, cls._URL_KEY):
            if key in data and not isinstance(data[key], str):
                raise ConfigurationError(
                    "Field {} must be a string, got {!r}".format(key, data[key]), file_path=file_path)

        return cls(uuid=data[cls._UUID_KEY], token=data[cls._TOKEN_KEY], url=data.get(cls._URL_KEY))

    @classmethod
    def from_file(cls, path):
        # type: (str) -> Credentials
        try:
            with open(path, "rt", encoding="utf-8") as f:
                text = f.read()
        except (IOError, OSError) as ex:
            raise MissingConfigError(
                "Could not read credentials file {}: {}".format(path, ex), file_path=str(path))
        return cls.from_string(text, file_path=str(path))

    def to_string(self):
        # type: () -> Text
        # a TOML basic string is a JSON string
        lines = [
            "{} = {}".format(self._UUID_KEY, json.dumps(self.uuid)),
            "{} = {}".format(self._TOKEN_KEY, json.dumps(self.token)),
        ]
        if self.url:
            lines.append("{} = {}".format(self._URL_KEY, json.dumps(self.url)))
        return "\n".join(lines) + "\n"

    def save(self, path):
        # type: (str) -> None
        with open(path, "wt", encoding="utf-8") as f:
            f.write(self.to_string())
