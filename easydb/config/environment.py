import os
from typing import Any, Callable, Optional, Text

from .converters import safe_text_to_bool


class NotSet(object):
    pass


class EnvEntry(object):
    """
    An environment variable (with optional fallback names) holding a configuration value.
    The first variable found in the environment wins. Values are converted using `converter`
    if provided, otherwise according to `type`.
    """

    def __init__(self, key, *more_keys, **kwargs):
        # type: (Text, Text, Any) -> None
        self.keys = (key, ) + more_keys
        self.type = kwargs.pop("type", str)
        self.converter = kwargs.pop("converter", None)
        self.default = kwargs.pop("default", None)
        if kwargs:
            raise ValueError("Unsupported keyword arguments: %s" % ", ".join(kwargs.keys()))

    @property
    def key(self):
        return self.keys[0]

    def _get_converter(self, converter=None):
        # type: (Optional[Callable[[Any], Any]]) -> Callable[[Any], Any]
        if converter:
            return converter
        if self.converter:
            return self.converter
        if self.type is bool:
            return safe_text_to_bool
        return self.type

    def get_pair(self, default=NotSet, converter=None):
        # type: (Any, Optional[Callable[[Any], Any]]) -> (Optional[Text], Any)
        for key in self.keys:
            value = os.environ.get(key)
            if value is None:
                continue
            value = value.strip()
            try:
                return key, self._get_converter(converter)(value)
            except (ValueError, TypeError) as ex:
                raise ValueError("Failed converting environment variable {}={!r}: {}".format(key, value, ex))
        return None, (self.default if default is NotSet else default)

    def get(self, default=NotSet, converter=None):
        # type: (Any, Optional[Callable[[Any], Any]]) -> Any
        return self.get_pair(default=default, converter=converter)[1]

    def exists(self):
        # type: () -> bool
        return any(key in os.environ for key in self.keys)

    def set(self, value):
        # type: (Any) -> None
        os.environ[self.key] = str(value)

    def pop(self):
        # type: () -> None
        for key in self.keys:
            os.environ.pop(key, None)

    def __str__(self):
        return "env:{}".format(",".join(self.keys))
