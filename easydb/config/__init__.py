""" Settings module. Loads the packaged HOCON defaults and merges local overrides on top. """
from functools import lru_cache
from typing import Optional

from pyhocon import ConfigFactory, ConfigTree
from pyhocon.exceptions import ConfigException
from pyparsing import ParseBaseException

from ..errors import ConfigurationError
from .defs import DEFAULT_SETTINGS_FILE, get_active_settings_file


def _parse_file(path):
    # type: (str) -> ConfigTree
    try:
        return ConfigFactory.parse_file(str(path))
    except (ConfigException, ParseBaseException) as ex:
        raise ConfigurationError("Failed parsing settings file {}: {}".format(path, ex), file_path=str(path))
    except (IOError, OSError) as ex:
        raise ConfigurationError("Failed reading settings file {}: {}".format(path, ex), file_path=str(path))


def load(settings_file=None):
    # type: (Optional[str]) -> ConfigTree
    """
    Load the easydb settings
    :param settings_file: Optional settings file to merge over the defaults. If not provided,
        EASYDB_SETTINGS_FILE or ~/easydb.conf is used when present.
    :return: ConfigTree object
    """
    config = _parse_file(DEFAULT_SETTINGS_FILE)
    settings_file = settings_file or get_active_settings_file()
    if settings_file:
        config = ConfigTree.merge_configs(config, _parse_file(settings_file))
    return config


@lru_cache()
def get_config():
    # type: () -> ConfigTree
    return load()


__all__ = ["load", "get_config"]
