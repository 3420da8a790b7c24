from os.path import expanduser, expandvars, exists

from pathlib import Path

from .converters import safe_text_to_bool, text_to_int_list
from .environment import EnvEntry


DEFAULT_URL = "https://app.easydb.io/database/"
""" easydb.io public database endpoint """


DEFAULT_CREDENTIALS_FILE = "easydb.toml"
""" Credentials file looked up in the current working directory """


DEFAULT_SETTINGS_FILE = Path(__file__).parent / "default" / "easydb.conf"
""" Packaged HOCON settings, always loaded first """


LOCAL_SETTINGS_FILES = [
    expanduser("~/easydb.conf"),
]
""" Local settings files (not credentials) merged over the packaged defaults """


ENV_UUID = EnvEntry("EASYDB_UUID")
ENV_TOKEN = EnvEntry("EASYDB_TOKEN")
ENV_URL = EnvEntry("EASYDB_URL")

ENV_CONFIG_FILE = EnvEntry("EASYDB_CONFIG_FILE")
""" Credentials file override. If this is set, `./easydb.toml` is not used. """

ENV_SETTINGS_FILE = EnvEntry("EASYDB_SETTINGS_FILE")
""" Settings file override. If this is set, no other local settings file will be used. """

ENV_VERBOSE = EnvEntry("EASYDB_VERBOSE", converter=safe_text_to_bool, type=bool, default=False)
ENV_HOST_VERIFY_CERT = EnvEntry("EASYDB_VERIFY_CERT")
""" A boolean flag, or a path to a CA bundle """

"""
Make the client retry on additional HTTP status codes.
Use a comma-separated list of integer return codes.
"""
ENV_API_EXTRA_RETRY_CODES = EnvEntry("EASYDB_EXTRA_RETRY_CODES", converter=text_to_int_list)


def get_active_settings_file():
    f = ENV_SETTINGS_FILE.get()
    if f:
        return expanduser(expandvars(f))
    for f in LOCAL_SETTINGS_FILES:
        if exists(expanduser(expandvars(f))):
            return expanduser(expandvars(f))
    return None


def get_credentials_file(path=None):
    f = path or ENV_CONFIG_FILE.get() or DEFAULT_CREDENTIALS_FILE
    return expanduser(expandvars(f))
