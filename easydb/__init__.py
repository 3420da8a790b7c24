""" easydb - a client for the easydb.io hosted database """

from .version import __version__
from .database import EasyDB, Json
from .config.credentials import Credentials
from . import errors

__all__ = ["__version__", "EasyDB", "Json", "Credentials", "errors"]
