""" Logging convenience functions and wrappers """
import inspect
import logging
import os
import sys

from pathlib import Path

default_level = logging.INFO


class LoggerRoot(object):
    __base_logger = None

    @classmethod
    def _make_stream_handler(cls, level=None, stream=sys.stderr):
        ch = logging.StreamHandler(stream=stream)
        ch.setLevel(level)
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        ch.setFormatter(formatter)
        return ch

    @classmethod
    def get_base_logger(cls, level=None, stream=sys.stderr):
        if LoggerRoot.__base_logger:
            return LoggerRoot.__base_logger

        LoggerRoot.__base_logger = logging.getLogger('easydb')
        level = level if level is not None else cls._configured_level()
        LoggerRoot.__base_logger.setLevel(level)
        LoggerRoot.__base_logger.addHandler(cls._make_stream_handler(level, stream))
        LoggerRoot.__base_logger.propagate = False
        return LoggerRoot.__base_logger

    @staticmethod
    def _configured_level():
        # avoid nested imports
        from ..config import get_config
        from ..errors import ConfigurationError

        try:
            level = resolve_logging_level(get_config().get("log.level", None))
        except ConfigurationError:
            level = None
        return level if level is not None else default_level

    @classmethod
    def set_level(cls, level):
        base = cls.get_base_logger(level=level)
        base.setLevel(level)
        for h in base.handlers:
            h.setLevel(level)


def resolve_logging_level(level):
    """ Resolve a level name ("debug"), number ("10") or truthy flag ("1", "true") into a logging level """
    if isinstance(level, int):
        return level
    level = str(level or "").strip()
    if not level:
        return None
    if level.isdigit():
        value = int(level)
        # "1" is a flag, not logging.NOTSET + 1
        return logging.DEBUG if value == 1 else value
    if level.lower() in ("true", "yes", "on", "y", "t"):
        return logging.DEBUG
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else None


def add_options(parser):
    """ Add logging options to an argparse.ArgumentParser object """
    level = logging.getLevelName(default_level)
    parser.add_argument(
        '--log-level', '-l', default=level, help='Log level (default is %s)' % level)


def apply_logging_args(args):
    """ Apply logging args from an argparse.ArgumentParser parsed args """
    global default_level
    level = resolve_logging_level(args.log_level)
    if level is None:
        raise ValueError('Invalid log level: {}'.format(args.log_level))
    default_level = level
    LoggerRoot.set_level(default_level)


def get_logger(path=None, level=None, stream=None):
    """ Get a python logging object named using the provided filename and preconfigured with a stream handler
    """
    # noinspection PyBroadException
    try:
        path = path or os.path.abspath((inspect.stack()[1])[1])
    except BaseException:
        # if for some reason we could not find the calling file, use our own
        path = os.path.abspath(__file__)
    root_log = LoggerRoot.get_base_logger()
    log = root_log.getChild(Path(path).stem)
    if level is not None:
        log.setLevel(level)
    if stream:
        if not any(getattr(h, 'stream', None) is stream for h in log.handlers):
            log.addHandler(LoggerRoot._make_stream_handler(level if level is not None else default_level, stream))
        log.propagate = False
    else:
        log.propagate = True
    return log
