""" Debugging module """
from .log import get_logger, add_options, apply_logging_args, resolve_logging_level  # noqa: F401
