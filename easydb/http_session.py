import logging
import ssl

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry
import urllib3

from .config import get_config
from .config.converters import any_to_bool
from .config.defs import ENV_HOST_VERIFY_CERT, ENV_API_EXTRA_RETRY_CODES
from .errors import ConfigurationError


__disable_certificate_verification_warning = 0

# status codes always retried, on top of configured extras
RETRY_CODES = [
    requests.codes.bad_gateway,
    requests.codes.service_unavailable,
    requests.codes.bandwidth_limit_exceeded,
    requests.codes.too_many_requests,
]


class _RetryFilter(logging.Filter):
    last_instance = None

    def __init__(self, warning_after=5):
        super(_RetryFilter, self).__init__()
        self.display_warning_after = warning_after
        _RetryFilter.last_instance = self

    def filter(self, record):
        if record.args and len(record.args) > 0 and isinstance(record.args[0], Retry):
            left = (record.args[0].total, record.args[0].connect, record.args[0].read,
                    record.args[0].redirect, record.args[0].status)
            left = [is_int for is_int in left if isinstance(is_int, int)]
            if left:
                retry_left = max(left) - min(left)
                return retry_left >= self.display_warning_after

        return True


def urllib_log_warning_setup(display_warning_after=5):
    for conn in ('urllib3.connectionpool', 'requests.packages.urllib3.connectionpool'):
        urllib3_log = logging.getLogger(conn)
        if urllib3_log:
            urllib3_log.removeFilter(_RetryFilter.last_instance)
            urllib3_log.addFilter(_RetryFilter(display_warning_after))


class TLSv12HTTPAdapter(HTTPAdapter):
    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        pool_kwargs.setdefault("ssl_minimum_version", ssl.TLSVersion.TLSv1_2)
        super(TLSv12HTTPAdapter, self).init_poolmanager(connections, maxsize, block=block, **pool_kwargs)


def get_retry_codes(config=None):
    """ Default retry codes, plus api.http.extra_retry_codes (EASYDB_EXTRA_RETRY_CODES takes precedence) """
    config = config or get_config()
    retry_codes = set(RETRY_CODES)

    try:
        extra = ENV_API_EXTRA_RETRY_CODES.get() or config.get("api.http.extra_retry_codes", [])
    except ValueError as ex:
        raise ConfigurationError(str(ex))
    for code in extra or []:
        try:
            retry_codes.add(int(code))
        except (ValueError, TypeError):
            logging.getLogger('easydb').warning("Invalid extra HTTP retry code detected: {}".format(code))

    return sorted(retry_codes)


def get_http_session_with_retry(
        total=0,
        connect=None,
        read=None,
        redirect=None,
        status=None,
        status_forcelist=None,
        backoff_factor=0,
        backoff_max=None,
        pool_connections=None,
        pool_maxsize=None,
        config=None
):
    global __disable_certificate_verification_warning
    if not all(isinstance(x, (int, type(None))) for x in (total, connect, read, redirect, status)):
        raise ValueError('Bad configuration. All retry count values must be null or int')

    if status_forcelist and not all(isinstance(x, int) for x in status_forcelist):
        raise ValueError('Bad configuration. Retry status_forcelist must be null or list of ints')

    config = config or get_config()

    pool_maxsize = (
        pool_maxsize
        if pool_maxsize is not None
        else config.get('api.http.pool_maxsize', 16)
    )

    pool_connections = (
        pool_connections
        if pool_connections is not None
        else config.get('api.http.pool_connections', 16)
    )

    session = requests.Session()

    retry_kwargs = {}
    if backoff_max is not None:
        retry_kwargs["backoff_max"] = backoff_max

    # every easydb call is idempotent (put writes the same value again), so all methods are retried
    retry = Retry(
        total=total, connect=connect, read=read, redirect=redirect, status=status,
        status_forcelist=status_forcelist, backoff_factor=backoff_factor, allowed_methods=None,
        **retry_kwargs)

    adapter = TLSv12HTTPAdapter(max_retries=retry, pool_connections=pool_connections, pool_maxsize=pool_maxsize)
    session.mount('http://', adapter)
    session.mount('https://', adapter)

    # update verify host certificate
    verify = ENV_HOST_VERIFY_CERT.get(default=config.get('api.verify_certificate', True))
    try:
        session.verify = any_to_bool(verify)
    except ValueError:
        # a path to a CA bundle
        session.verify = verify

    if not session.verify and __disable_certificate_verification_warning < 2:
        # show warning
        __disable_certificate_verification_warning += 1
        logging.getLogger('easydb').warning(
            msg='InsecureRequestWarning: Certificate verification is disabled! Adding '
                'certificate verification is strongly advised. See: '
                'https://urllib3.readthedocs.io/en/latest/advanced-usage.html#ssl-warnings')
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    return session
