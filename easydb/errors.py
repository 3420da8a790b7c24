class EasyDBError(Exception):
    """ Base class for all errors raised by the easydb client """
    pass


class ConfigurationError(EasyDBError):

    def __init__(self, msg, file_path=None, *args):
        super(ConfigurationError, self).__init__(msg, *args)
        self.file_path = file_path


class MissingConfigError(ConfigurationError):
    def __init__(self, message=None, file_path=None):
        if message is None:
            message = (
                "It seems easydb is not configured on this machine!\n"
                "Create an `easydb.toml` file with your database UUID and Token "
                "(or set the EASYDB_UUID and EASYDB_TOKEN environment variables).\n"
                "Create a free database at https://easydb.io"
            )
        super(MissingConfigError, self).__init__(message, file_path=file_path)


class InvalidURLError(EasyDBError, ValueError):
    pass


class InvalidKeyError(EasyDBError, ValueError):
    pass


class RequestError(EasyDBError):
    """ The request never produced an HTTP response (connection, timeout, exhausted retries) """
    pass


class ResponseError(EasyDBError):
    def __init__(self, status_code, text=""):
        super(ResponseError, self).__init__(
            "Request failed with status {}: {}".format(status_code, text or "<no content>"))
        self.status_code = status_code
        self.text = text


class DecodeError(EasyDBError, ValueError):
    pass


class ValueTypeError(EasyDBError, TypeError):
    pass
