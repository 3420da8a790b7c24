""" easydb interactive prompt """
import sys
from argparse import ArgumentParser

from easydb.config.defs import DEFAULT_CREDENTIALS_FILE
from easydb.database import EasyDB
from easydb.debugging import add_options, apply_logging_args
from easydb.errors import ConfigurationError, EasyDBError
from easydb.version import __version__

usage_error = "Invalid args, accepts 0, 2, or 3 arguments: [<UUID> <Token> [URL]]"

banner = """EasyDB interactive prompt
-----------------------------------
    Commands:
    get      Get a value by key
    put      Set a key to a value
    del      Delete an item by key
    list     List all items in DB
    clear    Delete all items
    uuid     Get UUID
    token    Get token
    url      Get URL
    save     Save credentials to a file
    help     Show this message
    exit     Exit the program
"""


def setup_parser(parser):
    parser.add_argument('uuid', nargs='?', default=None,
                        help='Database UUID. If not provided, credentials are read from the credentials file')
    parser.add_argument('token', nargs='?', default=None,
                        help='Database token, required together with UUID')
    parser.add_argument('url', nargs='?', default=None,
                        help='Database endpoint URL (default: https://app.easydb.io/database/)')
    parser.add_argument('--file', '-F', type=str, default=None,
                        help='Credentials file to use when UUID and token are not given '
                             '(default: EASYDB_CONFIG_FILE or ./{})'.format(DEFAULT_CREDENTIALS_FILE))
    parser.add_argument('--version', action='store_true', default=None,
                        help='Display the easydb utility version')
    add_options(parser)


class Prompt(object):
    def __init__(self, edb, input_func=None, output=None):
        self.edb = edb
        self._input = input_func or input
        self._output = output or sys.stdout
        self._commands = {
            "get": self.do_get,
            "put": self.do_put,
            "del": self.do_delete,
            "list": self.do_list,
            "clear": self.do_clear,
            "uuid": lambda: self.write(self.edb.uuid),
            "token": lambda: self.write(self.edb.token),
            "url": lambda: self.write(self.edb.url),
            "save": self.do_save,
            "help": lambda: self.write(banner),
        }

    def write(self, *args):
        print(*args, file=self._output)

    def ask(self, label):
        self._output.flush()
        return self._input(label).strip()

    def run(self):
        self.write(banner)
        while True:
            try:
                command = self.ask("> ")
            except EOFError:
                self.write()
                break
            if command == "exit":
                break

            handler = self._commands.get(command)
            if not handler:
                self.write("Invalid command.")
                continue

            try:
                handler()
            except EOFError:
                self.write()
                break
            except (EasyDBError, IOError, OSError) as ex:
                self.write("Error: {}".format(ex))

    def do_get(self):
        self.write(self.edb.get(self.ask("Key:")))

    def do_put(self):
        key = self.ask("Key:")
        value = self.ask("Value:")
        self.write("Code: {}".format(self.edb.put(key, value)))

    def do_delete(self):
        self.write("Code: {}".format(self.edb.delete(self.ask("Key:"))))

    def do_list(self):
        for key, value in sorted(self.edb.list().items()):
            self.write("{}: {}".format(key, value))

    def do_clear(self):
        self.edb.clear()
        self.write("Success")

    def do_save(self):
        path = self.ask("File [{}]:".format(DEFAULT_CREDENTIALS_FILE)) or DEFAULT_CREDENTIALS_FILE
        self.edb.get_credentials().save(path)
        self.write("Credentials saved to {}".format(path))


def connect(args, input_func=None):
    if args.uuid is not None:
        return EasyDB.from_uuid_token(args.uuid, args.token, url=args.url)

    while True:
        try:
            return EasyDB.new(path=args.file)
        except ConfigurationError as ex:
            print(ex, file=sys.stderr)
            print("Make sure `{}` exists, then press enter.".format(args.file or DEFAULT_CREDENTIALS_FILE),
                  file=sys.stderr)
            (input_func or input)()


def cli(argv=None):
    parser = ArgumentParser(description=__doc__)
    setup_parser(parser)

    # get the args
    args = parser.parse_args(argv)

    if args.version:
        print('Version {}'.format(__version__))
        return

    if args.uuid is not None and args.token is None:
        parser.error(usage_error)

    apply_logging_args(args)

    with connect(args) as edb:
        Prompt(edb).run()


def main(argv=None):
    try:
        cli(argv)
    except KeyboardInterrupt:
        print('\nUser aborted')
    except Exception as ex:
        print('\nError: {}'.format(ex))
        sys.exit(1)


if __name__ == '__main__':
    main()
