"""Uses the dlang interpreter to run .dlang files or to run in command-line mode. Also uses the error handling context
manager. Called from the dlang console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from dlang.config import Config
from dlang.lang.error import ErrorHandler
from dlang.lang.lexical import KEYWORDS
from dlang.lang.session import Session
from dlang.lang.shell import Shell

__version__ = "0.1.0"


def build_parser():
    parser = argparse.ArgumentParser(prog="dlang", description="dlang interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--dump", choices=Session.DUMPS, help="print the tokens or syntax tree of file instead of "
                                                              "running it")
    parser.add_argument("--diagnose", action="store_true", help="show the offending source line under errors")
    parser.add_argument("--log-level", help="logging level (default: $DLANG_LOG_LEVEL or WARNING)")
    parser.add_argument("--recursion-limit", type=int, help="maximum depth of the host stack")
    parser.add_argument("--keywords", action="store_true", help="list reserved words and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    """Runs dlang interpreter. Called from dlang console script."""
    assert sys.version_info >= (3, 7), "dlang cannot be run with python < 3.7"

    args = build_parser().parse_args(argv)
    config = Config.from_args(args)
    config.apply()

    if args.keywords:
        print("\n".join(KEYWORDS))
        return

    with ErrorHandler(diagnosis=config.diagnose) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)

            if args.dump:
                for line in sess.dump(args.dump):
                    print(line)
                return

            try:
                sess.run()
            finally:
                for line in sess.pop():
                    print(line)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
