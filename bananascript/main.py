"""Runs bananascript files, or the interactive shell when no file is given. Called from the bananascript console
script. Also uses the error handling context manager.
"""

import argparse

from bananascript.core.evaluator import DEFAULT_MAX_DEPTH
from bananascript.core.object import NULL
from bananascript.lang.error import ErrorHandler
from bananascript.lang.session import Session
from bananascript.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="bananascript")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help=f"maximum nested function calls before evaluation fails (default {DEFAULT_MAX_DEPTH})")
    parser.add_argument("--ast", action="store_true", help="print the parsed tree instead of evaluating it")
    return parser


def main(argv=None):
    """Runs the bananascript interpreter. Called from the bananascript executable script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, max_depth=args.max_depth)
            if args.ast:
                print(sess.display())
                return

            sess.run()
            if sess.results and sess.results[-1] is not NULL:
                print(sess.pop())

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, max_depth=args.max_depth)).cmdloop()


if __name__ == "__main__":
    main()
