"""Error reporting for the bananascript command line.

The core reports problems as data: parse diagnostics are strings, and runtime failures are Error values. Session turns
them into GenericExceptions, and ErrorHandler prints those in color. Any other exception that makes it all the way to
ErrorHandler is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a bananascript error. exprs are formatted into msg
    and bolded when printed.
    """

    def __init__(self, msg, exprs=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))
        self.plain = msg.format(*exprs)  # uncolored, for str() and tests
        self.internal = internal

        super().__init__(self.plain)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print bananascript errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers the source unit being run. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def location(self):
        """Returns 'file:line: ' for the innermost registered unit, or '' if nothing is registered."""
        if not self.traceback:
            return ""

        file, (line, line_num) = list(self.traceback.items())[-1]
        if line is None:
            return f"{file}: "
        return f"{file}:{line_num}: "

    def warn(self, msg):
        """Prints a non-fatal diagnostic, such as one entry of a parser's error list."""
        warning = colored(self.location(), attrs=["bold"])
        warning += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + msg
        print(warning)

    def throw(self, error):
        """Prints error (a GenericException) with the traceback of registered units, then exits if fatal."""
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():
            if line is not None:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line.strip()}\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum nesting depth exceeded"))
        elif exc_type is GenericException:
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", [exc_type.__name__, exc_val], internal=True))
            do_exit = True

        return not do_exit
