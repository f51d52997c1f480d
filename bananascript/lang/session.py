"""Session control for bananascript. A Session owns one root Environment and runs source units against it, either a
whole file or, in command-line mode, one complete shell entry at a time. Every unit sees the bindings left behind by
earlier units.

Problems are reported by raising GenericException, which the surrounding ErrorHandler prints:
- parse diagnostics are printed as warnings first, then the unit is rejected without being evaluated;
- an Error value from evaluation is raised as the error message itself.
"""

from bananascript.core.environment import new_root_environment
from bananascript.core.evaluator import DEFAULT_MAX_DEPTH, evaluate
from bananascript.core.lexer import Lexer
from bananascript.core.object import is_error
from bananascript.core.parser import parse
from bananascript.core.token import TokenKind
from bananascript.lang.error import GenericException

OPENERS = {TokenKind.LPAREN, TokenKind.LBRACKET, TokenKind.LBRACE}
CLOSERS = {TokenKind.RPAREN, TokenKind.RBRACKET, TokenKind.RBRACE}


class Session:
    """Governs a bananascript session: the root scope plus the parsed units that are waiting to run."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, max_depth=DEFAULT_MAX_DEPTH):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.max_depth = max_depth  # nested call limit handed to the evaluator

        self.env = new_root_environment()
        self.to_exec = []  # list of (program, line, line_num) waiting for run
        self.results = []  # values of units that have run, most recent last

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path)

            self.add(source)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Returns line and whether it needs a continuation line before it can be parsed: an opening bracket is still
        unclosed or a string literal is still open.
        """
        balance = 0
        for token in Lexer(line).tokens():
            if token.kind in OPENERS:
                balance += 1
            elif token.kind in CLOSERS:
                balance -= 1
            elif token.kind is TokenKind.ILLEGAL and token.literal.startswith('"'):
                return line, True
        return line, balance > 0

    def add(self, source, line_num=None):
        """Parses source and queues it for run. Raises GenericException, after warning once per diagnostic, if source
        does not parse.
        """
        if line_num is not None:
            self.error_handler.register_line(self.path, source, line_num)  # in case error is raised

        program, errors = parse(source)
        if errors:
            for error in errors:
                self.error_handler.warn(error)
            raise GenericException("{} syntax error(s), nothing was evaluated", [len(errors)])

        self.to_exec.append((program, source, line_num))
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates queued units in order against the session's root environment. Raises GenericException with the
        message of the first Error value produced.
        """
        while self.to_exec:
            program, line, line_num = self.to_exec.pop(0)
            if line_num is not None:
                self.error_handler.register_line(self.path, line, line_num)

            result = evaluate(program, self.env, self.max_depth)
            if is_error(result):
                raise GenericException("{}", result.message)

            self.results.append(result)
            self.error_handler.remove_line(self.path)

    def display(self):
        """Returns the trees of queued units, without running them."""
        return "\n".join(program.display() for program, __, __ in self.to_exec)

    def pop(self):
        """Removes and returns the rendering of the most recent result."""
        return self.results.pop().inspect()
