"""Pratt (precedence-climbing) parser for bananascript.

Each token kind may have a prefix parse function, which parses an expression that starts with that token, and/or an
infix parse function, which continues an expression given its already-parsed left operand. Both live in dicts keyed by
token kind, built once when the Parser is constructed. Operator binding strength comes from PRECEDENCES:

```
LOWEST < ASSIGN (=) < EQUALS (== !=) < LESSGREATER (< >) < SUM (+ -) < PRODUCT (* /) < POWER (^)
       < PREFIX (-x !x) < CALL (f(x)) < INDEX (a[i])
```

Binary operators are left-associative except for `=` and `^`, which associate to the right.

The parser never raises on bad input. Every problem is appended to self.errors, and parsing carries on so that one pass
surfaces as many diagnostics as possible. A Program parsed with errors must not be evaluated.
"""

import enum

from bananascript.core import ast
from bananascript.core.lexer import Lexer
from bananascript.core.token import TokenKind

INT64_MAX = 2 ** 63 - 1


class Precedence(enum.IntEnum):
    LOWEST = enum.auto()
    ASSIGN = enum.auto()
    EQUALS = enum.auto()
    LESSGREATER = enum.auto()
    SUM = enum.auto()
    PRODUCT = enum.auto()
    POWER = enum.auto()
    PREFIX = enum.auto()
    CALL = enum.auto()
    INDEX = enum.auto()


PRECEDENCES = {
    TokenKind.ASSIGN: Precedence.ASSIGN,
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.CARET: Precedence.POWER,
    TokenKind.LPAREN: Precedence.CALL,
    TokenKind.LBRACKET: Precedence.INDEX,
}

RIGHT_ASSOCIATIVE = {TokenKind.CARET}


class Parser:
    """Builds a Program from the tokens of a Lexer, collecting diagnostics in self.errors."""

    def __init__(self, lexer):
        self.lexer = lexer
        self.errors = []

        self.cur_token = None
        self.peek_token = None

        self.prefix_parse_fns = {
            TokenKind.IDENT: self.parse_identifier,
            TokenKind.INT: self.parse_integer_literal,
            TokenKind.STRING: self.parse_string_literal,
            TokenKind.TRUE: self.parse_boolean,
            TokenKind.FALSE: self.parse_boolean,
            TokenKind.BANG: self.parse_prefix_expression,
            TokenKind.MINUS: self.parse_prefix_expression,
            TokenKind.LPAREN: self.parse_grouped_expression,
            TokenKind.IF: self.parse_if_expression,
            TokenKind.FUNCTION: self.parse_function_literal,
            TokenKind.LBRACKET: self.parse_array_literal,
            TokenKind.ILLEGAL: self.parse_illegal,
        }

        self.infix_parse_fns = {
            kind: self.parse_infix_expression
            for kind in (TokenKind.PLUS, TokenKind.MINUS, TokenKind.ASTERISK, TokenKind.SLASH, TokenKind.CARET,
                         TokenKind.EQ, TokenKind.NOT_EQ, TokenKind.LT, TokenKind.GT)
        }
        self.infix_parse_fns[TokenKind.ASSIGN] = self.parse_assignment_expression
        self.infix_parse_fns[TokenKind.LPAREN] = self.parse_call_expression
        self.infix_parse_fns[TokenKind.LBRACKET] = self.parse_index_expression

        # read two tokens so that both cur_token and peek_token are set
        self.next_token()
        self.next_token()

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind):
        return self.cur_token.kind is kind

    def peek_token_is(self, kind):
        return self.peek_token.kind is kind

    def expect_peek(self, kind):
        """Advances if the next token is of the given kind, otherwise records a diagnostic and stays put."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_error(self, kind):
        self.errors.append(f"expected next token to be {kind}, got {self.peek_token.kind} instead")

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self):
        return PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    def parse_program(self):
        """Parses statements until EOF. Check self.errors before using the result."""
        statements = []

        try:
            while not self.cur_token_is(TokenKind.EOF):
                stmt = self.parse_statement()
                if stmt is not None:
                    statements.append(stmt)
                self.next_token()
        except RecursionError:
            self.errors.append("maximum nesting depth exceeded")

        return ast.Program(tuple(statements))

    def parse_statement(self):
        if self.cur_token_is(TokenKind.LET):
            return self.parse_let_statement()
        elif self.cur_token_is(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = ast.Identifier(self.cur_token.literal)

        if not self.expect_peek(TokenKind.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

        return ast.LetStatement(name, value)

    def parse_return_statement(self):
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
            return ast.ReturnStatement()
        elif self.peek_token_is(TokenKind.RBRACE) or self.peek_token_is(TokenKind.EOF):
            return ast.ReturnStatement()

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

        return ast.ReturnStatement(value)

    def parse_expression_statement(self):
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

        return ast.ExpressionStatement(expression)

    def parse_block_statement(self):
        """Parses statements up to the closing brace. Assumes cur_token is the opening brace."""
        statements = []
        self.next_token()

        while not self.cur_token_is(TokenKind.RBRACE):
            if self.cur_token_is(TokenKind.EOF):
                self.errors.append(f"expected {TokenKind.RBRACE}, got {TokenKind.EOF} instead")
                break

            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        return ast.BlockStatement(tuple(statements))

    def parse_expression(self, precedence):
        prefix = self.prefix_parse_fns.get(self.cur_token.kind)
        if prefix is None:
            self.errors.append(f"no prefix parse function for token {self.cur_token.kind}")
            return None
        left = prefix()

        while not self.peek_token_is(TokenKind.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.kind)
            if infix is None or left is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self):
        return ast.Identifier(self.cur_token.literal)

    def parse_integer_literal(self):
        digits = self.cur_token.literal.lstrip("0") or "0"
        # length first, so int() never sees a literal longer than the host allows
        if len(digits) > len(str(INT64_MAX)) or int(digits) > INT64_MAX:
            self.errors.append(f"could not parse {self.cur_token.literal} as integer")
            return None
        return ast.IntegerLiteral(int(digits))

    def parse_string_literal(self):
        return ast.StringLiteral(self.cur_token.literal)

    def parse_boolean(self):
        return ast.BooleanLiteral(self.cur_token_is(TokenKind.TRUE))

    def parse_illegal(self):
        token = self.cur_token
        if token.literal.startswith('"'):
            self.errors.append(f"unterminated string literal at position {token.position}")
        else:
            self.errors.append(f"illegal character '{token.literal}' at position {token.position}")
        return None

    def parse_prefix_expression(self):
        operator = self.cur_token.literal
        self.next_token()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return ast.PrefixExpression(operator, right)

    def parse_infix_expression(self, left):
        operator = self.cur_token.literal
        precedence = self.cur_precedence()
        if self.cur_token.kind in RIGHT_ASSOCIATIVE:
            precedence -= 1
        self.next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return ast.InfixExpression(left, operator, right)

    def parse_assignment_expression(self, left):
        if not isinstance(left, ast.Identifier):
            self.errors.append(f"invalid assignment target: {left.render()}")
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        return ast.AssignmentExpression(left, value)

    def parse_grouped_expression(self):
        self.next_token()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None or not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def parse_if_expression(self):
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block_statement()

        return ast.IfExpression(condition, consequence, alternative)

    def parse_function_literal(self):
        if not self.expect_peek(TokenKind.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block_statement()

        return ast.FunctionLiteral(parameters, body)

    def parse_function_parameters(self):
        """Parses `(a, b, ...)`. Assumes cur_token is the opening paren."""
        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(TokenKind.IDENT):
            return None
        identifiers = [ast.Identifier(self.cur_token.literal)]

        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            identifiers.append(ast.Identifier(self.cur_token.literal))

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return tuple(identifiers)

    def parse_call_expression(self, function):
        arguments = self.parse_expression_list(TokenKind.RPAREN)
        if arguments is None:
            return None
        return ast.CallExpression(function, arguments)

    def parse_array_literal(self):
        elements = self.parse_expression_list(TokenKind.RBRACKET)
        if elements is None:
            return None
        return ast.ArrayLiteral(elements)

    def parse_expression_list(self, end):
        """Parses comma-separated expressions up to the end token. Shared by call arguments and array literals."""
        if self.peek_token_is(end):
            self.next_token()
            return ()

        self.next_token()
        items = [self.parse_expression(Precedence.LOWEST)]

        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            items.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(end) or any(item is None for item in items):
            return None
        return tuple(items)

    def parse_index_expression(self, left):
        self.next_token()

        index = self.parse_expression(Precedence.LOWEST)
        if index is None or not self.expect_peek(TokenKind.RBRACKET):
            return None
        return ast.IndexExpression(left, index)


def parse(source):
    """Parses source text. Returns (Program, errors); errors is empty if and only if source is valid."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
