"""Token model for bananascript: the token kinds, the Token tuple produced by the lexer, and keyword lookup.

Token kinds and the keyword table together (with the precedence table in parser.py) form the grammar surface of the
language. Kind values double as the human-readable names used in parser diagnostics.
"""

import enum
from typing import NamedTuple


class TokenKind(enum.Enum):
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # identifiers + literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    CARET = "^"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # delimiters
    COMMA = ","
    SEMICOLON = ";"

    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self):
        return self.value


KEYWORDS = {
    "fn": TokenKind.FUNCTION,
    "let": TokenKind.LET,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
}


class Token(NamedTuple):
    kind: TokenKind
    literal: str
    position: int = 0


def lookup_ident(ident):
    """Returns the keyword kind for ident, or IDENT if ident is not a keyword."""
    return KEYWORDS.get(ident, TokenKind.IDENT)
