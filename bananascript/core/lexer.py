"""Lexical analysis for bananascript. The Lexer is pull-based: each call to next_token scans exactly one token from the
source, reading one character at a time with a single character of lookahead.

The lexer never fails. Unrecognised characters and unterminated strings come back as ILLEGAL tokens, and it is up to
the parser to turn them into diagnostics.
"""

from string import ascii_letters, digits

from bananascript.core.token import Token, TokenKind, lookup_ident


WHITESPACE = " \t\n\r"
LETTERS = ascii_letters + "_"

SINGLE_CHAR_TOKENS = {
    "=": TokenKind.ASSIGN,
    "!": TokenKind.BANG,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.ASTERISK,
    "/": TokenKind.SLASH,
    "^": TokenKind.CARET,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
}

TWO_CHAR_TOKENS = {
    "==": TokenKind.EQ,
    "!=": TokenKind.NOT_EQ,
}


class Lexer:
    """Scans source text into Tokens on demand."""

    def __init__(self, source):
        self.source = source
        self.position = 0       # index of self.ch
        self.read_position = 0  # index of the next character to read
        self.ch = ""            # "" once the end of input is reached

        self.read_char()

    def read_char(self):
        """Advances by one character."""
        if self.read_position >= len(self.source):
            self.ch = ""
        else:
            self.ch = self.source[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def peek_char(self):
        """Returns the character after self.ch without consuming it."""
        if self.read_position >= len(self.source):
            return ""
        return self.source[self.read_position]

    def next_token(self):
        """Scans and returns the next token. Once the source is exhausted, every call returns an EOF token."""
        self.skip_whitespace()
        while self.ch == "/" and self.peek_char() == "/":
            self.skip_comment()
            self.skip_whitespace()
        start = self.position

        if not self.ch:
            return Token(TokenKind.EOF, "", start)

        if self.ch + self.peek_char() in TWO_CHAR_TOKENS:
            literal = self.ch + self.peek_char()
            self.read_char()
            self.read_char()
            return Token(TWO_CHAR_TOKENS[literal], literal, start)

        if self.ch in SINGLE_CHAR_TOKENS:
            literal = self.ch
            self.read_char()
            return Token(SINGLE_CHAR_TOKENS[literal], literal, start)

        if self.ch == '"':
            return self.read_string()

        if self.ch in LETTERS:
            literal = self.read_while(LETTERS)
            return Token(lookup_ident(literal), literal, start)

        if self.ch in digits:
            return Token(TokenKind.INT, self.read_while(digits), start)

        literal = self.ch
        self.read_char()
        return Token(TokenKind.ILLEGAL, literal, start)

    def tokens(self):
        """Yields every remaining token, ending with (and including) EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return

    def skip_whitespace(self):
        while self.ch and self.ch in WHITESPACE:
            self.read_char()

    def skip_comment(self):
        """Discards a // comment up to, but not including, the line break."""
        while self.ch and self.ch not in "\n\r":
            self.read_char()

    def read_while(self, charset):
        """Consumes the maximal run of characters in charset and returns it."""
        start = self.position
        while self.ch and self.ch in charset:
            self.read_char()
        return self.source[start:self.position]

    def read_string(self):
        """Reads a "-delimited string literal, where \\" stands for a literal quote. If the closing quote is missing,
        the rest of the input comes back as an ILLEGAL token that starts with '"'.
        """
        start = self.position
        chars = []

        self.read_char()  # opening quote
        while self.ch != '"':
            if not self.ch:
                return Token(TokenKind.ILLEGAL, self.source[start:], start)

            if self.ch == "\\" and self.peek_char() == '"':
                self.read_char()
            chars.append(self.ch)
            self.read_char()

        self.read_char()  # closing quote
        return Token(TokenKind.STRING, "".join(chars), start)
