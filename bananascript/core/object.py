"""Runtime values for bananascript.

The set of values is closed: Integer, String, Boolean, Null, Array, Function, Builtin, plus the two signal values
ReturnValue and Error. Signals never escape evaluation as ordinary data. Every evaluation step that aggregates results
checks for them and hands them straight back (see is_signal).

Every value has a type_name, used in runtime error messages, and an inspect() rendering, used by the shell and by
print.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from bananascript.core import ast

INT64_BITS = 64


def wrap_int64(value):
    """Wraps a Python int into signed 64-bit range, the way integer arithmetic overflows."""
    value &= (1 << INT64_BITS) - 1
    if value >= 1 << (INT64_BITS - 1):
        value -= 1 << INT64_BITS
    return value


class Object(ABC):
    """Superclass for every runtime value."""
    type_name = "OBJECT"

    @abstractmethod
    def inspect(self):
        """Textual rendering of this value."""

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class Integer(Object):
    type_name = "INTEGER"
    value: int

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True)
class String(Object):
    type_name = "STRING"
    value: str

    def inspect(self):
        return self.value


@dataclass(frozen=True)
class Boolean(Object):
    type_name = "BOOLEAN"
    value: bool

    def inspect(self):
        return "true" if self.value else "false"


class Null(Object):
    type_name = "NULL"

    def inspect(self):
        return "null"

    def __repr__(self):
        return "NULL"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


@dataclass(eq=False)
class Array(Object):
    """Arrays compare by identity. Builtins that grow or shrink an array always build a new one."""
    type_name = "ARRAY"
    elements: Tuple[Object, ...] = ()

    def inspect(self):
        return "[" + ", ".join(element.inspect() for element in self.elements) + "]"


@dataclass(eq=False, repr=False)
class Function(Object):
    """User-defined function. env is the environment the literal was evaluated in, not the caller's."""
    type_name = "FUNCTION"
    parameters: Tuple[ast.Identifier, ...]
    body: ast.BlockStatement
    env: Any

    def inspect(self):
        params = ", ".join(param.render() for param in self.parameters)
        return f"fn({params}) {{\n{ast.render_statements(self.body.statements)}\n}}"

    def __repr__(self):
        return f"Function({self.inspect()!r})"


@dataclass(eq=False)
class Builtin(Object):
    """Native function. fn takes the evaluated arguments positionally and returns one value."""
    type_name = "BUILTIN"
    name: str
    fn: Callable[..., Object] = field(repr=False)
    arity: Optional[int] = None  # None for variadic

    def inspect(self):
        return "builtin function"


@dataclass(frozen=True)
class ReturnValue(Object):
    type_name = "RETURN_VALUE"
    value: Object

    def inspect(self):
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    type_name = "ERROR"
    message: str

    def inspect(self):
        return f"ERROR: {self.message}"


def native_bool(value):
    return TRUE if value else FALSE


def is_truthy(obj):
    """null and false are falsy; everything else, 0 and "" included, is truthy."""
    return obj is not NULL and obj is not FALSE


def is_error(obj):
    return isinstance(obj, Error)


def is_signal(obj):
    return isinstance(obj, (ReturnValue, Error))
