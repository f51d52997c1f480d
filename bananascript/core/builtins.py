"""Builtin functions. Each builtin is a plain Python function over runtime values, registered under its language name
with @builtin. Adding one never touches the evaluator, which only looks names up in BUILTINS.

Builtins never mutate their arguments: push and rest return new Arrays.
"""

from bananascript.core.object import NULL, Array, Builtin, Error, Integer, String

BUILTINS = {}


def builtin(name, arity=None):
    """Registers the decorated function as builtin name. If arity is given, calls with any other number of arguments
    return an Error without reaching the function.
    """

    def register(fn):
        def checked(*args):
            if arity is not None and len(args) != arity:
                return Error(f"wrong number of arguments. got={len(args)}, want={arity}")
            return fn(*args)

        checked.__name__ = fn.__name__
        checked.__doc__ = fn.__doc__
        BUILTINS[name] = Builtin(name, checked, arity)
        return fn

    return register


def expect_array(name, arg):
    """Returns an Error unless arg is an Array."""
    if not isinstance(arg, Array):
        return Error(f"argument to `{name}` must be {Array.type_name}, got {arg.type_name}")
    return None


@builtin("len", arity=1)
def builtin_len(arg):
    """Length of a string in UTF-8 bytes, or of an array in elements."""
    if isinstance(arg, String):
        return Integer(len(arg.value.encode("utf-8")))
    elif isinstance(arg, Array):
        return Integer(len(arg.elements))
    return Error(f"argument to `len` not supported, got {arg.type_name}")


@builtin("first", arity=1)
def builtin_first(arg):
    error = expect_array("first", arg)
    if error:
        return error
    return arg.elements[0] if arg.elements else NULL


@builtin("last", arity=1)
def builtin_last(arg):
    error = expect_array("last", arg)
    if error:
        return error
    return arg.elements[-1] if arg.elements else NULL


@builtin("rest", arity=1)
def builtin_rest(arg):
    """Every element but the first, as a new array. null for an empty array."""
    error = expect_array("rest", arg)
    if error:
        return error
    return Array(arg.elements[1:]) if arg.elements else NULL


@builtin("push", arity=2)
def builtin_push(arg, value):
    """New array with value appended; arg itself is left untouched."""
    error = expect_array("push", arg)
    if error:
        return error
    return Array(arg.elements + (value,))


@builtin("print")
def builtin_print(*args):
    print(" ".join(arg.inspect() for arg in args))
    return NULL
