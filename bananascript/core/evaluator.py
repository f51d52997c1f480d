"""Tree-walking evaluator for bananascript.

Evaluator.eval reduces an AST node to a runtime value against an Environment, dispatching on the node's type through
a table built once per Evaluator. Non-local control flow is carried by values rather than Python exceptions:

- a `return` produces a ReturnValue, which is passed upward untouched until a function call (or the program)
  unwraps it;
- a runtime failure produces an Error.

Every aggregation point (block, let, argument list, array literal, operator operands, if condition) hands either
signal back unchanged as soon as it sees one, skipping any remaining siblings. A `return` nested in an `if` used as an
argument or array element therefore still leaves the enclosing function.

The only exception handled here is the host's RecursionError, which evaluate() turns into an Error value alongside the
evaluator's own call-depth limit. evaluate() raises the interpreter's recursion limit to fit max_depth while it runs.
"""

import sys

from bananascript.core import ast
from bananascript.core.builtins import BUILTINS
from bananascript.core.environment import Environment
from bananascript.core.object import (
    NULL, Array, Boolean, Builtin, Error, Function, Integer, ReturnValue, String, is_error, is_signal,
    is_truthy, native_bool, wrap_int64
)

DEFAULT_MAX_DEPTH = 500
RECURSION_MESSAGE = "maximum recursion depth exceeded"

FRAMES_PER_CALL = 32      # host frames a nested user call may take, nested ifs and call arguments included
MAX_EXTRA_FRAMES = 20000  # past this the C stack of older interpreters may overflow


class Evaluator:
    """Evaluates AST nodes. max_depth bounds the number of nested user-function calls."""

    def __init__(self, max_depth=DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self.depth = 0

        self.dispatch = {
            ast.Program: self.eval_program,
            ast.BlockStatement: self.eval_block_statement,
            ast.ExpressionStatement: lambda node, env: self.eval(node.expression, env),
            ast.LetStatement: self.eval_let_statement,
            ast.ReturnStatement: self.eval_return_statement,
            ast.IntegerLiteral: lambda node, env: Integer(node.value),
            ast.StringLiteral: lambda node, env: String(node.value),
            ast.BooleanLiteral: lambda node, env: native_bool(node.value),
            ast.Identifier: self.eval_identifier,
            ast.PrefixExpression: self.eval_prefix_expression,
            ast.InfixExpression: self.eval_infix_expression,
            ast.AssignmentExpression: self.eval_assignment_expression,
            ast.IfExpression: self.eval_if_expression,
            ast.FunctionLiteral: lambda node, env: Function(node.parameters, node.body, env),
            ast.CallExpression: self.eval_call_expression,
            ast.ArrayLiteral: self.eval_array_literal,
            ast.IndexExpression: self.eval_index_expression,
        }

    def eval(self, node, env):
        handler = self.dispatch.get(type(node))
        if handler is None:
            return Error(f"cannot evaluate {type(node).__name__}")
        return handler(node, env)

    def eval_program(self, program, env):
        result = NULL
        for stmt in program.statements:
            result = self.eval(stmt, env)

            if isinstance(result, ReturnValue):
                return result.value
            elif is_error(result):
                return result
        return result

    def eval_block_statement(self, block, env):
        """Like eval_program, but a ReturnValue stays wrapped so the enclosing call can see it."""
        result = NULL
        for stmt in block.statements:
            result = self.eval(stmt, env)

            if is_signal(result):
                return result
        return result

    def eval_let_statement(self, node, env):
        value = self.eval(node.value, env)
        if is_signal(value):
            return value

        env.define(node.name.name, value)
        return NULL

    def eval_return_statement(self, node, env):
        if node.value is None:
            return ReturnValue(NULL)

        value = self.eval(node.value, env)
        if is_signal(value):
            return value
        return ReturnValue(value)

    def eval_assignment_expression(self, node, env):
        value = self.eval(node.value, env)
        if is_signal(value):
            return value

        if not env.assign(node.name.name, value):
            return Error(f"identifier not found: {node.name.name}")
        return value

    def eval_identifier(self, node, env):
        value = env.get(node.name)
        if value is not None:
            return value

        if node.name in BUILTINS:
            return BUILTINS[node.name]

        return Error(f"identifier not found: {node.name}")

    def eval_prefix_expression(self, node, env):
        right = self.eval(node.right, env)
        if is_signal(right):
            return right

        if node.operator == "!":
            return native_bool(not is_truthy(right))
        elif node.operator == "-" and isinstance(right, Integer):
            return Integer(wrap_int64(-right.value))
        return Error(f"unknown operator: {node.operator}{right.type_name}")

    def eval_infix_expression(self, node, env):
        left = self.eval(node.left, env)
        if is_signal(left):
            return left

        right = self.eval(node.right, env)
        if is_signal(right):
            return right

        return infix(node.operator, left, right)

    def eval_if_expression(self, node, env):
        condition = self.eval(node.condition, env)
        if is_signal(condition):
            return condition

        if is_truthy(condition):
            return self.eval(node.consequence, env)
        elif node.alternative is not None:
            return self.eval(node.alternative, env)
        return NULL

    def eval_call_expression(self, node, env):
        function = self.eval(node.function, env)
        if is_signal(function):
            return function

        args = self.eval_expressions(node.arguments, env)
        if is_signal(args):
            return args

        return self.apply_function(function, args)

    def eval_array_literal(self, node, env):
        elements = self.eval_expressions(node.elements, env)
        if is_signal(elements):
            return elements
        return Array(tuple(elements))

    def eval_expressions(self, exprs, env):
        """Evaluates exprs left to right. Returns the list of values, or the first Error or ReturnValue encountered."""
        values = []
        for expr in exprs:
            value = self.eval(expr, env)
            if is_signal(value):
                return value
            values.append(value)
        return values

    def eval_index_expression(self, node, env):
        left = self.eval(node.left, env)
        if is_signal(left):
            return left

        index = self.eval(node.index, env)
        if is_signal(index):
            return index

        if isinstance(left, Array) and isinstance(index, Integer):
            if 0 <= index.value < len(left.elements):
                return left.elements[index.value]
            return NULL
        return Error(f"index operator not supported: {left.type_name}[{index.type_name}]")

    def apply_function(self, function, args):
        if isinstance(function, Builtin):
            return function.fn(*args)

        if not isinstance(function, Function):
            return Error(f"not a function: {function.type_name}")

        if len(args) != len(function.parameters):
            return Error(f"wrong number of arguments: want={len(function.parameters)}, got={len(args)}")

        if self.depth >= self.max_depth:
            return Error(RECURSION_MESSAGE)

        env = Environment.new_enclosed(function.env)
        for param, arg in zip(function.parameters, args):
            env.define(param.name, arg)

        self.depth += 1
        try:
            result = self.eval(function.body, env)
        finally:
            self.depth -= 1

        if isinstance(result, ReturnValue):
            return result.value
        return result


def infix(operator, left, right):
    """Applies a binary operator to two evaluated operands."""
    if isinstance(left, Integer) and isinstance(right, Integer):
        return integer_infix(operator, left.value, right.value)

    if type(left) is not type(right):
        return Error(f"type mismatch: {left.type_name} {operator} {right.type_name}")

    if isinstance(left, String):
        if operator == "+":
            return String(left.value + right.value)
        elif operator == "==":
            return native_bool(left.value == right.value)
        elif operator == "!=":
            return native_bool(left.value != right.value)
    elif isinstance(left, Boolean):
        if operator == "==":
            return native_bool(left.value == right.value)
        elif operator == "!=":
            return native_bool(left.value != right.value)
    elif operator == "==":
        return native_bool(left is right)
    elif operator == "!=":
        return native_bool(left is not right)

    return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")


def integer_infix(operator, left, right):
    if operator == "+":
        return Integer(wrap_int64(left + right))
    elif operator == "-":
        return Integer(wrap_int64(left - right))
    elif operator == "*":
        return Integer(wrap_int64(left * right))
    elif operator == "/":
        if right == 0:
            return Error("division by zero")
        quotient = abs(left) // abs(right)  # truncate toward zero
        return Integer(wrap_int64(quotient if (left < 0) == (right < 0) else -quotient))
    elif operator == "^":
        if right < 0:
            return Error(f"negative exponent: {right}")
        return Integer(wrap_int64(pow(left, right, 1 << 64)))
    elif operator == "<":
        return native_bool(left < right)
    elif operator == ">":
        return native_bool(left > right)
    elif operator == "==":
        return native_bool(left == right)
    elif operator == "!=":
        return native_bool(left != right)
    return Error(f"unknown operator: {Integer.type_name} {operator} {Integer.type_name}")


def evaluate(program, env, max_depth=DEFAULT_MAX_DEPTH):
    """Evaluates a parsed Program against env. Always returns a value: failures come back as an Error.

    While it runs, the host recursion limit is raised by enough frames for max_depth nested calls, up to
    MAX_EXTRA_FRAMES. A deeper max_depth is then cut short by the host limit, reported the same way.
    """
    limit = sys.getrecursionlimit()
    sys.setrecursionlimit(limit + min(max_depth * FRAMES_PER_CALL, MAX_EXTRA_FRAMES))
    try:
        return Evaluator(max_depth).eval(program, env)
    except RecursionError:
        return Error(RECURSION_MESSAGE)
    finally:
        sys.setrecursionlimit(limit)
