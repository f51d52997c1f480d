"""Abstract syntax tree for bananascript.

Nodes are frozen dataclasses, so a tree is immutable once the parser has built it and two trees compare equal exactly
when they are structurally equal. Every node renders back to source text (render/__str__). The rendering fully
parenthesizes operator expressions and always spells out blocks, so rendering a parsed tree and parsing the result
again produces an equal tree:

```
let add = fn(a, b) { a + b * c }   -->   let add = fn(a, b) { (a + (b * c)) }
```

display() is for debugging. It shows the tree one node per line, in the same format as the shell's --ast output.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Optional, Tuple


class Node(ABC):
    """Superclass for every AST node."""

    @abstractmethod
    def render(self):
        """This method should return source text that parses back to an equal node."""

    @property
    def nodes(self):
        """Child nodes, in source order."""
        children = []
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Node):
                children.append(value)
            elif isinstance(value, tuple):
                children.extend(child for child in value if isinstance(child, Node))
        return children

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(expr='<expr>', nodes=[
            <Node>(expr='<expr>', nodes=[
                ...
                <Node>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}(expr='{self.render()}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __str__(self):
        return self.render()


class Statement(Node, ABC):
    """Superclass for statements."""


class Expression(Node, ABC):
    """Superclass for expressions."""


def render_statements(statements):
    return "; ".join(stmt.render() for stmt in statements)


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...] = ()

    def render(self):
        return render_statements(self.statements)


@dataclass(frozen=True)
class Identifier(Expression):
    name: str

    def render(self):
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def render(self):
        return str(self.value)


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    def render(self):
        escaped = self.value.replace('"', '\\"')
        return f'"{escaped}"'


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def render(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class LetStatement(Statement):
    name: Identifier
    value: Expression

    def render(self):
        return f"let {self.name.render()} = {self.value.render()}"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Optional[Expression] = None  # None for a bare `return`

    def render(self):
        if self.value is None:
            return "return"
        return f"return {self.value.render()}"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

    def render(self):
        return self.expression.render()


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: Tuple[Statement, ...] = ()

    def render(self):
        if not self.statements:
            return "{ }"
        return f"{{ {render_statements(self.statements)} }}"


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: str
    right: Expression

    def render(self):
        return f"({self.operator}{self.right.render()})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression

    def render(self):
        return f"({self.left.render()} {self.operator} {self.right.render()})"


@dataclass(frozen=True)
class AssignmentExpression(Expression):
    """`name = value`. Rebinds an existing name; never declares one."""
    name: Identifier
    value: Expression

    def render(self):
        return f"({self.name.render()} = {self.value.render()})"


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def render(self):
        result = f"if ({self.condition.render()}) {self.consequence.render()}"
        if self.alternative is not None:
            result += f" else {self.alternative.render()}"
        return result


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def render(self):
        params = ", ".join(param.render() for param in self.parameters)
        return f"fn({params}) {self.body.render()}"


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression  # Identifier or FunctionLiteral, usually
    arguments: Tuple[Expression, ...] = ()

    def render(self):
        args = ", ".join(arg.render() for arg in self.arguments)
        return f"{self.function.render()}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: Tuple[Expression, ...] = ()

    def render(self):
        return "[" + ", ".join(element.render() for element in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Expression):
    left: Expression
    index: Expression

    def render(self):
        return f"({self.left.render()}[{self.index.render()}])"
