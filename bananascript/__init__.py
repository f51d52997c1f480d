"""bananascript: a small expression language with a Pratt parser and a tree-walking evaluator.

Basic program flow:
    1. Lexer: scans source text into tokens on demand (core/lexer.py)
    2. Parser: builds an immutable AST by precedence climbing and collects diagnostics (core/parser.py)
    3. Evaluator: walks the AST against an Environment and reduces it to a runtime value (core/evaluator.py)

```
program, errors = parse("let add = fn(a, b) { a + b }; add(2, 3);")
if not errors:
    print(evaluate(program, new_root_environment()).inspect())  # 5
```

Runtime failures are not raised: evaluate returns an Error value, which the caller checks with is_error.
"""

from bananascript.core.environment import Environment, new_root_environment
from bananascript.core.evaluator import evaluate
from bananascript.core.object import Error, is_error
from bananascript.core.parser import parse

__all__ = ["Environment", "Error", "evaluate", "is_error", "new_root_environment", "parse"]
