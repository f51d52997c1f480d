"""Language core: token model, lexer, AST, parser, runtime values, environments, builtins and evaluator."""
