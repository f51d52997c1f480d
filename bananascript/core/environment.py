"""Lexical scopes. An Environment maps names to values and links to at most one enclosing Environment. Lookups walk
outward through that chain.

A new scope is only created for a function call, enclosed by the function's captured environment. Blocks share
their enclosing scope. Scopes that a closure escapes with are kept alive by the closure's reference to them.
"""


class Environment:
    """One scope in the chain."""

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    @classmethod
    def new_enclosed(cls, outer):
        """Returns a fresh, empty scope whose enclosing scope is outer."""
        return cls(outer)

    def get(self, name):
        """Returns the value bound to name in the nearest scope that binds it, or None if no scope does."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def define(self, name, value):
        """Binds name in this scope, shadowing any binding of the same name further out."""
        self.store[name] = value
        return value

    def assign(self, name, value):
        """Rebinds name in the nearest scope that binds it. Returns False, binding nothing, if no scope does."""
        env = self
        while env is not None:
            if name in env.store:
                env.store[name] = value
                return True
            env = env.outer
        return False

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"Environment(names={sorted(self.store)}, outer={'yes' if self.outer else 'no'})"


def new_root_environment():
    """Returns an empty top-level scope. Builtins are not stored in it: they resolve after the whole chain misses."""
    return Environment()
