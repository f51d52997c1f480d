"""Command-line surface around the core: error reporting, sessions and the interactive shell."""
