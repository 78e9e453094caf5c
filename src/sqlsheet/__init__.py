"""sqlsheet — load, inspect and render the SQL cheat sheet."""

__version__ = "0.3.0"
