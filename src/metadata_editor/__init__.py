"""Forgiving JSON metadata editor core."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "field",
    "interceptor",
    "keymaps",
    "repair",
    "runtime",
    "status",
]

__version__ = "0.1.0"
