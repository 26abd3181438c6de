"""
diagnostics.py

Human-readable diagnostics on stderr. Warnings are always shown; debug
messages only once verbose output has been switched on (e.g. by --verbose).
"""

import sys

_verbose = False


def set_verbose(enabled: bool):
    """Turn DEBUG output on or off for the whole process."""
    global _verbose
    _verbose = bool(enabled)


def debug(msg):
    """Print debug message to stderr with a DEBUG prefix."""
    if _verbose:
        print(f"DEBUG: {msg}", file=sys.stderr)


def warning(msg):
    """Print a warning to stderr; processing carries on."""
    print(f"Warning: {msg}", file=sys.stderr)
