"""
errors.py

Exceptions shared by the line sources, the match collector and the scan pipeline.
Malformed domain input (empty words, short rows) never raises; only these do.
"""


class LineSourceError(RuntimeError):
    """A word list or data file could not be opened, downloaded, decompressed or read."""

    def __init__(self, resource: str, gzipped: bool, reason):
        self.resource = resource
        self.gzipped = gzipped
        self.reason = reason
        super().__init__(
            f"could not read '{resource}' (gzip={'on' if gzipped else 'off'}): {reason}"
        )


class ConfigurationError(ValueError):
    """Raised at construction time for settings that make a run impossible."""
