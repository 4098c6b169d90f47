"""nsautoload exception hierarchy.

The resolver itself never raises for a missing symbol (it returns False),
and errors raised while executing a loaded file propagate unchanged. These
types cover the settings and CLI layers.
"""


class NsAutoloadError(Exception):
    """Base for all nsautoload-specific errors."""


class SettingsError(NsAutoloadError):
    """Raised when a settings file has an invalid ``namespaces`` section."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.message = message
        self.path = path


class InvalidMappingError(NsAutoloadError):
    """Raised when a PREFIX=DIR mapping given on the command line is malformed."""
