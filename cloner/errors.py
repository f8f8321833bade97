"""Error types raised by the cloning pipeline."""


class CloneError(RuntimeError):
    """Base class for every fatal condition of a clone run."""


class UsageError(CloneError):
    """Unsupported chain alias, bad address or bad option value."""


class MissingApiKeyError(CloneError):
    """The explorer API key environment variable is not set."""


class FilesystemError(CloneError):
    """Target path exists, or a directory/file operation failed."""


class ScaffoldError(CloneError):
    """The project scaffolding command failed."""


class NetworkError(CloneError):
    """The explorer request could not be completed."""


class ProtocolError(CloneError):
    """The explorer answered with something we cannot use."""
