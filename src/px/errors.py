"""Error types raised by px."""


class PxError(Exception):
    """Base class for all px errors."""

    pass


class IndexFormatError(PxError):
    """Raised when the persisted index cannot be parsed or validated."""

    pass


class IndexIOError(PxError):
    """Raised when the persisted index cannot be read or written."""

    pass


class ProjectNotFoundError(PxError):
    """Raised when no indexed project matches a lookup."""

    pass


class NotARepositoryError(PxError, ValueError):
    """Raised when a path handed to the repository probe is not a repository root."""

    pass


class GitError(PxError):
    """Raised when a git query fails to run or produces unusable output."""

    pass


class ConfigError(PxError):
    """Raised when the px config file exists but cannot be parsed."""

    pass
