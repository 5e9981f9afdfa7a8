"""
Formula Bump Error Types

Every error raised by the update pipeline derives from FormulaBumpError so the
CLI can report it with a single fatal log line and exit status 1.
"""


class FormulaBumpError(Exception):
    """Base class for errors that abort a formula update run."""

    pass


class ConfigurationError(FormulaBumpError):
    """Raised when the commit token or a required argument is missing."""

    pass


class NotFoundError(FormulaBumpError):
    """Raised when the repository has no releases or the release tag is absent."""

    pass


class RemoteCallError(FormulaBumpError):
    """Raised when a call to the repository hosting API fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedContentError(FormulaBumpError):
    """Raised when the formula text cannot be decoded or lacks a sha256 line."""

    pass
