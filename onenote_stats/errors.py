"""Exception types raised by the onenote-stats core."""


class OneNoteStatsError(Exception):
    """Base class for all expected onenote-stats failures."""


class NotFoundError(OneNoteStatsError):
    """A requested notebook or container does not exist in the hierarchy."""


class MalformedDataError(OneNoteStatsError):
    """A hierarchy node lacks a required attribute or holds an invalid value."""


class OutputPathError(OneNoteStatsError, OSError):
    """The output target cannot be used (missing parent, already exists)."""

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path
