"""Exceptions raised by the dirmon analysis engine."""


class RootAccessError(OSError):
    """The root of an operation is missing, not a directory, or unreadable."""

    def __init__(self, path: str, cause: str):
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class EntryAccessError(OSError):
    """A single entry below the root could not be read or hashed."""

    def __init__(self, path: str, cause: str):
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class ScanCancelled(Exception):
    """The operation was cancelled; partial results were discarded."""
