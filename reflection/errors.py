"""Exception types raised by the reflection and extraction layers."""


class ExtractionError(Exception):
    """Base class for extraction failures."""


class InvalidInputError(ExtractionError, ValueError):
    """Raised when the declared source root is not a directory."""


class DirectoryTraversalError(ExtractionError, RuntimeError):
    """Raised when a subdirectory cannot be recursed into."""


class MalformedHookError(ExtractionError, ValueError):
    """Raised when a recognised hook call carries no name argument."""
