"""Exception types for the network document model

- DocumentFormatError: input that is not a valid graph document (user error)
- InvariantViolation: a caller broke a model invariant (programming error)
- JsonPathError: a patch path that does not match the tree shape
- UnknownElementError: a node id or edge key not present in the document

Structural validation failures (disallowed adjacency, out-degree cap,
duplicate edge) are not exceptions; they are reported as notices.
"""


class NetworkError(Exception):
    """Base class for all network editor errors."""


class DocumentFormatError(NetworkError):
    """Raised when an imported or edited document is malformed."""


class InvariantViolation(NetworkError):
    """Raised when a caller violates a document or tree invariant."""


class JsonPathError(InvariantViolation):
    """Raised when a path cannot be followed through a JSON value."""

    def __init__(self, message: str, path: list | tuple = ()):
        super().__init__(message)
        self.path = list(path)


class UnknownElementError(InvariantViolation, KeyError):
    """Raised when a node id or edge key does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
