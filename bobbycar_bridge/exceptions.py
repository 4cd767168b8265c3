class BridgeError(Exception):
    """Base class for errors raised while handling one inbound message."""


class ParseError(BridgeError):
    """The message is not valid JSON or not a JSON array."""


class RecordStructureError(BridgeError):
    """A record in a batch could not be decoded.

    The string form is the reason sent to the client when the connection
    is closed, e.g. ``record 3: utc is missing``.
    """

    def __init__(self, index: int, field: str, problem: str):
        self.index = index
        self.field = field
        self.problem = problem
        super().__init__(f"record {index}: {field} {problem}")


class TransportError(BridgeError):
    """The outbound write failed or was answered with a non-success status."""

    def __init__(self, reason: str, status_code: int | None = None):
        self.reason = reason
        self.status_code = status_code
        if status_code is None:
            super().__init__(reason)
        else:
            super().__init__(f"HTTP {status_code}: {reason}")
