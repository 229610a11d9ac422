class PsbdmpError(Exception):
    """Base class for every failure raised by the psbdmp client."""


class TransportError(PsbdmpError):
    """Raised when the HTTP round trip itself fails (network, timeout, HTTP status)."""


class DecodeError(PsbdmpError):
    """Raised when the response body is not the JSON envelope we expect."""


class RemoteError(PsbdmpError):
    """Raised when the envelope decodes fine but carries a non-zero error code."""

    def __init__(self, message: str, code=None):
        super().__init__(message)
        self.message = message
        self.code = code


class UsageError(PsbdmpError):
    """Raised for unusable input: no query mode, conflicting modes, or an id that is not a path segment."""


__all__ = ["PsbdmpError", "TransportError", "DecodeError", "RemoteError", "UsageError"]
