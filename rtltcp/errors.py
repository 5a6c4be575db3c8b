"""Exception types raised by the rtl_tcp client."""

from typing import Optional


class RTLTCPError(Exception):
    """Base class for every error raised by this package."""


class ConnectionFailed(RTLTCPError):
    """The TCP connection to the server could not be opened."""

    def __init__(self, address: tuple, original: Optional[BaseException] = None):
        self.address  = address
        self.original = original
        host, port = address
        detail = f": {original}" if original else ""
        super().__init__(f"Error connecting to rtl_tcp server at {host}:{port}{detail}")


class TransportError(RTLTCPError):
    """The underlying socket failed. ``original`` holds the socket's own error."""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        self.original = original
        super().__init__(message)


class ShortRead(TransportError):
    """The stream ended or failed before a fixed-size frame was complete."""

    def __init__(self, requested: int, received: int,
                 original: Optional[BaseException] = None, what: str = "data"):
        self.requested = requested
        self.received  = received
        reason = f" ({original})" if original else ""
        super().__init__(
            f"Short read of {what}: requested {requested} bytes, "
            f"received {received}{reason}",
            original,
        )


class WriteFailed(TransportError):
    """A command could not be written in full. The connection must be discarded."""

    def __init__(self, opcode: int, parameter: int,
                 original: Optional[BaseException] = None):
        self.opcode    = opcode
        self.parameter = parameter
        reason = f": {original}" if original else ""
        super().__init__(
            f"Failed to write command opcode={opcode} parameter={parameter}{reason}",
            original,
        )


ShortWrite = WriteFailed


class ProtocolMismatch(RTLTCPError):
    """The handshake parsed but its magic marker is not ``RTL0``."""

    def __init__(self, expected: bytes, received: bytes):
        self.expected = expected
        self.received = received
        super().__init__(f"Invalid magic number: expected {expected!r} received {received!r}")


class InvalidArgument(RTLTCPError, ValueError):
    """A client-side bounds check rejected an argument; nothing was sent."""
