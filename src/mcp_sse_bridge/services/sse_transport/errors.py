"""
Transport and routing errors.

Every error carries the HTTP status it maps to when it surfaces on a POST.
"""


class TransportError(Exception):
    """Base class for all SSE transport errors."""
    status_code: int = 500


class AlreadyClosedError(TransportError):
    """start() was called on a transport whose stream is already closed."""
    status_code = 400


class AlreadyStartedError(TransportError):
    """start() was called more than once."""


class NotConnectedError(TransportError):
    """send() was called after the stream closed."""
    status_code = 400


class MalformedMessageError(TransportError):
    """An inbound body is not valid JSON or not a valid JSON-RPC envelope."""
    status_code = 400


class NoHandlerError(TransportError):
    """An inbound message arrived before the peer installed on_message."""
    status_code = 500


class MissingSessionIdError(TransportError):
    status_code = 400

    def __init__(self, message: str = "Missing sessionId query parameter"):
        super().__init__(message)


class UnknownSessionError(TransportError):
    status_code = 404

    def __init__(self, session_id: str, message: str = "No active session found with the provided sessionId"):
        super().__init__(message)
        self.session_id = session_id
