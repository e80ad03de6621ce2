"""Transport types for the actor harness."""

from .message import Envelope, Request, Response

__all__ = [
    "Envelope",
    "Request",
    "Response",
]
