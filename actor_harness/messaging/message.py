"""Transport request, response and envelope types."""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlsplit


@dataclass
class Request:
    """A transport call into an actor.

    ``cf`` is out-of-band metadata that travels with the call but is never
    part of the body. Harness actions ride in it.
    """
    url: str
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    cf: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        """Get the URL path, ``/`` when the URL has none."""
        return urlsplit(self.url).path or "/"

    def text(self) -> str:
        """Decode the body as UTF-8."""
        return (self.body or b"").decode("utf-8")

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.text())


class Response:
    """Result of a transport call."""

    def __init__(
        self,
        body: Any = None,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize response.

        Args:
            body: Response body (str or bytes, None for no content)
            status: HTTP-style status code
            headers: Response headers
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body: Optional[bytes] = body
        self.status = status
        self.headers: Dict[str, str] = dict(headers or {})

    @classmethod
    def json_response(cls, data: Any, status: int = 200) -> "Response":
        """Build a response carrying ``data`` encoded as JSON."""
        return cls(
            json.dumps(data),
            status=status,
            headers={"content-type": "application/json"}
        )

    @property
    def ok(self) -> bool:
        """Whether the status is in the 2xx range."""
        return 200 <= self.status < 300

    def text(self) -> str:
        """Decode the body as UTF-8."""
        return (self.body or b"").decode("utf-8")

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.text())

    def __repr__(self) -> str:
        return f"Response(status={self.status})"


@dataclass
class Envelope:
    """One queued operation against an actor host."""
    method: str
    args: Tuple[Any, ...] = ()
    reply: Optional[asyncio.Future] = None
