"""Actor ids, namespaces and stubs."""

import hashlib
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union, TYPE_CHECKING

from .storage import ActorStorage
from ..errors import UsageError
from ..messaging.message import Request, Response

if TYPE_CHECKING:
    from .actor import ActorHost
    from .system import ActorSystem

_ID_PATTERN = re.compile(r"^[0-9a-f]{64}$")
_TAG_LENGTH = 16

LIFECYCLE_EVENTS = frozenset({
    "alarm",
    "web_socket_message",
    "web_socket_close",
    "web_socket_error",
})


@dataclass(frozen=True)
class ActorId:
    """Identifier of one actor.

    The first 16 hex characters tag the namespace that issued the id, so an
    id can only be parsed back by that namespace.
    """
    hex: str
    name: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.hex


class ActorNamespace:
    """A binding through which actors of one class are addressed."""

    def __init__(self, system: "ActorSystem", binding: str, actor_class: type):
        """
        Initialize actor namespace.

        Args:
            system: Isolate hosting the namespace's actors
            binding: Binding name of the namespace
            actor_class: Class constructed for each actor
        """
        self._system = system
        self._binding = binding
        self._actor_class = actor_class
        # Salted so equal node ids in two isolates never share a tag
        self._tag = _digest(f"{system.node_id}/{binding}/{uuid.uuid4().hex}")[:_TAG_LENGTH]
        self._storages: Dict[str, ActorStorage] = {}

    @property
    def binding(self) -> str:
        return self._binding

    @property
    def system(self) -> "ActorSystem":
        return self._system

    @property
    def actor_class(self) -> type:
        return self._actor_class

    def new_unique_id(self) -> ActorId:
        """Create a fresh random id."""
        return ActorId(self._tag + _digest(uuid.uuid4().hex)[:64 - _TAG_LENGTH])

    def id_from_name(self, name: str) -> ActorId:
        """Derive the stable id for ``name``."""
        return ActorId(self._tag + _digest(f"{self._tag}:{name}")[:64 - _TAG_LENGTH], name=name)

    def id_from_string(self, value: str) -> ActorId:
        """
        Parse a serialized id issued by this namespace.

        Raises:
            ValueError: If ``value`` is malformed or belongs to another namespace
        """
        if not isinstance(value, str) or not _ID_PATTERN.match(value):
            raise ValueError(f"Invalid actor id: {value!r}")
        if value[:_TAG_LENGTH] != self._tag:
            raise ValueError(f"Actor id {value} does not belong to namespace {self._binding}")
        return ActorId(value)

    def get(self, actor_id: ActorId) -> "ActorStub":
        """Get a stub addressing ``actor_id``."""
        self.id_from_string(str(actor_id))
        return ActorStub(self, actor_id)

    def storage_for(self, actor_id: ActorId) -> ActorStorage:
        """Get the durable storage of ``actor_id``, creating it on first use."""
        key = str(actor_id)
        if key not in self._storages:
            self._storages[key] = ActorStorage()
        return self._storages[key]

    def __repr__(self) -> str:
        return f"ActorNamespace({self._system.node_id}/{self._binding})"


class ActorStub:
    """Address-only handle used to call into one actor."""

    def __init__(self, namespace: ActorNamespace, actor_id: ActorId):
        """
        Initialize actor stub.

        Args:
            namespace: Namespace that issued ``actor_id``
            actor_id: Id of the target actor
        """
        self.id = actor_id
        self._namespace = namespace
        self._host: Optional["ActorHost"] = None

    async def fetch(self, request: Union[Request, str], **init: Any) -> Response:
        """
        Send a request to the actor.

        Args:
            request: Request, or URL to build one from
            **init: Request fields used when ``request`` is a URL

        Returns:
            The actor's response
        """
        if not isinstance(request, Request):
            request = Request(str(request), **init)
        return await self._call("fetch", request)

    async def deliver(self, event: str, *args: Any) -> Any:
        """
        Deliver a lifecycle event such as a WebSocket message.

        Args:
            event: One of ``alarm``, ``web_socket_message``,
                ``web_socket_close``, ``web_socket_error``
            *args: Event arguments
        """
        if event not in LIFECYCLE_EVENTS:
            raise UsageError(f"Unknown lifecycle event: {event}")
        return await self._call(event, *args)

    async def _call(self, method: str, *args: Any) -> Any:
        # Bound on first use; an aborted host keeps failing this stub.
        if self._host is None:
            self._host = self._namespace.system.get_or_create_host(self._namespace, self.id)
        return await self._host.submit(method, *args)

    def __repr__(self) -> str:
        return f"ActorStub({self._namespace.binding}:{self.id})"


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
