"""Core actor host runtime."""

from .actor import ActorHost, ActorState, DurableActor
from .actor_ref import ActorId, ActorNamespace, ActorStub
from .mailbox import Mailbox
from .storage import ActorStorage
from .system import ActorSystem

__all__ = [
    "ActorHost",
    "ActorState",
    "DurableActor",
    "ActorId",
    "ActorNamespace",
    "ActorStub",
    "Mailbox",
    "ActorStorage",
    "ActorSystem",
]
