"""Durable actor host with helpers for testing live actors."""

from .api import (
    create_system,
    get_actor_instance,
    get_env,
    get_namespace,
    get_system,
    run_actor_alarm,
    run_with_actor_context,
    set_system,
    shutdown,
)
from .config import WorkerOptions, load_options
from .core.actor import ActorState, DurableActor
from .core.actor_ref import ActorId, ActorNamespace, ActorStub
from .core.system import ActorSystem
from .errors import (
    ActorAbortedError,
    ConfigError,
    HarnessError,
    ProtocolError,
    StaleSourceError,
    UsageError,
)
from .messaging.message import Request, Response

__all__ = [
    "create_system",
    "get_actor_instance",
    "get_env",
    "get_namespace",
    "get_system",
    "run_actor_alarm",
    "run_with_actor_context",
    "set_system",
    "shutdown",
    "WorkerOptions",
    "load_options",
    "ActorState",
    "DurableActor",
    "ActorId",
    "ActorNamespace",
    "ActorStub",
    "ActorSystem",
    "ActorAbortedError",
    "ConfigError",
    "HarnessError",
    "ProtocolError",
    "StaleSourceError",
    "UsageError",
    "Request",
    "Response",
]
