"""Public API for the actor harness."""

from typing import Any, Optional
from .config import WorkerOptions
from .core.actor_ref import ActorNamespace
from .core.system import ActorSystem
from .testing.client import get_actor_instance, run_actor_alarm, run_with_actor_context


# Current isolate (tests run inside it)
_system: Optional[ActorSystem] = None


async def create_system(
    node_id: str = "default",
    options: Optional[WorkerOptions] = None,
    mailbox_size: int = 1000
) -> ActorSystem:
    """
    Create, start and make current a new actor system.

    Args:
        node_id: Unique identifier for the isolate
        options: Worker options (main module and actor bindings)
        mailbox_size: Maximum queued operations per actor

    Returns:
        Actor system instance
    """
    global _system
    _system = ActorSystem(node_id=node_id, options=options, mailbox_size=mailbox_size)
    await _system.start()
    return _system


def get_system() -> ActorSystem:
    """
    Get the current actor system.

    Raises:
        RuntimeError: If no system has been created
    """
    if _system is None:
        raise RuntimeError("No actor system created. Call create_system() first.")
    return _system


def set_system(system: Optional[ActorSystem]) -> None:
    """
    Set the current actor system.

    Args:
        system: Actor system to use, or None to clear it
    """
    global _system
    _system = system


def get_env() -> dict:
    """Get the bindings of the current actor system."""
    return get_system().env


def get_namespace(binding: str) -> ActorNamespace:
    """
    Get an actor namespace binding of the current system.

    Raises:
        KeyError: If there is no such binding
        TypeError: If the binding is not an actor namespace
    """
    value: Any = get_system().env[binding]
    if not isinstance(value, ActorNamespace):
        raise TypeError(f"Binding {binding} is not an actor namespace")
    return value


async def shutdown() -> None:
    """Shutdown the current actor system and clear it."""
    global _system
    system = get_system()
    await system.shutdown()
    _system = None


__all__ = [
    "create_system",
    "get_system",
    "set_system",
    "get_env",
    "get_namespace",
    "shutdown",
    "get_actor_instance",
    "run_with_actor_context",
    "run_actor_alarm",
]
