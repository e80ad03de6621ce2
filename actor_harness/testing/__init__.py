"""Test helpers for reaching into live durable actors."""

from .actions import CF_KEY_ACTION, Action, ActionType, parse_action
from .client import get_actor_instance, run_actor_alarm, run_with_actor_context
from .context import HarnessContext
from .lifecycle import InstanceManager, LifecycleStatus
from .results import USE_RESPONSE, ActionResults
from .wrapper import ActorWrapper, create_actor_wrapper

__all__ = [
    "CF_KEY_ACTION",
    "Action",
    "ActionType",
    "parse_action",
    "get_actor_instance",
    "run_actor_alarm",
    "run_with_actor_context",
    "HarnessContext",
    "InstanceManager",
    "LifecycleStatus",
    "USE_RESPONSE",
    "ActionResults",
    "ActorWrapper",
    "create_actor_wrapper",
]
