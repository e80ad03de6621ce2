"""ActorSystem - one isolate hosting durable actors."""

import logging
from typing import Any, Dict, Optional, Tuple

from .actor import ActorHost
from .actor_ref import ActorId, ActorNamespace
from ..config import WorkerOptions
from ..loader import ModuleLoader
from ..testing.context import HarnessContext

logger = logging.getLogger(__name__)


class ActorSystem:
    """An isolate: bindings, actor hosts, user modules and harness state.

    Nothing here is shared with other isolates, including imported user
    modules and the action correlation store.
    """

    def __init__(
        self,
        node_id: str = "default",
        options: Optional[WorkerOptions] = None,
        mailbox_size: int = 1000
    ):
        """
        Initialize actor system.

        Args:
            node_id: Unique identifier for this isolate
            options: Worker options (main module and actor bindings)
            mailbox_size: Maximum queued operations per actor
        """
        self._node_id = node_id
        self._options = options or WorkerOptions()
        self._mailbox_size = mailbox_size
        self._hosts: Dict[Tuple[str, str], ActorHost] = {}
        self._running = False
        self.env: Dict[str, Any] = {}
        self.loader = ModuleLoader(self.get_serialized_options)
        self.harness = HarnessContext(self.env, self.get_serialized_options)

    @property
    def node_id(self) -> str:
        """Get isolate ID."""
        return self._node_id

    @property
    def running(self) -> bool:
        return self._running

    def get_serialized_options(self) -> WorkerOptions:
        """Get the worker options this isolate was built with."""
        return self._options

    async def start(self) -> None:
        """Create a namespace binding for every configured actor class."""
        from ..testing.wrapper import create_actor_wrapper

        for binding, class_name in self._options.actors.items():
            wrapper = create_actor_wrapper(class_name, self.harness, self.loader)
            self.env[binding] = ActorNamespace(self, binding, wrapper)
        self._running = True
        logger.debug("Actor system %s started with bindings %s", self._node_id, list(self.env))

    def bind(self, name: str, value: Any) -> None:
        """
        Add a binding, such as a namespace owned by another isolate.

        Args:
            name: Binding name
            value: Bound value
        """
        if name in self.env:
            raise ValueError(f"Binding {name} already exists")
        self.env[name] = value

    def get_or_create_host(self, namespace: ActorNamespace, actor_id: ActorId) -> ActorHost:
        """
        Get the live host for an actor, starting a new one if needed.

        Args:
            namespace: Namespace owning the actor
            actor_id: Id of the actor

        Returns:
            Running host
        """
        if not self._running:
            raise RuntimeError(f"Actor system {self._node_id} is not running")
        key = (namespace.binding, str(actor_id))
        host = self._hosts.get(key)
        if host is None or host.aborted:
            host = ActorHost(
                actor_id,
                namespace.actor_class,
                self.env,
                namespace.storage_for(actor_id),
                mailbox_size=self._mailbox_size,
                on_abort=self._forget_host
            )
            self._hosts[key] = host
            host.start()
            logger.debug("Started host for %s:%s", namespace.binding, actor_id)
        return host

    def _forget_host(self, host: ActorHost) -> None:
        for key, candidate in list(self._hosts.items()):
            if candidate is host:
                del self._hosts[key]
                logger.warning("Dropped aborted host for %s:%s", *key)

    async def shutdown(self) -> None:
        """Stop every actor host and tear down harness state."""
        self._running = False
        for key in list(self._hosts):
            host = self._hosts.pop(key)
            await host.stop()
        self.harness.reset()
        self.loader.invalidate()
