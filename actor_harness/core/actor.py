"""Durable actor base class, per-actor state and the serialized host loop."""

import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Optional, TYPE_CHECKING

from .mailbox import Mailbox
from .storage import ActorStorage
from ..errors import ActorAbortedError
from ..messaging.message import Envelope

if TYPE_CHECKING:
    from .actor_ref import ActorId

logger = logging.getLogger(__name__)

# Host-internal operation for timer-driven alarms
SCHEDULED_ALARM = "__scheduled_alarm__"


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


class DurableActor:
    """Base class for user actors.

    Subclasses implement any of the lifecycle hooks ``fetch(request)``,
    ``alarm()``, ``web_socket_message(ws, message)``,
    ``web_socket_close(ws, code, reason, was_clean)`` and
    ``web_socket_error(ws, error)``. Hooks may be plain or async methods.
    The base class defines none of them so a missing hook can be detected.
    """

    def __init__(self, state: "ActorState", env: Any):
        """
        Initialize actor.

        Args:
            state: State of this actor (id, storage, concurrency control)
            env: Bindings of the isolate hosting the actor
        """
        self.state = state
        self.env = env


class ActorState:
    """Per-host state handed to actor constructors."""

    def __init__(self, actor_id: "ActorId", storage: ActorStorage):
        """
        Initialize actor state.

        Args:
            actor_id: Id of the actor
            storage: Durable storage of the actor
        """
        self.id = actor_id
        self.storage = storage
        self._blocker: Optional[asyncio.Task] = None
        self._abort_reason: Optional[BaseException] = None

    @property
    def aborted(self) -> bool:
        """Whether a blocking routine failed and aborted the host."""
        return self._abort_reason is not None

    @property
    def abort_reason(self) -> Optional[BaseException]:
        return self._abort_reason

    def block_concurrency_while(self, callback: Callable[[], Any]) -> "asyncio.Task":
        """
        Run ``callback`` with no other operation starting until it settles.

        Routines run in the order they are registered. If one raises, the
        host is aborted and never runs another operation.

        Args:
            callback: Sync or async callable

        Returns:
            Task resolving to the callback's result
        """
        previous = self._blocker

        async def run() -> Any:
            if previous is not None:
                await previous
            return await maybe_await(callback())

        task = asyncio.ensure_future(run())
        task.add_done_callback(self._on_blocker_done)
        self._blocker = task
        return task

    async def settle(self) -> None:
        """Wait until every registered blocking routine has finished."""
        while self._blocker is not None and not self._blocker.done():
            await asyncio.wait([self._blocker])

    def _on_blocker_done(self, task: "asyncio.Task") -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None and self._abort_reason is None:
            logger.warning("Actor %s aborted: %r", self.id, error)
            self._abort_reason = error


class ActorHost:
    """Runs every operation against one actor, one at a time."""

    def __init__(
        self,
        actor_id: "ActorId",
        actor_class: type,
        env: Any,
        storage: ActorStorage,
        mailbox_size: int = 1000,
        on_abort: Optional[Callable[["ActorHost"], None]] = None
    ):
        """
        Initialize actor host.

        Args:
            actor_id: Id of the hosted actor
            actor_class: Class constructed with ``(state, env)`` on first use
            env: Bindings of the owning isolate
            storage: Durable storage of the actor
            mailbox_size: Maximum number of queued operations
            on_abort: Called once when the host is aborted
        """
        self._actor_class = actor_class
        self._env = env
        self._mailbox = Mailbox(maxsize=mailbox_size)
        self._on_abort = on_abort
        self._instance: Any = None
        self._task: Optional[asyncio.Task] = None
        self._alarm_handle: Optional[asyncio.TimerHandle] = None
        self._alarm_task: Optional[asyncio.Task] = None
        self._running = False
        self.state = ActorState(actor_id, storage)

    @property
    def mailbox(self) -> Mailbox:
        """Get host mailbox."""
        return self._mailbox

    @property
    def aborted(self) -> bool:
        return self.state.aborted

    def start(self) -> None:
        """Start processing operations and arm any stored alarm."""
        if self._task is None or self._task.done():
            self._running = True
            self._task = asyncio.create_task(self._run())
            self.state.storage.set_alarm_listener(self._schedule_alarm)
            self._schedule_alarm(self.state.storage.alarm_time)

    async def stop(self) -> None:
        """Stop processing operations; queued and running operations fail."""
        self._running = False
        self._disarm()
        self.state.storage.set_alarm_listener(None)
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        for envelope in self._mailbox.drain():
            self._fail_stopped(envelope)

    async def submit(self, method: str, *args: Any) -> Any:
        """
        Queue an operation and wait for its result.

        Args:
            method: Name of the hook to invoke on the hosted object
            *args: Arguments for the hook

        Returns:
            Whatever the hook returned

        Raises:
            ActorAbortedError: If the host has been aborted
        """
        if self.state.aborted:
            raise ActorAbortedError(str(self.state.id), self.state.abort_reason)
        if not self._running:
            raise RuntimeError(f"Host for actor {self.state.id} is stopped")
        reply = asyncio.get_running_loop().create_future()
        await self._mailbox.put(Envelope(method, args, reply))
        return await reply

    async def _run(self) -> None:
        while self._running:
            envelope = await self._mailbox.get()
            try:
                await self._process(envelope)
            except asyncio.CancelledError:
                # Stopped mid-operation; the envelope already left the mailbox
                self._fail_stopped(envelope)
                raise
            if self.state.aborted:
                self._abort()
                break

    async def _process(self, envelope: Envelope) -> None:
        reply = envelope.reply
        await self.state.settle()
        if self.state.aborted:
            if reply is not None and not reply.done():
                reply.set_exception(ActorAbortedError(str(self.state.id), self.state.abort_reason))
            return
        try:
            if self._instance is None:
                self._instance = self._actor_class(self.state, self._env)
            if envelope.method == SCHEDULED_ALARM:
                result = await self._run_scheduled_alarm()
            else:
                result = await maybe_await(getattr(self._instance, envelope.method)(*envelope.args))
        except Exception as e:
            if reply is not None and not reply.done():
                reply.set_exception(e)
        else:
            if reply is not None and not reply.done():
                reply.set_result(result)

    def _fail_stopped(self, envelope: Envelope) -> None:
        if envelope.reply is not None and not envelope.reply.done():
            envelope.reply.set_exception(RuntimeError(f"Host for actor {self.state.id} is stopped"))

    def _abort(self) -> None:
        self._running = False
        self._disarm()
        self.state.storage.set_alarm_listener(None)
        error = ActorAbortedError(str(self.state.id), self.state.abort_reason)
        for envelope in self._mailbox.drain():
            if envelope.reply is not None and not envelope.reply.done():
                envelope.reply.set_exception(error)
        if self._on_abort is not None:
            self._on_abort(self)

    async def _run_scheduled_alarm(self) -> None:
        storage = self.state.storage
        if await storage.get_alarm() is None:
            return
        await storage.delete_alarm()
        hook = getattr(self._instance, "alarm", None)
        if hook is not None:
            await maybe_await(hook())

    def _schedule_alarm(self, scheduled_time: Optional[float]) -> None:
        self._disarm()
        if scheduled_time is None or not self._running:
            return
        delay = max(0.0, scheduled_time / 1000 - time.time())
        loop = asyncio.get_running_loop()
        self._alarm_handle = loop.call_later(delay, self._alarm_due)

    def _disarm(self) -> None:
        if self._alarm_handle is not None:
            self._alarm_handle.cancel()
            self._alarm_handle = None

    def _alarm_due(self) -> None:
        self._alarm_handle = None
        self._alarm_task = asyncio.ensure_future(self._deliver_scheduled_alarm())

    async def _deliver_scheduled_alarm(self) -> None:
        try:
            await self.submit(SCHEDULED_ALARM)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Scheduled alarm failed for actor %s", self.state.id)
