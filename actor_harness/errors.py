"""Error types raised by the actor harness."""


class HarnessError(Exception):
    """Base class for all actor harness errors."""


class UsageError(HarnessError):
    """Raised when a helper or hook is used in a way it does not support."""


class StaleSourceError(HarnessError):
    """Raised when the user module changed underneath a live actor."""


class ProtocolError(HarnessError):
    """Raised for malformed or unrecognized action descriptors."""


class ConfigError(HarnessError):
    """Raised when worker options have the wrong shape."""


class ActorAbortedError(HarnessError):
    """Raised for operations against an actor host that has been aborted."""

    def __init__(self, actor_id: str, reason: BaseException) -> None:
        """
        Initialize an aborted-actor error.

        Args:
            actor_id: Serialized id of the aborted actor
            reason: Error that aborted the actor host
        """
        self.actor_id = actor_id
        self.reason = reason
        self.__cause__ = reason
        super().__init__(
            f"Actor {actor_id} was aborted ({type(reason).__name__}: {reason}). "
            "Get a fresh stub from the namespace to retry."
        )
