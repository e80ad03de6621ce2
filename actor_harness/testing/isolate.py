"""Checks that a stub addresses an actor hosted in this isolate."""

from typing import Any, Callable, List, Mapping, Optional

from ..config import WorkerOptions
from ..errors import UsageError


class SameIsolateValidator:
    """Decides whether stubs point at actors defined in this isolate.

    The set of same-isolate namespaces is derived from the worker options
    once and cached. Options cannot change without building a new isolate.
    """

    def __init__(self, env: Mapping[str, Any], get_options: Callable[[], WorkerOptions]):
        """
        Initialize validator.

        Args:
            env: Bindings of the isolate
            get_options: Getter for the isolate's worker options
        """
        self._env = env
        self._get_options = get_options
        self._namespaces: Optional[List[Any]] = None

    def namespaces(self) -> List[Any]:
        """Get the namespaces hosted in this isolate."""
        if self._namespaces is not None:
            return self._namespaces
        namespaces = []
        for name in self._get_options().isolate_actor_bindings:
            namespace = self._env.get(name)
            if not callable(getattr(namespace, "id_from_string", None)):
                raise UsageError(f"Expected {name} to be an actor namespace binding")
            namespaces.append(namespace)
        self._namespaces = namespaces
        return namespaces

    def is_same_isolate(self, stub: Any) -> bool:
        """Whether some local namespace accepts the stub's serialized id."""
        id_string = str(stub.id)
        for namespace in self.namespaces():
            try:
                namespace.id_from_string(id_string)
            except ValueError:
                continue
            return True
        return False

    def assert_same_isolate(self, stub: Any) -> None:
        """
        Raises:
            UsageError: If the stub addresses an actor in another isolate
        """
        if not self.is_same_isolate(stub):
            raise UsageError(
                "Durable actor test helpers can only be used with stubs pointing "
                "to actors defined within the same worker."
            )
