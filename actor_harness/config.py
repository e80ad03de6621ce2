"""Worker options consumed by an isolate."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigError


@dataclass
class WorkerOptions:
    """Static configuration of one isolate.

    Changing options means building a new isolate, so anything derived from
    them may be cached for the isolate's lifetime.
    """
    main: Optional[str] = None
    root: str = "."
    actors: Dict[str, str] = field(default_factory=dict)

    @property
    def isolate_actor_bindings(self) -> List[str]:
        """Actor binding names hosted in this isolate, in declaration order."""
        return list(self.actors)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkerOptions":
        """
        Build options from a plain mapping.

        Args:
            data: Mapping with optional ``main``, ``root`` and ``actors`` keys

        Raises:
            ConfigError: If the mapping has the wrong shape
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Worker options must be a mapping, got {type(data).__name__}")
        unknown = set(data) - {"main", "root", "actors"}
        if unknown:
            raise ConfigError(f"Unknown worker options: {', '.join(sorted(unknown))}")

        main = data.get("main")
        if main is not None and not isinstance(main, str):
            raise ConfigError("`main` must be a string path")
        root = data.get("root", ".")
        if not isinstance(root, str):
            raise ConfigError("`root` must be a string path")
        actors = data.get("actors", {})
        if not isinstance(actors, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in actors.items()
        ):
            raise ConfigError("`actors` must map binding names to class names")

        return cls(main=main, root=root, actors=dict(actors))


def load_options(path: Union[str, Path]) -> WorkerOptions:
    """
    Load worker options from a JSON file.

    Relative ``root`` values are resolved against the file's directory.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read worker options from {path}: {e}") from e
    options = WorkerOptions.from_dict(data)
    options.root = str((path.parent / options.root).resolve())
    return options
