"""Loads the user's main module for an isolate."""

import importlib.util
import itertools
import logging
import os
import sys
from types import ModuleType
from typing import Any, Callable, Dict, Optional

from .config import WorkerOptions
from .errors import UsageError

logger = logging.getLogger(__name__)

_module_counter = itertools.count()


class ModuleLoader:
    """Imports user modules from source files, once per path."""

    def __init__(self, get_options: Callable[[], WorkerOptions]):
        """
        Initialize module loader.

        Args:
            get_options: Getter for the isolate's worker options
        """
        self._get_options = get_options
        self._modules: Dict[str, ModuleType] = {}

    def must_get_resolved_main_path(self, for_what: str) -> str:
        """
        Get the absolute path of the configured main module.

        Args:
            for_what: Feature needing the main module, used in the error message

        Raises:
            UsageError: If no main module is configured
        """
        options = self._get_options()
        if options.main is None:
            raise UsageError(f"Using {for_what}s requires `main` to be set in the worker options")
        return os.path.abspath(os.path.join(options.root, options.main))

    async def import_module(self, env: Any, path: str) -> ModuleType:
        """
        Import the module at ``path``, reusing an earlier import of it.

        The module sees the isolate's bindings as the global ``env``. Safe to
        call redundantly from concurrent operations: loading never suspends.
        """
        module = self._modules.get(path)
        if module is None:
            module = self._load(env, path)
            self._modules[path] = module
        return module

    def invalidate(self, path: Optional[str] = None) -> None:
        """Forget imported modules so the next import re-executes the source."""
        paths = list(self._modules) if path is None else [path]
        for p in paths:
            module = self._modules.pop(p, None)
            if module is not None:
                sys.modules.pop(module.__name__, None)

    @staticmethod
    def _load(env: Any, path: str) -> ModuleType:
        name = f"_actor_main_{next(_module_counter)}"
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise UsageError(f"Cannot import {path}")
        module = importlib.util.module_from_spec(spec)
        module.env = env
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[name]
            raise
        logger.debug("Imported %s as %s", path, name)
        return module
