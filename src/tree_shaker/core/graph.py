from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Literal

from tree_shaker.core.locations import ModuleLocation
from tree_shaker.core.module import Module
from tree_shaker.core.ports.loader import ModuleLoader
from tree_shaker.errors import CycleError
from tree_shaker.models import ImportDeclaration

logger = logging.getLogger(__name__)

GraphState = Literal["new", "building", "built", "failed"]


class Graph:
    """Every module reachable from one entry, keyed by canonical location.

    ``build`` runs in two phases. Discovery starts one task per location that
    initializes the module and fans out over its dependencies concurrently; a
    location that already has a task is never started or walked again. The
    cycle check then runs a depth-first search over the recorded edges and
    raises ``CycleError`` when it reaches a location still on its path.
    """

    def __init__(self, entry: str, parent: ModuleLocation | str | Path, loader: ModuleLoader) -> None:
        self.entry_specifier = entry
        self.parent = parent
        self._loader = loader
        self._modules: dict[str, Module] = {}
        self._dependencies: dict[str, list[str]] = {}
        self._discovering: dict[str, asyncio.Task[None]] = {}
        self._entry: ModuleLocation | None = None
        self._state: GraphState = "new"

    @property
    def state(self) -> GraphState:
        return self._state

    @property
    def entry(self) -> ModuleLocation:
        self._require_built()
        assert self._entry is not None
        return self._entry

    @property
    def modules(self) -> Mapping[str, Module]:
        self._require_built()
        return MappingProxyType(self._modules)

    async def build(self) -> None:
        if self._state != "new":
            raise RuntimeError(f"Graph for '{self.entry_specifier}' can only be built once (state: {self._state}).")
        self._state = "building"
        try:
            entry = Module(self.entry_specifier, self.parent, self._loader)
            self._entry = entry.location
            await self._discover(entry)
            self._check_cycles(entry.location.key)
        except Exception:
            self._state = "failed"
            raise
        self._state = "built"
        logger.info("Built graph for %s (%d modules)", self._entry, len(self._modules))

    def unused_imports_by_module(self) -> dict[str, str]:
        """Return the edited source of every module, keyed by location."""
        return {
            key: module.edited_source(module.unused_import_declarations()) for key, module in self.modules.items()
        }

    def removed_imports_by_module(self) -> dict[str, list[ImportDeclaration]]:
        return {key: module.unused_import_declarations() for key, module in self.modules.items()}

    def dependency_order(self) -> list[str]:
        """Return location keys with every module after its dependencies and the entry last."""
        ordered: list[str] = []
        seen: set[str] = set()

        def _walk(key: str) -> None:
            seen.add(key)
            for dependency in self._dependencies.get(key, []):
                if dependency not in seen:
                    _walk(dependency)
            ordered.append(key)

        _walk(self.entry.key)
        return ordered

    async def _discover(self, module: Module) -> None:
        key = module.location.key
        if key in self._discovering:
            logger.debug("Already discovering %s", key)
            return
        # The task's creator awaits it, so the entry's discovery ends only after every task has.
        task = asyncio.create_task(self._initialize(module))
        self._discovering[key] = task
        await task

    async def _initialize(self, module: Module) -> None:
        await module.initialize()
        key = module.location.key
        self._modules[key] = module
        logger.debug("Registered %s", module.location)

        children = [Module(specifier, module.location, self._loader) for specifier in module.dependency_specifiers()]
        self._dependencies[key] = [child.location.key for child in children]
        await asyncio.gather(*(self._discover(child) for child in children))

    def _check_cycles(self, entry: str) -> None:
        done: set[str] = set()
        path: list[str] = []

        def _walk(key: str) -> None:
            path.append(key)
            for dependency in self._dependencies.get(key, []):
                if dependency in path:
                    raise CycleError([*path[path.index(dependency) :], dependency])
                if dependency not in done:
                    _walk(dependency)
            path.pop()
            done.add(key)

        _walk(entry)

    def _require_built(self) -> None:
        if self._state != "built":
            raise RuntimeError(f"Graph for '{self.entry_specifier}' is not built (state: {self._state}).")
