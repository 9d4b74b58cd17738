import logging
import os
from pathlib import Path

from tree_shaker.core.graph import Graph
from tree_shaker.core.locations import ModuleLocation, base_directory
from tree_shaker.core.ports.loader import ModuleLoader
from tree_shaker.errors import ChunkBuildError

logger = logging.getLogger(__name__)


class Chunk:
    """One requested output: an entry specifier, its output name, and the graph behind it.

    ``generate`` emits every reachable module in dependency order, entry last,
    each preceded by a ``// <path>`` banner relative to the base directory.
    """

    def __init__(self, name: str, entry: str, parent: ModuleLocation | str | Path, loader: ModuleLoader) -> None:
        self.name = name
        self.entry = entry
        self.base_directory = base_directory(parent)
        self.graph = Graph(entry, parent, loader)
        self.error: Exception | None = None

    def __repr__(self) -> str:
        return f"Chunk({self.name!r}, entry={self.entry!r})"

    @property
    def built(self) -> bool:
        return self.graph.state == "built"

    async def build(self) -> None:
        logger.info("Building chunk %s from %s", self.name, self.entry)
        try:
            await self.graph.build()
        except Exception as exc:
            self.error = exc
            logger.warning("Chunk %s failed: %s", self.name, exc)
            raise

    def generate(self) -> str:
        self._require_built()
        edited = self.graph.unused_imports_by_module()
        parts: list[str] = []
        for key in self.graph.dependency_order():
            code = edited[key]
            if code and not code.endswith("\n"):
                code += "\n"
            parts.append(f"// {self._display_name(key)}\n{code}")
        return "\n".join(parts)

    def entry_code(self) -> str:
        """Return only the entry module's code with its unused imports removed."""
        self._require_built()
        return self.graph.modules[self.graph.entry.key].shaken_source()

    def _display_name(self, key: str) -> str:
        return Path(os.path.relpath(key, self.base_directory)).as_posix()

    def _require_built(self) -> None:
        if self.error is not None:
            raise ChunkBuildError(self.name, self.error) from self.error
        if not self.built:
            raise ChunkBuildError(self.name)
