import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from tree_shaker.core.chunk import Chunk
from tree_shaker.core.ports.loader import ModuleLoader
from tree_shaker.errors import ChunkBuildError
from tree_shaker.loader.filesystem import get_loader
from tree_shaker.models import ShakerOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChunkResult:
    name: str
    code: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Bundle:
    """Handle over the built chunks, in the order they were declared."""

    def __init__(self, chunks: list[Chunk]) -> None:
        self.chunks = chunks

    @property
    def failed(self) -> list[Chunk]:
        return [chunk for chunk in self.chunks if chunk.error is not None]

    def generate(self) -> list[str]:
        """Return the code of every chunk; raises ``ChunkBuildError`` if any chunk failed."""
        return [chunk.generate() for chunk in self.chunks]

    def generate_settled(self) -> list[ChunkResult]:
        """Return one result per chunk, withholding the code of failed chunks."""
        results: list[ChunkResult] = []
        for chunk in self.chunks:
            try:
                results.append(ChunkResult(name=chunk.name, code=chunk.generate()))
            except ChunkBuildError as exc:
                results.append(ChunkResult(name=chunk.name, error=exc.cause or exc))
        return results

    def shake(self) -> str:
        """Return the first chunk's entry module with its unused imports removed."""
        return self.chunks[0].entry_code()


async def tree_shaker(options: ShakerOptions | Mapping[str, Any], loader: ModuleLoader | None = None) -> Bundle:
    """Build every declared chunk concurrently.

    A failing chunk never affects its siblings: its error is kept on the chunk
    and surfaces when its output is requested.
    """
    if not isinstance(options, ShakerOptions):
        options = ShakerOptions.model_validate(options)
    module_loader = loader if loader is not None else get_loader()

    chunks = [Chunk(name, entry, options.parent, module_loader) for name, entry in options.entries()]
    results = await asyncio.gather(*(chunk.build() for chunk in chunks), return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result

    failed = sum(1 for chunk in chunks if chunk.error is not None)
    logger.info("Built %d chunk(s), %d failed", len(chunks), failed)
    return Bundle(chunks)
