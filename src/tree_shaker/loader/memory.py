from collections.abc import Mapping
from pathlib import Path

from tree_shaker.core.locations import ModuleLocation
from tree_shaker.errors import LoadError


class InMemoryLoader:
    """Serve module sources from a mapping of absolute path to source text.

    Implements the ``ModuleLoader`` protocol. ``requests`` counts loads per
    location key.
    """

    def __init__(self, sources: Mapping[str | Path, str | bytes], encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self.sources: dict[str, bytes] = {}
        for path, source in sources.items():
            key = Path(path).as_posix()
            self.sources[key] = source.encode(encoding) if isinstance(source, str) else source
        self.requests: dict[str, int] = {}

    async def load(self, location: ModuleLocation) -> bytes:
        self.requests[location.key] = self.requests.get(location.key, 0) + 1
        try:
            return self.sources[location.key]
        except KeyError:
            raise LoadError(location.key, "No such module") from None
