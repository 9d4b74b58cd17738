import asyncio
import logging
import os

from tree_shaker.core.locations import ModuleLocation
from tree_shaker.errors import LoadError

logger = logging.getLogger(__name__)


class FilesystemLoader:
    """Read module sources from disk without blocking the event loop.

    Implements the ``ModuleLoader`` protocol.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def load(self, location: ModuleLocation) -> bytes:
        logger.debug("Loading %s", location)
        try:
            return await asyncio.to_thread(location.path.read_bytes)
        except OSError as exc:
            raise LoadError(location.key, exc.strerror or exc.__class__.__name__) from exc


def get_loader() -> FilesystemLoader:
    return FilesystemLoader(encoding=os.getenv("TREE_SHAKER_ENCODING", "utf-8"))
