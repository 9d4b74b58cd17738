from typing import Protocol

from tree_shaker.core.locations import ModuleLocation


class ModuleLoader(Protocol):
    encoding: str

    async def load(self, location: ModuleLocation) -> bytes: ...
