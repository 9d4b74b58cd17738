from tree_shaker.core.chunk import Chunk
from tree_shaker.core.graph import Graph
from tree_shaker.core.module import Module
from tree_shaker.core.shaker import Bundle, ChunkResult, tree_shaker
from tree_shaker.errors import (
    ChunkBuildError,
    CycleError,
    LoadError,
    ModuleSyntaxError,
    ResolutionError,
    TreeShakerError,
)
from tree_shaker.loader.filesystem import FilesystemLoader
from tree_shaker.loader.memory import InMemoryLoader
from tree_shaker.models import ShakerOptions

__all__ = [
    "Bundle",
    "Chunk",
    "ChunkBuildError",
    "ChunkResult",
    "CycleError",
    "FilesystemLoader",
    "Graph",
    "InMemoryLoader",
    "LoadError",
    "Module",
    "ModuleSyntaxError",
    "ResolutionError",
    "ShakerOptions",
    "TreeShakerError",
    "tree_shaker",
]
