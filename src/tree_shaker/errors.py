class TreeShakerError(Exception):
    """Base class for every failure raised while building or generating chunks."""


class ResolutionError(TreeShakerError):
    def __init__(self, specifier: str, parent: str, reason: str) -> None:
        super().__init__(f"Cannot resolve '{specifier}' from {parent}: {reason}")
        self.specifier = specifier
        self.parent = parent
        self.reason = reason


class LoadError(TreeShakerError):
    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Cannot load {location}: {reason}")
        self.location = location
        self.reason = reason


class ModuleSyntaxError(TreeShakerError):
    def __init__(self, location: str, row: int, column: int) -> None:
        super().__init__(f"Syntax error in {location} at line {row + 1}, column {column + 1}")
        self.location = location
        self.row = row
        self.column = column


class CycleError(TreeShakerError):
    def __init__(self, cycle: list[str]) -> None:
        super().__init__("Circular dependency: " + " -> ".join(cycle))
        self.cycle = cycle


class ChunkBuildError(TreeShakerError):
    def __init__(self, chunk: str, cause: BaseException | None = None) -> None:
        reason = str(cause) if cause is not None else "chunk has not been built"
        super().__init__(f"Chunk '{chunk}' is unavailable: {reason}")
        self.chunk = chunk
        self.cause = cause
