from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Span(BaseModel):
    """Half-open byte range ``[start, end)`` into a module's original source."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> "Span":
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")
        return self


class ImportSpecifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["named", "default", "namespace"]
    imported: str | None
    local: str
    span: Span


class ImportDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str | None
    specifiers: tuple[ImportSpecifier, ...] = ()
    span: Span


class CallReference(BaseModel):
    """Identifier used as the callee of a top-level call statement."""

    model_config = ConfigDict(frozen=True)

    callee: str
    span: Span


class ParsedModule(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str
    imports: tuple[ImportDeclaration, ...] = ()
    calls: tuple[CallReference, ...] = ()


class ShakerOptions(BaseModel):
    """Build configuration: a single ``input`` or a ``chunks`` mapping of output name to entry."""

    input: str | None = None
    chunks: dict[str, str] | None = None
    parent: str | Path = Field(default_factory=Path.cwd)

    @model_validator(mode="after")
    def _check_entries(self) -> "ShakerOptions":
        if (self.input is None) == (self.chunks is None):
            raise ValueError("Exactly one of 'input' or 'chunks' must be provided.")
        if self.chunks is not None and not self.chunks:
            raise ValueError("'chunks' must declare at least one entry.")
        return self

    def entries(self) -> list[tuple[str, str]]:
        """Return ``(output name, entry specifier)`` pairs in declaration order."""
        if self.chunks is not None:
            return list(self.chunks.items())
        assert self.input is not None
        return [(self.input, self.input)]
