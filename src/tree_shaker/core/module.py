import logging
from collections.abc import Iterable
from pathlib import Path

from tree_shaker.core.ast import parse_module
from tree_shaker.core.edits import EditBuffer
from tree_shaker.core.languages import detect_language_from_path
from tree_shaker.core.locations import ModuleLocation, resolve_location
from tree_shaker.core.ports.loader import ModuleLoader
from tree_shaker.errors import LoadError
from tree_shaker.models import ImportDeclaration, ParsedModule, Span

logger = logging.getLogger(__name__)


class Module:
    """A single ES module: its source, its top-level imports, and edited copies of its code.

    The location is resolved on construction; source loading and parsing happen
    in ``initialize``. Once initialized a module never changes: every edit is
    computed on a fresh buffer over the original source.
    """

    def __init__(self, specifier: str, parent: ModuleLocation | str | Path, loader: ModuleLoader) -> None:
        self.specifier = specifier
        self.location = resolve_location(specifier, parent)
        self._language = detect_language_from_path(self.location.path)
        self._loader = loader
        self._source: bytes | None = None
        self._parsed: ParsedModule | None = None

    def __repr__(self) -> str:
        return f"Module({self.location.key!r})"

    async def initialize(self) -> None:
        raw = await self._loader.load(self.location)
        try:
            text = raw.decode(self._loader.encoding)
        except UnicodeDecodeError as exc:
            raise LoadError(self.location.key, f"source is not valid {self._loader.encoding}") from exc
        # Spans from the parser index into the UTF-8 form of the text.
        source = text.encode("utf-8")
        self._parsed = parse_module(source, self._language, self.location.key)
        self._source = source
        logger.debug("Initialized %s (%d imports)", self.location, len(self._parsed.imports))

    @property
    def initialized(self) -> bool:
        return self._parsed is not None

    @property
    def code(self) -> str:
        return self._require_source().decode("utf-8")

    @property
    def imports(self) -> tuple[ImportDeclaration, ...]:
        return self._require_parsed().imports

    def dependency_specifiers(self) -> list[str]:
        return [declaration.source for declaration in self.imports if isinstance(declaration.source, str)]

    def dependency_locations(self) -> list[ModuleLocation]:
        return [resolve_location(specifier, self.location) for specifier in self.dependency_specifiers()]

    def unused_import_declarations(self) -> list[ImportDeclaration]:
        """Return top-level imports none of whose named bindings is called at top level.

        A binding counts as used only when the exact source text of its
        specifier equals the callee of a top-level call statement, so
        ``import { a } ...; a();`` is used while aliased, default, namespace
        and side-effect imports never are.
        """
        parsed = self._require_parsed()
        used = {self._slice(call.span) for call in parsed.calls}
        unused: list[ImportDeclaration] = []
        for declaration in parsed.imports:
            named = [specifier for specifier in declaration.specifiers if specifier.kind == "named"]
            if not any(self._slice(specifier.span) in used for specifier in named):
                unused.append(declaration)
        return unused

    def edited_source(self, declarations_to_remove: Iterable[ImportDeclaration]) -> str:
        buffer = EditBuffer(self._require_source())
        for declaration in declarations_to_remove:
            buffer.remove(declaration.span.start, declaration.span.end)
        return str(buffer)

    def shaken_source(self) -> str:
        return self.edited_source(self.unused_import_declarations())

    def _slice(self, span: Span) -> str:
        return self._require_source()[span.start : span.end].decode("utf-8")

    def _require_source(self) -> bytes:
        if self._source is None:
            raise RuntimeError(f"Module {self.location} has not been initialized.")
        return self._source

    def _require_parsed(self) -> ParsedModule:
        if self._parsed is None:
            raise RuntimeError(f"Module {self.location} has not been initialized.")
        return self._parsed
