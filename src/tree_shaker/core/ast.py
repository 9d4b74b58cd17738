from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path
from typing import cast

from tree_sitter import Node, Query, QueryCursor
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

from tree_shaker.core.languages import normalize_language
from tree_shaker.errors import ModuleSyntaxError
from tree_shaker.models import CallReference, ImportDeclaration, ImportSpecifier, ParsedModule, Span

_SIMPLE_ESCAPES = {
    "0": "\0",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\n": "",
    "\r\n": "",
}


@lru_cache(maxsize=None)
def _load_query(language: str, query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{language}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(cast(SupportedLanguage, language)), query_text)


def _captures(query: Query, root: Node, name: str) -> list[Node]:
    captures = QueryCursor(query).captures(root)
    if isinstance(captures, dict):
        nodes = list(captures.get(name, []))
    else:
        nodes = [node for node, capture_name in captures if capture_name == name]
    return sorted(nodes, key=lambda node: node.start_byte)


def _span(node: Node) -> Span:
    return Span(start=node.start_byte, end=node.end_byte)


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def _unescape(sequence: str) -> str:
    body = sequence[1:]
    if body[:1] in ("x", "u") and len(body) > 1:
        return chr(int(body[1:].strip("{}"), 16))
    return _SIMPLE_ESCAPES.get(body, body)


def _string_value(node: Node, source: bytes) -> str | None:
    if node.type != "string":
        return None
    parts: list[str] = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(_text(child, source))
        elif child.type == "escape_sequence":
            parts.append(_unescape(_text(child, source)))
    return "".join(parts)


def _clause_specifiers(clause: Node, source: bytes) -> Iterator[ImportSpecifier]:
    for child in clause.named_children:
        if child.type == "identifier":
            yield ImportSpecifier(kind="default", imported="default", local=_text(child, source), span=_span(child))
        elif child.type == "namespace_import":
            local = next((c for c in child.named_children if c.type == "identifier"), child)
            yield ImportSpecifier(kind="namespace", imported=None, local=_text(local, source), span=_span(child))
        elif child.type == "named_imports":
            for specifier in child.named_children:
                if specifier.type != "import_specifier":
                    continue
                name = specifier.child_by_field_name("name")
                # String-named bindings (`{ "a-b" as c }`) are not tracked.
                if name is None or name.type != "identifier":
                    continue
                alias = specifier.child_by_field_name("alias")
                imported = _text(name, source)
                yield ImportSpecifier(
                    kind="named",
                    imported=imported,
                    local=_text(alias, source) if alias is not None else imported,
                    span=_span(specifier),
                )


def _import_declaration(node: Node, source: bytes) -> ImportDeclaration:
    source_node = node.child_by_field_name("source")
    specifiers: list[ImportSpecifier] = []
    for child in node.named_children:
        if child.type == "import_clause":
            specifiers.extend(_clause_specifiers(child, source))
    return ImportDeclaration(
        source=_string_value(source_node, source) if source_node is not None else None,
        specifiers=tuple(specifiers),
        span=_span(node),
    )


def _first_error(node: Node) -> Node:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            return _first_error(child)
    return node


def parse_module(source_bytes: bytes, language: str = "javascript", location: str = "<memory>") -> ParsedModule:
    """Parse an ES module and keep only the top-level imports and call statements.

    ``source_bytes`` must be UTF-8; every returned span indexes into it.
    Raises ``ModuleSyntaxError`` when the parser had to recover from errors.
    """
    resolved_language = normalize_language(language)
    parser = get_parser(cast(SupportedLanguage, resolved_language))
    tree = parser.parse(source_bytes)
    root = tree.root_node

    if root.has_error:
        bad = _first_error(root)
        raise ModuleSyntaxError(location, bad.start_point[0], bad.start_point[1])

    imports = _captures(_load_query(resolved_language, "imports"), root, "import.declaration")
    callees = _captures(_load_query(resolved_language, "calls"), root, "call.callee")

    return ParsedModule(
        language=resolved_language,
        imports=tuple(_import_declaration(node, source_bytes) for node in imports),
        calls=tuple(CallReference(callee=_text(node, source_bytes), span=_span(node)) for node in callees),
    )
