"""Unit tests for module location resolution."""

from pathlib import Path

import pytest

from tree_shaker.core.locations import ModuleLocation, base_directory, resolve_location
from tree_shaker.errors import ResolutionError


class TestResolveLocation:
    def test_relative_to_directory_with_trailing_slash(self) -> None:
        assert resolve_location("./a.js", "/project/").key == "/project/a.js"

    def test_relative_to_module_location(self) -> None:
        parent = ModuleLocation("/project/src/index.js")
        assert resolve_location("../lib/a.js", parent).key == "/project/lib/a.js"

    def test_relative_to_file_path_uses_containing_directory(self) -> None:
        assert resolve_location("./a.js", "/project/main.js").key == "/project/a.js"

    def test_relative_to_existing_directory(self, tmp_path: Path) -> None:
        location = resolve_location("./a.js", tmp_path)
        assert location.path == tmp_path / "a.js"

    def test_dot_segments_are_collapsed(self) -> None:
        assert resolve_location("./lib/../a.js", "/project/").key == "/project/a.js"

    def test_absolute_path(self) -> None:
        assert resolve_location("/other/a.mjs", "/project/").key == "/other/a.mjs"

    def test_file_url(self) -> None:
        assert resolve_location("file:///other/a%20b.js", "/project/").key == "/other/a b.js"

    def test_file_url_parent(self) -> None:
        assert resolve_location("./a.js", "file:///project/main.js").key == "/project/a.js"

    def test_missing_extension_is_accepted(self) -> None:
        assert resolve_location("./a", "/project/").key == "/project/a"

    @pytest.mark.parametrize(
        "specifier",
        ["", "lodash", "@scope/pkg", "./data.json", "./a\x00.js"],
        ids=["empty", "bare", "scoped-bare", "json", "null-byte"],
    )
    def test_unresolvable_specifiers(self, specifier: str) -> None:
        with pytest.raises(ResolutionError) as excinfo:
            resolve_location(specifier, "/project/")
        assert excinfo.value.specifier == specifier


class TestModuleLocation:
    def test_equality_uses_canonical_key(self) -> None:
        first = resolve_location("./a.js", "/project/")
        second = resolve_location("./nested/../a.js", "/project/")
        assert first == second
        assert first is not second
        assert {first: 1}[second] == 1

    def test_path_views(self) -> None:
        location = ModuleLocation("/project/src/a.js")
        assert location.path == Path("/project/src/a.js")
        assert location.directory == Path("/project/src")
        assert str(location) == "/project/src/a.js"


def test_base_directory_of_module_location() -> None:
    assert base_directory(ModuleLocation("/project/a.js")) == Path("/project")
