import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from tree_shaker.core.languages import is_supported_path
from tree_shaker.errors import ResolutionError

_RELATIVE_PREFIXES = ("./", "../")


@dataclass(frozen=True)
class ModuleLocation:
    """Canonical module identity.

    Equality and hashing use only ``key``, the normalized absolute POSIX path.
    The ``Path`` view is derived from it on demand.
    """

    key: str

    @property
    def path(self) -> Path:
        return Path(self.key)

    @property
    def directory(self) -> Path:
        return self.path.parent

    def __str__(self) -> str:
        return self.key


def _file_url_to_path(url: str) -> str:
    parsed = urlparse(url)
    return url2pathname(parsed.path)


def base_directory(parent: ModuleLocation | str | Path) -> Path:
    """Return the directory relative specifiers are resolved against.

    A module location resolves against its containing directory. Any other
    parent resolves against itself when it ends with a slash or is an existing
    directory, and against its containing directory otherwise.
    """
    if isinstance(parent, ModuleLocation):
        return parent.directory
    raw = str(parent)
    if raw.startswith("file:"):
        raw = _file_url_to_path(raw)
    candidate = Path(os.path.abspath(raw))
    if raw.endswith(("/", os.sep)) or candidate.is_dir():
        return candidate
    return candidate.parent


def resolve_location(specifier: str, parent: ModuleLocation | str | Path) -> ModuleLocation:
    parent_label = str(parent)
    if not specifier:
        raise ResolutionError(specifier, parent_label, "empty specifier")
    if "\x00" in specifier:
        raise ResolutionError(specifier, parent_label, "specifier contains a null byte")

    if specifier.startswith("file:"):
        target = _file_url_to_path(specifier)
        if not os.path.isabs(target):
            raise ResolutionError(specifier, parent_label, "file URL must be absolute")
    elif specifier.startswith(_RELATIVE_PREFIXES) or specifier in (".", ".."):
        target = os.path.join(base_directory(parent), specifier)
    elif os.path.isabs(specifier):
        target = specifier
    else:
        raise ResolutionError(specifier, parent_label, "bare specifiers are not supported")

    key = Path(os.path.normpath(target)).as_posix()
    location = ModuleLocation(key)
    if not is_supported_path(location.path):
        raise ResolutionError(specifier, parent_label, f"unsupported module extension '{location.path.suffix}'")
    return location
