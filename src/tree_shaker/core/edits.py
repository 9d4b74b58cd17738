from __future__ import annotations


class EditBuffer:
    """Removal-only edit buffer over an immutable original source.

    Every removal is recorded as a byte range against the original, so ranges
    can be added in any order (and may overlap) without shifting each other.
    The edited text is only materialized on serialization.
    """

    def __init__(self, original: bytes | str, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._original = original.encode(encoding) if isinstance(original, str) else original
        self._removed: list[tuple[int, int]] = []

    @property
    def original(self) -> bytes:
        return self._original

    def remove(self, start: int, end: int) -> EditBuffer:
        if not 0 <= start <= end <= len(self._original):
            raise ValueError(f"Range [{start}, {end}) is outside of source of length {len(self._original)}")
        if start < end:
            self._removed.append((start, end))
        return self

    def removed_ranges(self) -> list[tuple[int, int]]:
        """Return the removals sorted and merged into disjoint ranges."""
        merged: list[tuple[int, int]] = []
        for start, end in sorted(self._removed):
            if merged and start <= merged[-1][1]:
                merged[-1] = (merged[-1][0], max(merged[-1][1], end))
            else:
                merged.append((start, end))
        return merged

    def has_changed(self) -> bool:
        return bool(self._removed)

    def to_bytes(self) -> bytes:
        pieces: list[bytes] = []
        cursor = 0
        for start, end in self.removed_ranges():
            pieces.append(self._original[cursor:start])
            cursor = end
        pieces.append(self._original[cursor:])
        return b"".join(pieces)

    def __str__(self) -> str:
        return self.to_bytes().decode(self._encoding)
