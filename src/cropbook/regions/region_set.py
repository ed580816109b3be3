"""Per-page store of committed region annotations."""

from typing import Iterator, List

from .geometry import RectAnnotation


class RegionSet:
    """
    Ordered, append-only collection of annotations for one page.

    ``drain`` hands back every entry and leaves the set empty in a single
    step, so a reader never sees a partially drained set.
    """

    def __init__(self, page_number: int) -> None:
        self._page_number = page_number
        self._entries: List[RectAnnotation] = []

    @property
    def page_number(self) -> int:
        return self._page_number

    def append(self, rect: RectAnnotation) -> None:
        self._entries.append(rect)

    def drain(self) -> List[RectAnnotation]:
        """Return all entries in insertion order and empty the set."""
        drained, self._entries = self._entries, []
        return drained

    def clear(self) -> None:
        self._entries = []

    def snapshot(self) -> List[RectAnnotation]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RectAnnotation]:
        return iter(self.snapshot())

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"RegionSet(page_number={self._page_number}, entries={len(self._entries)})"
