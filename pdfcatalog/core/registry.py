from __future__ import annotations
import itertools
from dataclasses import replace
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from .types import DocumentEntry
from .errors import InvalidInput, NotFound

EntrySpec = Tuple[str, int, Optional[str]]

def _check_page_count(page_count) -> None:
    if isinstance(page_count, bool) or not isinstance(page_count, int) or page_count <= 0:
        raise InvalidInput(f"Page count must be a positive integer: {page_count!r}")

class EntryRegistry:
    """Ordered list of uploaded documents.

    Order decides merge order, catalog order and start pages. Operations on an
    unknown id are no-ops: they come from a stale UI reference, not bad data.
    """

    def __init__(self, id_factory: Optional[Callable[[], int]] = None):
        self._next_id = id_factory or itertools.count(1).__next__
        self._entries: List[DocumentEntry] = []
        self._issued: set[int] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DocumentEntry]:
        return iter(list(self._entries))

    def ids(self) -> List[int]:
        return [e.id for e in self._entries]

    def snapshot(self) -> Tuple[DocumentEntry, ...]:
        return tuple(self._entries)

    def get(self, entry_id: int) -> Optional[DocumentEntry]:
        idx = self._index(entry_id)
        return None if idx is None else self._entries[idx]

    def _index(self, entry_id: int) -> Optional[int]:
        for i, e in enumerate(self._entries):
            if e.id == entry_id:
                return i
        return None

    def _issue_ids(self, n: int) -> List[int]:
        new_ids = [self._next_id() for _ in range(n)]
        for i, new_id in enumerate(new_ids):
            if new_id in self._issued or new_id in new_ids[:i]:
                raise RuntimeError(f"id factory returned a used id: {new_id}")
        self._issued.update(new_ids)
        return new_ids

    def append(self, title: str, page_count: int, source: Optional[str] = None) -> int:
        return self.extend([(title, page_count, source)])[0]

    def extend(self, specs: Iterable[EntrySpec]) -> List[int]:
        """Append several entries at once; nothing is added if any spec is invalid."""
        specs = list(specs)
        for _title, page_count, _source in specs:
            _check_page_count(page_count)
        ids = self._issue_ids(len(specs))
        self._entries.extend(
            DocumentEntry(id=new_id, title=title, page_count=page_count, source=source)
            for new_id, (title, page_count, source) in zip(ids, specs)
        )
        return ids

    def rename(self, entry_id: int, new_title: str, strict: bool = False) -> None:
        idx = self._index(entry_id)
        if idx is None:
            if strict:
                raise NotFound(f"No entry with id {entry_id}")
            return
        self._entries[idx] = replace(self._entries[idx], title=new_title)

    def remove(self, entry_id: int) -> None:
        idx = self._index(entry_id)
        if idx is not None:
            del self._entries[idx]

    def move_up(self, entry_id: int) -> None:
        self._swap_with(entry_id, -1)

    def move_down(self, entry_id: int) -> None:
        self._swap_with(entry_id, +1)

    def _swap_with(self, entry_id: int, delta: int) -> None:
        r = self._index(entry_id)
        if r is None:
            return
        nr = r + delta
        if not (0 <= nr < len(self._entries)):
            return
        self._entries[r], self._entries[nr] = self._entries[nr], self._entries[r]
