# core/catalog.py
import locale
from typing import Dict, Generic, Iterable, Iterator, List, Mapping, Optional, Tuple, TypeVar, Union

from .models import CatalogEntry
from .search import SEARCH_LIMIT, search

T = TypeVar("T")

EntryId = Union[int, str]


def sort_entries(entries: Iterable[CatalogEntry]) -> List[CatalogEntry]:
    """Alphabetical by display name using the active locale's collation."""
    return sorted(
        entries,
        key=lambda e: (locale.strxfrm(e.display_name.casefold()), e.display_name, e.entry_id),
    )


class CatalogIndex:
    """
    Holds the current catalog snapshot. Replaced wholesale on every
    successful load; entries are never mutated in place.
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: Tuple[CatalogEntry, ...] = ()
        self._by_id: Dict[int, CatalogEntry] = {}
        self.replace(entries)

    def replace(self, entries: Iterable[CatalogEntry]) -> None:
        snapshot = tuple(entries)
        self._entries = snapshot
        self._by_id = {e.entry_id: e for e in snapshot}

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries

    def get(self, entry_id: EntryId) -> Optional[CatalogEntry]:
        try:
            return self._by_id.get(int(entry_id))
        except (TypeError, ValueError):
            return None

    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[CatalogEntry]:
        return search(query, self._entries, limit=limit)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)


class KeyedTable(Generic[T]):
    """
    Side table keyed by catalog id (prices, attributes). A missing id is a
    valid state meaning "no data", so get() returns None rather than raising.
    """

    def __init__(self, rows: Optional[Mapping[int, T]] = None):
        self._rows: Dict[int, T] = dict(rows or {})

    def replace(self, rows: Mapping[int, T]) -> None:
        self._rows = dict(rows)

    def get(self, entry_id: EntryId) -> Optional[T]:
        try:
            return self._rows.get(int(entry_id))
        except (TypeError, ValueError):
            return None

    def __contains__(self, entry_id: object) -> bool:
        return self.get(entry_id) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._rows)
