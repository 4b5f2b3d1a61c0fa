# modules/vehicles/services.py
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from extensions import get_cache, get_client
from modules.vehicles.normalizer import normalize_model_rows
from modules.vehicles.query import build_list_query
from modules.vehicles.resources import MAKES
from rest_client import SelectResult


class ListCache:
    """
    Memoizes select results by (table, query params) for one request.

    Each entry carries tags (entity types); a mutation drops every entry
    tagged with the entity it touched. At most `max_entries` results are
    kept, oldest dropped first.
    """

    def __init__(self, max_entries: int = 64):
        self.max_entries = max_entries
        self._entries: "OrderedDict[Tuple, Tuple[SelectResult, Tuple[str, ...]]]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def _key(table: str, params: Dict[str, str]) -> Tuple:
        return (table, tuple(sorted(params.items())))

    def get(self, table: str, params: Dict[str, str]) -> Optional[SelectResult]:
        with self._lock:
            entry = self._entries.get(self._key(table, params))
            return entry[0] if entry else None

    def put(self, table: str, params: Dict[str, str], result: SelectResult, tags: Iterable[str]) -> None:
        key = self._key(table, params)
        with self._lock:
            self._entries[key] = (result, tuple(tags))
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, *tags: str) -> int:
        with self._lock:
            doomed = [k for k, (_, entry_tags) in self._entries.items() if set(entry_tags) & set(tags)]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


@dataclass
class ListPage:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    page: int = 1
    page_size: int = 5
    total_count: Optional[int] = None

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        # a short page means there is nothing after it
        return len(self.rows) == self.page_size

    @property
    def page_count(self) -> Optional[int]:
        if not self.total_count:
            return None
        return -(-self.total_count // self.page_size)


def _select(resource, params: Dict[str, str]) -> SelectResult:
    cache = get_cache()
    table = resource.table
    cached = cache.get(table, params)
    if cached is not None:
        return cached
    result = get_client().select(table, params)
    if resource.join_key:
        result = SelectResult(
            rows=normalize_model_rows(result.rows, resource.join_key),
            total_count=result.total_count,
        )
    cache.put(table, params, result, resource.cache_tags)
    return result


def fetch_page(resource, state) -> ListPage:
    """Fetch one page of `resource` for the given ListState."""
    query = build_list_query(state, fk_field=resource.fk_field, select=resource.select)
    result = _select(resource, query.to_params())
    return ListPage(
        rows=result.rows,
        page=state.page,
        page_size=state.page_size,
        total_count=result.total_count,
    )


def fetch_all_makes() -> List[Dict[str, Any]]:
    """All makes ordered by name, for manufacturer select boxes."""
    params = {"select": "id,name", "order": "name.asc"}
    return _select(MAKES, params).rows


def get_record(resource, record_id: int) -> Optional[Dict[str, Any]]:
    params = {"select": resource.select, "id": f"eq.{int(record_id)}", "limit": "1"}
    rows = _select(resource, params).rows
    return rows[0] if rows else None


def make_name(row: Dict[str, Any], join_key: str = "VehicleMake") -> str:
    make = row.get(join_key)
    return (make or {}).get("name") or "Unknown"
