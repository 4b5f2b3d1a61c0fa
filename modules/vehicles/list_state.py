# modules/vehicles/list_state.py
import json
import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Iterable, Optional

from flask import session

from modules.vehicles.resources import PAGE_SIZE_OPTIONS, SORT_DIRECTIONS

logger = logging.getLogger(__name__)

# changing any of these invalidates the current page position
RESET_PAGE_FIELDS = ("sort_field", "sort_direction", "page_size", "filter_field", "filter_value")


@dataclass(frozen=True)
class ListState:
    sort_field: str = "name"
    sort_direction: str = "asc"
    page: int = 1
    page_size: int = 5
    filter_field: str = "name"
    filter_value: str = ""

    def apply(self, **changes) -> "ListState":
        """
        Return a new state with `changes` applied.

        If any result-set field actually changes value, page goes back to 1
        and any page passed in the same call is ignored.
        """
        page = changes.pop("page", None)
        unknown = set(changes) - set(RESET_PAGE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown list state fields: {', '.join(sorted(unknown))}")

        changed = {k: v for k, v in changes.items() if getattr(self, k) != v}
        if changed:
            return replace(self, page=1, **changed)
        if page is not None:
            return replace(self, page=max(1, int(page)))
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class MemoryStorage:
    """In-process storage, used by tests and as a stand-in when no session exists."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = dict(data or {})

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        return self.data.get(key)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        self.data[key] = value


class SessionStorage:
    """Keeps one JSON blob per list in the signed session cookie."""

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raw = session.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        session[key] = json.dumps(value)


class ListStateStore:
    def __init__(
        self,
        storage,
        key: str,
        sort_fields: Iterable[str],
        filter_fields: Iterable[str],
        defaults: Optional[ListState] = None,
    ):
        self.storage = storage
        self.key = key
        self.sort_fields = tuple(sort_fields)
        self.filter_fields = tuple(filter_fields)
        self.defaults = defaults or ListState()

    @classmethod
    def for_resource(cls, resource, storage=None) -> "ListStateStore":
        return cls(
            storage if storage is not None else SessionStorage(),
            resource.storage_key,
            resource.sort_fields,
            resource.filter_fields,
        )

    def _coerce(self, data: Dict[str, Any]) -> ListState:
        if not isinstance(data, dict):
            raise ValueError("stored list state must be an object")
        state = ListState(
            sort_field=str(data["sort_field"]),
            sort_direction=str(data["sort_direction"]),
            page=int(data["page"]),
            page_size=int(data["page_size"]),
            filter_field=str(data["filter_field"]),
            filter_value=str(data.get("filter_value") or ""),
        )
        if state.sort_field not in self.sort_fields:
            raise ValueError(f"unknown sort field {state.sort_field!r}")
        if state.sort_direction not in SORT_DIRECTIONS:
            raise ValueError(f"unknown sort direction {state.sort_direction!r}")
        if state.filter_field not in self.filter_fields:
            raise ValueError(f"unknown filter field {state.filter_field!r}")
        if state.page < 1 or state.page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError("page/page_size out of range")
        return state

    def load(self) -> ListState:
        try:
            data = self.storage.get(self.key)
            if data is None:
                return self.defaults
            return self._coerce(data)
        except Exception as e:
            logger.warning("Discarding stored list state %s: %s", self.key, e)
            return self.defaults

    def save(self, state: ListState) -> None:
        try:
            self.storage.set(self.key, state.to_dict())
        except Exception as e:
            logger.warning("Could not persist list state %s: %s", self.key, e)

    def clean_changes(self, args) -> Dict[str, Any]:
        """Pick the valid list-state values out of request args; drop the rest."""
        changes: Dict[str, Any] = {}
        if args.get("sort_field") in self.sort_fields:
            changes["sort_field"] = args["sort_field"]
        if args.get("sort_direction") in SORT_DIRECTIONS:
            changes["sort_direction"] = args["sort_direction"]
        if args.get("filter_field") in self.filter_fields:
            changes["filter_field"] = args["filter_field"]
        if "filter_value" in args:
            changes["filter_value"] = str(args.get("filter_value") or "")
        for name in ("page", "page_size"):
            raw = args.get(name)
            if raw is None:
                continue
            try:
                value = int(raw)
            except (TypeError, ValueError):
                continue
            if name == "page_size" and value not in PAGE_SIZE_OPTIONS:
                continue
            changes[name] = value
        return changes

    def update(self, **changes) -> ListState:
        state = self.load().apply(**changes)
        self.save(state)
        return state
