# modules/vehicles/query.py
"""
Translate list state (sort, page, filter) into one backend query.

Pure functions only: the same input always yields the same ListQuery.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union


class QueryParameterError(ValueError):
    pass


def escape_like(value: str) -> str:
    """Make `%` and `_` match themselves in a LIKE pattern."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class FilterConstraint:
    field: str
    op: str  # "ilike" | "eq"
    value: Union[str, int]

    def to_param(self) -> str:
        if self.op == "ilike":
            return f"ilike.*{escape_like(str(self.value))}*"
        return f"{self.op}.{self.value}"


@dataclass(frozen=True)
class ListQuery:
    select: str
    field: str
    direction: str
    offset: int
    limit: int
    filter: Optional[FilterConstraint] = None

    @property
    def ascending(self) -> bool:
        return self.direction != "desc"

    def to_params(self) -> Dict[str, str]:
        """PostgREST query string parameters, always in the same order."""
        params = {
            "select": self.select,
            "order": f"{self.field}.{self.direction}",
            "limit": str(self.limit),
            "offset": str(self.offset),
        }
        if self.filter is not None:
            params[self.filter.field] = self.filter.to_param()
        return params


def _get(params: Any, *names: str, default=None):
    # accepts dicts and ListState-like objects
    for name in names:
        if isinstance(params, Mapping):
            value = params.get(name)
        else:
            value = getattr(params, name, None)
        if value is not None:
            return value
    return default


def build_list_query(params: Any, fk_field: Optional[str] = None, select: str = "*") -> ListQuery:
    field = _get(params, "field", "sort_field") or "id"
    direction = _get(params, "direction", "sort_direction") or "asc"
    if direction not in ("asc", "desc"):
        raise QueryParameterError(f"Unknown sort direction: {direction!r}")

    page = int(_get(params, "page", default=1))
    page_size = int(_get(params, "page_size", "pageSize", default=10))
    if page < 1:
        raise QueryParameterError("page must be >= 1")
    if page_size < 1:
        raise QueryParameterError("page_size must be >= 1")

    constraint = None
    filter_field = _get(params, "filter_field", "filterField")
    raw_value = _get(params, "filter_value", "filterValue")
    value = str(raw_value).strip() if raw_value is not None else ""
    if filter_field and value:
        if fk_field and filter_field == fk_field:
            try:
                constraint = FilterConstraint(filter_field, "eq", int(value))
            except ValueError as e:
                raise QueryParameterError(f"{filter_field} filter must be a number, got {value!r}") from e
        else:
            constraint = FilterConstraint(filter_field, "ilike", value)

    return ListQuery(
        select=select,
        field=field,
        direction=direction,
        offset=(page - 1) * page_size,
        limit=page_size,
        filter=constraint,
    )
