# modules/vehicles/normalizer.py
from typing import Any, Dict, Iterable, List, Optional


def normalize_join(value: Any) -> Optional[Dict[str, Any]]:
    """
    Embedded one-to-one rows arrive as a list (0 or 1 items) or as an object/null,
    depending on the backend version. Always hand back a dict or None.
    """
    if isinstance(value, (list, tuple)):
        first = value[0] if value else None
        return first if isinstance(first, dict) else None
    if isinstance(value, dict):
        return value
    return None


def normalize_model_row(row: Dict[str, Any], join_key: str = "VehicleMake") -> Dict[str, Any]:
    normalized = dict(row)
    normalized[join_key] = normalize_join(row.get(join_key))
    return normalized


def normalize_model_rows(rows: Optional[Iterable[Dict[str, Any]]], join_key: str = "VehicleMake") -> List[Dict[str, Any]]:
    return [normalize_model_row(r, join_key) for r in (rows or [])]
