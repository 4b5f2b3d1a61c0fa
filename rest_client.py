"""HTTP client for the hosted PostgREST (Supabase) backend."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """Raised when the backend cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


@dataclass
class SelectResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    total_count: Optional[int] = None


def parse_content_range(value: Optional[str]) -> Optional[int]:
    """
    Extract the total from a Content-Range header.

    PostgREST answers "0-4/23" (or "*/0" for an empty window) when
    `Prefer: count=exact` is sent; "0-4/*" means the total is unknown.
    """
    if not value or "/" not in value:
        return None
    total = value.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return None
    return int(total)


class RestClient:
    """Thin wrapper around the table endpoints under /rest/v1."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 15, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _get_headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Mapping[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> requests.Response:
        url = self._url(table)
        try:
            response = self.session.request(
                method,
                url,
                params=dict(params or {}),
                json=json,
                headers=self._get_headers(prefer),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Backend %s %s failed: %s", method, url, e)
            raise BackendError(f"Backend request failed: {e}") from e

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text[:200]
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.warning("Backend %s %s -> %s :: %s", method, url, response.status_code, payload)
            raise BackendError(
                message or f"Backend answered {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        return response

    @staticmethod
    def _rows(response: requests.Response) -> List[Dict[str, Any]]:
        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            raise BackendError(f"Backend returned invalid JSON: {e}", status_code=response.status_code) from e
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []

    def select(self, table: str, params: Mapping[str, str], count: bool = True) -> SelectResult:
        response = self._request("GET", table, params=params, prefer="count=exact" if count else None)
        return SelectResult(
            rows=self._rows(response),
            total_count=parse_content_range(response.headers.get("Content-Range")),
        )

    def insert(self, table: str, record: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        response = self._request("POST", table, json=[dict(record)], prefer="return=representation")
        rows = self._rows(response)
        return rows[0] if rows else None

    def update(self, table: str, record_id: int, record: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        response = self._request(
            "PATCH",
            table,
            params={"id": f"eq.{int(record_id)}"},
            json=dict(record),
            prefer="return=representation",
        )
        rows = self._rows(response)
        return rows[0] if rows else None

    def delete(self, table: str, record_id: int) -> None:
        self._request("DELETE", table, params={"id": f"eq.{int(record_id)}"})
