# fleetadmin/services/table_client.py
import logging
from typing import Any, Dict, List, Optional

import requests

from fleetadmin.config import settings

logger = logging.getLogger(__name__)

OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"


class BackendError(Exception):
    """Error reported by the remote table backend (or raised while reaching it)."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.hint = hint

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "hint": self.hint,
        }

    @classmethod
    def from_response(cls, response: requests.Response) -> "BackendError":
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            return cls(
                message=response.text or f"Backend request failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return cls(
            message=body.get("message") or f"Backend request failed with HTTP {response.status_code}",
            code=body.get("code"),
            status_code=response.status_code,
            details=body.get("details"),
            hint=body.get("hint"),
        )


class TableClient:
    """
    Thin wrapper over the hosted PostgREST table API.

    Every call maps to one HTTP round-trip against ``{base_url}/rest/v1/{table}``.
    Filters are equality filters only; ``columns`` is passed through verbatim so
    embedded relations such as ``*, truck_owners(owner_name)`` work as-is.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        schema: str = "public",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/rest/v1"
        self.api_key = api_key
        self.schema = schema
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, single: bool = False, write: bool = False) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": OBJECT_MEDIA_TYPE if single else "application/json",
        }
        if write:
            headers["Content-Type"] = "application/json"
            headers["Prefer"] = "return=representation"
            headers["Content-Profile"] = self.schema
        else:
            headers["Accept-Profile"] = self.schema
        return headers

    @staticmethod
    def _filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        params = {}
        for column, value in (filters or {}).items():
            if value is None:
                params[column] = "is.null"
            else:
                params[column] = f"eq.{value}"
        return params

    def _request(
        self,
        method: str,
        table: str,
        params: Dict[str, str],
        json_body: Any = None,
        single: bool = False,
    ) -> Any:
        url = f"{self.base_url}/{table}"
        write = method in ("POST", "PATCH", "DELETE")
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._headers(single=single, write=write),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Backend request {method} {table} failed: {e}")
            raise BackendError(message=str(e)) from e

        if not response.ok:
            error = BackendError.from_response(response)
            logger.debug(f"Backend {method} {table} -> HTTP {response.status_code}: {error.to_dict()}")
            raise error

        if not response.content:
            return None
        return response.json()

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        params = {"select": columns}
        params.update(self._filter_params(filters))
        if order:
            params["order"] = f"{order}.{'desc' if descending else 'asc'}"
        rows = self._request("GET", table, params)
        return rows or []

    def maybe_single(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Returns the only matching row, ``None`` when nothing matches."""
        rows = self.select(table, columns=columns, filters=filters)
        if len(rows) > 1:
            raise BackendError(
                message=f"Expected at most one row from '{table}', got {len(rows)}",
                code="PGRST116",
                status_code=406,
            )
        return rows[0] if rows else None

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", table, {"select": "*"}, json_body=[row], single=True)

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> Dict[str, Any]:
        params = {"select": "*"}
        params.update(self._filter_params(filters))
        return self._request("PATCH", table, params, json_body=values, single=True)

    def delete(self, table: str, filters: Dict[str, Any]) -> None:
        self._request("DELETE", table, self._filter_params(filters))


def build_table_client() -> TableClient:
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("SUPABASE_URL or SUPABASE_KEY is not configured. Backend calls will fail.")
    return TableClient(
        base_url=settings.SUPABASE_URL,
        api_key=settings.SUPABASE_KEY,
        schema=settings.SUPABASE_SCHEMA,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )
