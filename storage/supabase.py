from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import requests

from core.exceptions import StoreError

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Plain CRUD over one PostgREST table. No filtering, paging or retries."""
    def __init__(self, base_url: str, api_key: str, table: str = "tasks",
                 timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key or ""
        self.table = table
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        if self.api_key:
            self.session.headers.update({
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
            })

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    # ---------- plumbing ----------
    def _request(self, method: str, *, params=None, json=None, headers=None) -> requests.Response:
        if not self.base_url or not self.api_key:
            raise StoreError("Store is not configured (missing URL or access key)")
        logger.debug("%s %s params=%s", method, self.table_url, params)
        try:
            r = self.session.request(method, self.table_url, params=params, json=json,
                                     headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise StoreError(f"{method} {self.table} failed: {e}") from e
        if not r.ok:
            raise StoreError(f"{method} {self.table} failed: {r.status_code} {r.text}", status=r.status_code)
        return r

    def _json(self, r: requests.Response, method: str) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise StoreError(f"{method} {self.table} returned invalid JSON: {e}", status=r.status_code) from e

    # ---------- tasks ----------
    def fetch_all(self, order: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"select": "*"}
        if order:
            params["order"] = f"{order}.asc"
        r = self._request("GET", params=params)
        data = self._json(r, "GET")
        if not isinstance(data, list):
            raise StoreError(f"Unexpected payload from {self.table}: {type(data).__name__}")
        return data

    def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        r = self._request("POST", json=[fields], headers={"Prefer": "return=representation"})
        rows = self._json(r, "POST") if r.content else []
        if not isinstance(rows, list) or not rows:
            raise StoreError(f"Insert into {self.table} returned no row")
        return rows[0]

    def update(self, task_id: Any, fields: Dict[str, Any]) -> None:
        self._request("PATCH", params={"id": f"eq.{task_id}"}, json=fields)

    def delete(self, task_id: Any) -> None:
        self._request("DELETE", params={"id": f"eq.{task_id}"})

    def close(self) -> None:
        self.session.close()


def make_client(settings) -> SupabaseClient:
    """The one place the gateway is built; owned by app startup/shutdown."""
    if not settings.store_configured:
        logger.warning("Store URL or key missing; every store call will fail until both are set")
    return SupabaseClient(
        settings.supabase_url,
        settings.supabase_key,
        table=settings.table,
        timeout=settings.http_timeout,
    )
