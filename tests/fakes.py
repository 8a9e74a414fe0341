from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import requests

from core.exceptions import StoreError


class FakeStore:
    """
    In-memory stand-in for the store gateway.

    - Assigns increasing integer ids like a serial primary key
    - Records every call for assertions
    - ``fail_on`` makes the named operations raise StoreError
    """

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        self.rows: Dict[int, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.fail_on: set[str] = set()
        self._next_id = 1
        for r in rows or []:
            self._store(dict(r))

    def _store(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if row.get("id") is None:
            row["id"] = self._next_id
        self._next_id = max(self._next_id, int(row["id"])) + 1
        self.rows[row["id"]] = row
        return row

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise StoreError(f"{op} failed: 500 boom", status=500)

    def fetch_all(self, order: Optional[str] = None) -> List[Dict[str, Any]]:
        self.calls.append(("fetch_all",))
        self._maybe_fail("fetch_all")
        return [copy.deepcopy(r) for r in self.rows.values()]

    def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("insert", fields))
        self._maybe_fail("insert")
        return copy.deepcopy(self._store(dict(fields)))

    def update(self, task_id: Any, fields: Dict[str, Any]) -> None:
        self.calls.append(("update", task_id, fields))
        self._maybe_fail("update")
        if task_id in self.rows:
            self.rows[task_id].update(fields)

    def delete(self, task_id: Any) -> None:
        self.calls.append(("delete", task_id))
        self._maybe_fail("delete")
        self.rows.pop(task_id, None)

    def close(self) -> None:
        self.calls.append(("close",))


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = b"" if payload is None else b"x"

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        return self._payload


class HtmlResponse(FakeResponse):
    """A 2xx answer whose body is not JSON, e.g. a proxy error page."""

    def __init__(self, status_code: int = 200, text: str = "<html>Bad gateway</html>") -> None:
        super().__init__(status_code, None, text=text)
        self.content = text.encode("utf-8")

    def json(self) -> Any:
        raise requests.exceptions.JSONDecodeError("Expecting value", self.text, 0)


class FakeSession:
    """Captures requests made through a requests.Session-like object."""

    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.headers: Dict[str, str] = {}
        self.requests: List[Dict[str, Any]] = []
        self.responses = list(responses or [])
        self.closed = False

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        resp = self.responses.pop(0) if self.responses else FakeResponse(200, [])
        if isinstance(resp, Exception):
            raise resp
        return resp

    def close(self) -> None:
        self.closed = True
