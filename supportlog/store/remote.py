"""Remote record store speaking the PostgREST dialect over HTTP."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from supportlog.core.auth import Session
from supportlog.core.errors import ConnectivityError, StoreError, store_error_from_payload
from supportlog.store.base import RecordStore, Row

logger = logging.getLogger(__name__)


class RestRecordStore(RecordStore):
    """Table access through ``/rest/v1`` with an anon or service key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.http = session or requests.Session()
        self.http.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _request(self, method: str, table: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.http.request(method, self._url(table), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, table, exc)
            raise ConnectivityError("Failed to fetch") from exc

        if response.status_code >= 400:
            raise self._error_from(table, response)
        return response

    def _error_from(self, table: str, response: requests.Response) -> StoreError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        code = body.get("code")
        message = body.get("message") or f"HTTP {response.status_code}"
        logger.warning("Store rejected request on %s: %s (%s)", table, message, code)
        return store_error_from_payload(table, code, message)

    def select(self, table: str, order_by: Optional[str] = None, ascending: bool = True) -> List[Row]:
        params: Dict[str, str] = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        return list(self._request("GET", table, params=params).json() or [])

    def insert(self, table: str, rows: Iterable[Row]) -> List[Row]:
        response = self._request(
            "POST",
            table,
            json=list(rows),
            headers={"Prefer": "return=representation"},
        )
        if not response.content:
            return []
        return list(response.json() or [])

    def update(self, table: str, column: str, value: Any, patch: Row) -> None:
        self._request("PATCH", table, params={column: f"eq.{value}"}, json=patch)

    def delete(self, table: str, column: str, value: Any) -> None:
        self._request("DELETE", table, params={column: f"eq.{value}"})

    def get_session(self) -> Optional[Session]:
        try:
            response = self.http.get(f"{self.base_url}/auth/v1/user", timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Session check failed: %s", exc)
            return None
        if response.status_code != 200:
            return None
        try:
            user = response.json()
        except ValueError:
            return None
        if not isinstance(user, dict) or not user.get("email"):
            return None
        return Session(email=user["email"], user_id=user.get("id"))
