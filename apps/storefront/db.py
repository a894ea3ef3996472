"""
Remote data store client (PostgREST).

Thin select/insert wrapper over the hosted database's REST surface. Filters
are passed through verbatim in PostgREST syntax, e.g.
``{"customer_id": "eq.42"}`` and ``order="created_at.desc"``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from apps.storefront.config import settings

log = logging.getLogger("storefront.db")


class StoreError(Exception):
    def __init__(self, message: str, *, table: str, status_code: Optional[int] = None, body: str = ""):
        self.message = message
        self.table = table
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class RestStore:
    TIMEOUT_SECONDS = 30

    def __init__(
        self,
        base_url: str,
        *,
        schema: str = "public",
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if not base_url:
            raise ValueError("RestStore requires base_url")
        self.base_url = base_url.rstrip("/")
        self.schema = schema or "public"
        self.api_key = api_key or None
        self.timeout = timeout or self.TIMEOUT_SECONDS

    def _headers(self, *, write: bool = False) -> Dict[str, str]:
        h = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Accept-Profile": self.schema,
        }
        if write:
            h["Content-Profile"] = self.schema
            h["Prefer"] = "return=representation"
        if self.api_key:
            h["apikey"] = self.api_key
            h["Authorization"] = f"Bearer {self.api_key}"
        return h

    def _url(self, table: str) -> str:
        return f"{self.base_url}/{table}"

    def _request(self, method: str, table: str, **kwargs: Any) -> Any:
        try:
            r = requests.request(method, self._url(table), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log.warning("store %s %s failed: %s", method, table, e)
            raise StoreError(f"Store request failed ({table}): {e}", table=table) from e

        if r.status_code not in (200, 201):
            log.warning("store %s %s returned %s", method, table, r.status_code)
            raise StoreError(
                f"Store {method.lower()} failed ({table}): {r.status_code} {r.text}",
                table=table,
                status_code=r.status_code,
                body=r.text,
            )
        if not r.content:
            return None
        return r.json()

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, str]] = None,
        order: Optional[str] = None,
        columns: str = "*",
    ) -> List[Dict[str, Any]]:
        params: Dict[str, str] = {"select": columns}
        for k, v in (filters or {}).items():
            params[k] = v
        if order:
            params["order"] = order

        data = self._request("GET", table, headers=self._headers(), params=params)
        return data or []

    def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        data = self._request("POST", table, headers=self._headers(write=True), json=record)
        if not data:
            return record
        if isinstance(data, list):
            return data[0]
        return data


def get_store() -> Optional[RestStore]:
    if not settings.DATABASE_URL:
        return None
    return RestStore(
        settings.DATABASE_URL,
        schema=settings.DATABASE_SCHEMA,
        api_key=settings.DATABASE_API_KEY,
    )
