"""
Hosted backend gateway (PostgREST dialect over HTTP)

Talks to the managed backend-as-a-service REST endpoint:
    GET    /rest/v1/{table}?col=eq.value
    POST   /rest/v1/{table}            Prefer: return=representation
    PATCH  /rest/v1/{table}?col=eq.value
"""
import logging
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter

from wellness.config import REQUEST_TIMEOUT
from wellness.db.gateway import Filters, PersistenceGateway, Row
from wellness.exceptions import QueryError, wrap_external_exception

logger = logging.getLogger(__name__)

_json_values = TypeAdapter(Any)


def _to_json(value: Any) -> Any:
    """Dates, UUIDs and nested dicts to JSON-ready values"""
    return _json_values.dump_python(value, mode="json")


def _format_filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{_to_json(value)}"


class RestGateway(PersistenceGateway):
    """
    Gateway for the hosted REST backend

    Args:
        base_url: Project URL (https://<project>.supabase.co)
        api_key: Project API key
        access_token: Signed-in user's token; row-level security applies to it.
            Falls back to the API key when absent.
        client: Preconfigured httpx client (tests inject a MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
        }

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    @staticmethod
    def _params(filters: Filters) -> dict[str, str]:
        return {column: _format_filter_value(value) for column, value in filters.items()}

    async def _request(self, operation: str, table: str, method: str, decode: bool = True, **kwargs) -> Any:
        """Send one request and return its decoded JSON body (None when decode is off)"""
        headers = {**self._headers, **kwargs.pop("headers", {})}
        try:
            response = await self._client.request(method, self._url(table), headers=headers, **kwargs)
            response.raise_for_status()
            return response.json() if decode else None
        except (httpx.HTTPError, ValueError) as e:
            # ValueError: a 2xx body that is not JSON (proxy or gateway error pages)
            raise wrap_external_exception(e, operation=operation, table=table) from e

    async def get(self, table: str, filters: Filters) -> Optional[Row]:
        params = {**self._params(filters), "select": "*", "limit": "1"}
        rows = await self._request("get", table, "GET", params=params)
        return rows[0] if rows else None

    async def select(self, table: str, filters: Filters) -> List[Row]:
        params = {**self._params(filters), "select": "*"}
        return await self._request("select", table, "GET", params=params)

    async def insert(self, table: str, row: Row) -> Row:
        rows = await self._request(
            "insert", table, "POST",
            json=_to_json(row),
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise QueryError(f"Insert into {table} returned no representation", table=table, operation="insert")
        logger.debug(f"Inserted row into {table}")
        return rows[0]

    async def update(self, table: str, filters: Filters, partial: Row) -> None:
        await self._request(
            "update", table, "PATCH",
            decode=False,
            params=self._params(filters),
            json=_to_json(partial),
            headers={"Prefer": "return=minimal"},
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
