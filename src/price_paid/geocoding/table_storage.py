"""Geocoding store backed by the Azure Table Storage REST API.

Entities are keyed by outward code (PartitionKey) and inward code (RowKey) and
carry ``Lat``/``Long`` double properties.
"""

from __future__ import annotations

from typing import Any, Final
from urllib.parse import quote

import httpx

from price_paid.errors import GeocodeBackendError
from price_paid.logging import get_logger

logger = get_logger(__name__)

TABLE_API_VERSION: Final = "2019-02-02"
ENTITY_NOT_FOUND: Final = "ResourceNotFound"

_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json;odata=nometadata",
    "x-ms-version": TABLE_API_VERSION,
}


def odata_key_literal(value: str) -> str:
    """Quote a key value for use inside an entity address.

    Single quotes are doubled per OData string literal rules, then the result is
    percent-encoded so '/', '#' and '?' cannot break out of the path.
    """
    return quote(value.replace("'", "''"), safe="")


def entity_path(table_name: str, partition_key: str, row_key: str) -> str:
    """Build the path of a single entity, e.g. ``/postcodes(PartitionKey='E8',RowKey='3RH')``."""
    return (
        f"/{table_name}(PartitionKey='{odata_key_literal(partition_key)}',"
        f"RowKey='{odata_key_literal(row_key)}')"
    )


def _error_code(resp: httpx.Response) -> str | None:
    """Pull ``odata.error.code`` out of an error response, if it has one."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("odata.error")
    if not isinstance(error, dict):
        return None
    code = error.get("code")
    return code if isinstance(code, str) else None


class TableStorageGeocodeStore:
    """Point reads against a postcode table in Azure Table Storage."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        account_url: str,
        table_name: str = "postcodes",
        sas_token: str = "",
    ) -> None:
        """Initialize the store.

        Args:
            client: Shared HTTP client, owned by the caller.
            account_url: Table service endpoint, e.g. https://acct.table.core.windows.net.
            table_name: Name of the postcode table.
            sas_token: Optional shared access signature query string.
        """
        self._client = client
        self._account_url = account_url.rstrip("/")
        self._table_name = table_name
        self._sas_token = sas_token.lstrip("?")

    def _entity_url(self, partition_key: str, row_key: str) -> str:
        url = self._account_url + entity_path(self._table_name, partition_key, row_key)
        if self._sas_token:
            url = f"{url}?{self._sas_token}"
        return url

    async def fetch(self, partition_key: str, row_key: str) -> dict[str, Any] | None:
        """Read one entity.

        Returns None when the entity does not exist. Any other failure,
        including a 404 for a missing table, raises GeocodeBackendError.
        """
        try:
            resp = await self._client.get(
                self._entity_url(partition_key, row_key), headers=_HEADERS
            )
        except httpx.HTTPError as e:
            logger.error(
                "table_storage_request_failed",
                partition_key=partition_key,
                row_key=row_key,
                exc_info=True,
            )
            raise GeocodeBackendError(
                f"table lookup failed: {e}",
                timed_out=isinstance(e, httpx.TimeoutException),
            ) from e

        if resp.status_code == 404:
            code = _error_code(resp)
            if code == ENTITY_NOT_FOUND:
                return None
            logger.error(
                "table_storage_unexpected_404",
                partition_key=partition_key,
                row_key=row_key,
                code=code,
            )
            raise GeocodeBackendError(f"table returned {code or 'unknown error'}", status_code=404)
        if resp.status_code != 200:
            logger.error(
                "table_storage_bad_status",
                partition_key=partition_key,
                row_key=row_key,
                status=resp.status_code,
            )
            raise GeocodeBackendError("unexpected response", status_code=resp.status_code)

        try:
            entity = resp.json()
        except ValueError as e:
            raise GeocodeBackendError("table entity is not valid JSON") from e
        if not isinstance(entity, dict):
            raise GeocodeBackendError("table entity is not a JSON object")
        return entity
