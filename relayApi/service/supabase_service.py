import logging
from typing import Any, Dict, Optional

import httpx

from relayApi.service.errors import DatastoreError

logger = logging.getLogger(__name__)


class SupabaseStore:
    """Point-of-sale table behind the Supabase REST (PostgREST) endpoint."""

    def __init__(self, client: httpx.AsyncClient, url: Optional[str], key: Optional[str], table: str = "puntos_venta"):
        self._client = client
        self._url = (url or "").rstrip("/")
        self._key = key
        self.table = table

    @property
    def endpoint(self) -> str:
        return f"{self._url}/rest/v1/{self.table}"

    def _headers(self, prefer: str) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Prefer": prefer,
        }
        if self._key:
            headers["apikey"] = self._key
            headers["Authorization"] = f"Bearer {self._key}"
        return headers

    async def _send(self, method: str, params: Dict[str, str], body: Dict[str, Any], prefer: str) -> None:
        if not self._url:
            raise DatastoreError("SUPABASE_URL is not configured")
        try:
            response = await self._client.request(
                method, self.endpoint, params=params, json=body, headers=self._headers(prefer)
            )
        except httpx.HTTPError as e:
            raise DatastoreError(f"Datastore request failed: {str(e)}") from e

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text or f"HTTP {response.status_code}"
            raise DatastoreError(payload)

    async def update_punto(self, punto_id: str, fields: Dict[str, Any]) -> None:
        """Update the record whose id is ``punto_id``."""
        await self._send("PATCH", {"id": f"eq.{punto_id}"}, fields, "return=minimal")
        logger.info("Updated %s id=%s with %s", self.table, punto_id, sorted(fields))

    async def upsert_punto(self, row: Dict[str, Any]) -> None:
        """Insert ``row`` or merge it into the record with the same ``nombre``."""
        await self._send(
            "POST",
            {"on_conflict": "nombre"},
            row,
            "resolution=merge-duplicates,return=minimal",
        )
