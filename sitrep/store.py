"""
Record storage for reports and magazine articles.

The registry only needs create / read / update / delete by id and a listing
ordered by creation time. `SupabaseRecordStore` talks to the Supabase REST
API with httpx; `InMemoryRecordStore` backs tests and local runs without
Supabase.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from .exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

# HTTP client timeout (seconds)
REQUEST_TIMEOUT = 30


class RecordStore(ABC, Generic[RecordT]):
    """Keyed store of one record type."""

    @abstractmethod
    async def create(self, record: RecordT) -> RecordT: ...

    @abstractmethod
    async def get(self, record_id: str) -> RecordT: ...

    @abstractmethod
    async def update(self, record_id: str, changes: Dict[str, Any]) -> RecordT: ...

    @abstractmethod
    async def delete(self, record_id: str) -> None: ...

    @abstractmethod
    async def list_by_creation(self) -> List[RecordT]:
        """All records, oldest first."""


# =============================================================================
# IN-MEMORY
# =============================================================================

class InMemoryRecordStore(RecordStore[RecordT]):

    def __init__(self, model: Type[RecordT]):
        self._model = model
        self._records: Dict[str, RecordT] = {}

    async def create(self, record: RecordT) -> RecordT:
        self._records[record.id] = record
        return record

    async def get(self, record_id: str) -> RecordT:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFoundError(f"Record {record_id} not found", record_id=record_id) from None

    async def update(self, record_id: str, changes: Dict[str, Any]) -> RecordT:
        current = await self.get(record_id)
        updated = self._model.model_validate({**current.model_dump(), **changes})
        self._records[record_id] = updated
        return updated

    async def delete(self, record_id: str) -> None:
        await self.get(record_id)
        del self._records[record_id]

    async def list_by_creation(self) -> List[RecordT]:
        return sorted(self._records.values(), key=lambda r: r.created_at)


# =============================================================================
# SUPABASE
# =============================================================================

class SupabaseRecordStore(RecordStore[RecordT]):
    """Records in a Supabase table, accessed through PostgREST."""

    def __init__(
        self,
        url: str,
        service_key: str,
        table: str,
        model: Type[RecordT],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = url.rstrip("/")
        self._service_key = service_key
        self._table = table
        self._model = model
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=REQUEST_TIMEOUT,
            transport=self._transport,
            headers={
                "apikey": self._service_key,
                "Authorization": f"Bearer {self._service_key}",
                "Content-Type": "application/json",
            },
        )

    @property
    def _path(self) -> str:
        return f"/rest/v1/{self._table}"

    def _one(self, rows: List[Dict[str, Any]], record_id: str) -> RecordT:
        if not rows:
            raise RecordNotFoundError(f"Record {record_id} not found", record_id=record_id)
        return self._model.model_validate(rows[0])

    async def _send(self, method: str, **kwargs) -> List[Dict[str, Any]]:
        async with self._client() as client:
            response = await client.request(method, self._path, **kwargs)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            logger.error(
                f"Supabase {method} {self._table} failed: "
                f"{response.status_code} - {response.text[:200]}"
            )
            raise
        if not response.content:
            return []
        return response.json()

    async def create(self, record: RecordT) -> RecordT:
        rows = await self._send(
            "POST",
            json=record.model_dump(mode="json"),
            headers={"Prefer": "return=representation"},
        )
        logger.info(f"Created {self._table} record {record.id}")
        return self._one(rows, record.id) if rows else record

    async def get(self, record_id: str) -> RecordT:
        rows = await self._send("GET", params={"id": f"eq.{record_id}", "select": "*"})
        return self._one(rows, record_id)

    async def update(self, record_id: str, changes: Dict[str, Any]) -> RecordT:
        payload = self._model.model_validate(
            {**(await self.get(record_id)).model_dump(), **changes}
        ).model_dump(mode="json", include=set(changes))
        rows = await self._send(
            "PATCH",
            params={"id": f"eq.{record_id}"},
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        logger.info(f"Updated {self._table} record {record_id}")
        return self._one(rows, record_id)

    async def delete(self, record_id: str) -> None:
        rows = await self._send(
            "DELETE",
            params={"id": f"eq.{record_id}"},
            headers={"Prefer": "return=representation"},
        )
        self._one(rows, record_id)
        logger.info(f"Deleted {self._table} record {record_id}")

    async def list_by_creation(self) -> List[RecordT]:
        rows = await self._send("GET", params={"select": "*", "order": "created_at.asc"})
        return [self._model.model_validate(row) for row in rows]
