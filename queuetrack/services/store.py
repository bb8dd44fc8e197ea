from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import weakref
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from queuetrack.clients.backend import BackendClient
from queuetrack.config import Settings, get_settings
from queuetrack.schemas.appointment import Appointment
from queuetrack.services.exceptions import ServiceError, StoreFailureError
from queuetrack.services.partition import PartitionKey

logger = logging.getLogger(__name__)


class AppointmentStore:
    """Durable mapping of appointment id to record.

    Backends only implement ``load_all`` and ``replace_all``; partition reads
    and writes are derived from them. Every mutating queue operation holds the
    lock returned by ``partition_lock`` for its partition, and the store's own
    write lock keeps concurrent partition writes from overwriting each other.
    """

    def __init__(self) -> None:
        # Locks live only while a caller holds or awaits them.
        self._partition_locks: weakref.WeakValueDictionary[PartitionKey, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._write_lock = asyncio.Lock()

    async def load_all(self) -> List[Appointment]:
        raise NotImplementedError

    async def replace_all(self, records: Iterable[Appointment]) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        return None

    def partition_lock(self, key: PartitionKey) -> asyncio.Lock:
        lock = self._partition_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._partition_locks[key] = lock
        return lock

    async def get(self, appointment_id: str) -> Optional[Appointment]:
        for record in await self.load_all():
            if record.id == appointment_id:
                return record
        return None

    async def load_partition(self, key: PartitionKey) -> List[Appointment]:
        return [record for record in await self.load_all() if PartitionKey.of(record) == key]

    async def save_partition(self, key: PartitionKey, records: Iterable[Appointment]) -> None:
        """Upsert ``records`` (all belonging to ``key``) in a single store write."""
        incoming = list(records)
        for record in incoming:
            if PartitionKey.of(record) != key:
                raise ValueError(
                    f"Appointment {record.id} does not belong to partition {key}"
                )

        async with self._write_lock:
            merged: Dict[str, Appointment] = {
                record.id: record for record in await self.load_all()
            }
            for record in incoming:
                merged[record.id] = record
            await self.replace_all(merged.values())


class InMemoryAppointmentStore(AppointmentStore):
    def __init__(self, records: Iterable[Appointment] | None = None) -> None:
        super().__init__()
        self._records: Dict[str, Appointment] = {
            record.id: record.model_copy() for record in records or []
        }

    async def load_all(self) -> List[Appointment]:
        return [record.model_copy() for record in self._records.values()]

    async def replace_all(self, records: Iterable[Appointment]) -> None:
        self._records = {record.id: record.model_copy() for record in records}


class JsonFileAppointmentStore(AppointmentStore):
    """Keeps every appointment in one JSON document so the queue survives restarts."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__()
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> List[dict]:
        if not self._path.exists():
            return []
        return json.loads(self._path.read_text(encoding="utf-8"))

    def _write(self, payload: List[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            json.dump(payload, handle, indent=2)
            temp_name = handle.name
        os.replace(temp_name, self._path)

    async def load_all(self) -> List[Appointment]:
        try:
            raw = await asyncio.to_thread(self._read)
            return [Appointment.model_validate(item) for item in raw]
        except (OSError, ValueError) as exc:
            logger.exception("Unable to read appointment store %s", self._path)
            raise StoreFailureError(
                f"Failed to load appointments from {self._path}", cause=exc
            ) from exc

    async def replace_all(self, records: Iterable[Appointment]) -> None:
        payload = [record.model_dump() for record in records]
        try:
            await asyncio.to_thread(self._write, payload)
        except OSError as exc:
            logger.exception("Unable to write appointment store %s", self._path)
            raise StoreFailureError(
                f"Failed to save appointments to {self._path}", cause=exc
            ) from exc


class RemoteAppointmentStore(AppointmentStore):
    """Appointment records held by a remote HTTP backend."""

    def __init__(self, client: BackendClient) -> None:
        super().__init__()
        self._client = client

    async def load_all(self) -> List[Appointment]:
        try:
            data = await self._client.get("/appointments")
        except ServiceError as exc:
            raise StoreFailureError("Failed to load appointments", cause=exc) from exc

        items = data.get("appointments", []) if isinstance(data, dict) else data
        try:
            return [Appointment.model_validate(item) for item in items or []]
        except ValueError as exc:
            logger.exception("Record backend returned malformed appointments")
            raise StoreFailureError("Malformed appointment records", cause=exc) from exc

    async def replace_all(self, records: Iterable[Appointment]) -> None:
        payload = {"appointments": [record.model_dump() for record in records]}
        try:
            await self._client.put("/appointments", payload)
        except ServiceError as exc:
            raise StoreFailureError("Failed to save appointments", cause=exc) from exc

    async def close(self) -> None:
        await self._client.close()


def build_store(settings: Settings) -> AppointmentStore:
    if settings.store_backend == "file":
        logger.info("Using JSON file appointment store at %s", settings.store_path)
        return JsonFileAppointmentStore(settings.store_path)
    if settings.store_backend == "remote":
        if not settings.backend_base_url:
            raise ValueError("QUEUETRACK_BACKEND_BASE_URL is required for the remote store")
        logger.info("Using remote appointment store at %s", settings.backend_base_url)
        client = BackendClient(
            str(settings.backend_base_url),
            timeout=settings.backend_timeout,
            token=settings.backend_token,
        )
        return RemoteAppointmentStore(client)
    return InMemoryAppointmentStore()


_store: Optional[AppointmentStore] = None


def get_store() -> AppointmentStore:
    global _store
    if _store is None:
        _store = build_store(get_settings())
    return _store


def reset_store() -> None:
    global _store
    _store = None
