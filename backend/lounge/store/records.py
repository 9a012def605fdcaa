"""Record store: whole-collection persistence of customers under one key.

The collection is a JSON array of camelCase customer objects. Every save
rewrites the entire array; there is no incremental update.
"""

import logging

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from lounge.core.exceptions import StorageUnavailableError, StoreConflictError
from lounge.models.kv import KeyValueEntry
from lounge.schemas.customer import Customer

logger = logging.getLogger(__name__)

_collection = TypeAdapter(list[Customer])


def decode_collection(raw: str | None) -> list[Customer]:
    """Parse a stored payload. Raises StorageUnavailableError if it is unusable."""
    if raw is None or not raw.strip():
        return []
    try:
        return _collection.validate_json(raw)
    except ValidationError as exc:
        raise StorageUnavailableError(f"Stored collection is corrupt: {exc.error_count()} errors") from exc


def encode_collection(customers: list[Customer]) -> str:
    return _collection.dump_json(customers, by_alias=True).decode("utf-8")


class RecordStore:
    """Base class: subclasses provide raw read/write of the payload."""

    def __init__(self, key: str):
        self.key = key

    async def _read(self) -> str | None:
        raise NotImplementedError

    async def _write(self, payload: str) -> None:
        raise NotImplementedError

    async def load(self) -> list[Customer]:
        """Return the stored collection; an absent or corrupt payload loads as empty.

        Errors from the backend itself propagate.
        """
        try:
            return decode_collection(await self._read())
        except StorageUnavailableError as exc:
            logger.warning(f"Record store '{self.key}' unavailable, using empty collection: {exc}")
            return []

    async def save(self, customers: list[Customer]) -> None:
        await self._write(encode_collection(customers))


class InMemoryRecordStore(RecordStore):
    """Dict-backed store holding raw JSON strings, like browser local storage."""

    def __init__(self, key: str = "airport_lounge_customers", data: dict[str, str] | None = None):
        super().__init__(key)
        self.data: dict[str, str] = data if data is not None else {}

    async def _read(self) -> str | None:
        return self.data.get(self.key)

    async def _write(self, payload: str) -> None:
        self.data[self.key] = payload


class KeyValueRecordStore(RecordStore):
    """Store backed by one row of the ``kv_store`` table.

    The row is versioned: if another session saved the key after this store
    loaded it, ``save`` raises StoreConflictError instead of overwriting.
    """

    def __init__(self, session: AsyncSession, key: str):
        super().__init__(key)
        self.session = session
        self._entry: KeyValueEntry | None = None
        self._fetched = False

    async def _fetch(self) -> KeyValueEntry | None:
        result = await self.session.execute(
            select(KeyValueEntry).where(KeyValueEntry.key == self.key)
        )
        self._entry = result.scalar_one_or_none()
        self._fetched = True
        return self._entry

    async def _read(self) -> str | None:
        entry = await self._fetch()
        return entry.value if entry else None

    async def _write(self, payload: str) -> None:
        entry = self._entry if self._fetched else await self._fetch()
        if entry is None:
            entry = KeyValueEntry(key=self.key, value=payload)
            self.session.add(entry)
        else:
            entry.value = payload

        try:
            await self.session.flush()
        except (StaleDataError, IntegrityError) as exc:
            logger.warning(f"Concurrent write detected on '{self.key}'")
            raise StoreConflictError(self.key) from exc
        self._entry = entry
