"""Dependency injection: per-request record store and repository."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lounge.core.config import settings
from lounge.db.base import get_db
from lounge.services.customers import CustomerRepository
from lounge.store.records import KeyValueRecordStore, RecordStore


def get_record_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    return KeyValueRecordStore(db, settings.STORAGE_KEY)


def get_repository(store: RecordStore = Depends(get_record_store)) -> CustomerRepository:
    return CustomerRepository(
        store,
        base_url=settings.PUBLIC_BASE_URL,
        membership_number_attempts=settings.MEMBERSHIP_NUMBER_ATTEMPTS,
    )
