"""Customer repository: CRUD and queries over the record store.

Every operation loads the whole collection, works on it, and (for writes)
saves it back. Nothing is cached between calls.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

from lounge.core.config import settings
from lounge.core.exceptions import CustomerNotFoundError
from lounge.schemas.customer import (
    Customer,
    CustomerCreate,
    CustomerPage,
    CustomerUpdate,
)
from lounge.services.identifiers import new_identifier, unique_membership_number
from lounge.store.records import RecordStore

logger = logging.getLogger(__name__)

CUSTOMER_NOT_FOUND = "customer_not_found"
VERIFY_PATH = f"{settings.API_V1_PREFIX}/verify"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def verification_url(base_url: str, **params: str) -> str:
    """Build ``<base><VERIFY_PATH>?...``; an empty base gives a relative link."""
    return f"{base_url.rstrip('/')}{VERIFY_PATH}?{urlencode(params)}"


def matches_search(customer: Customer, term: str) -> bool:
    needle = term.lower()
    return (
        needle in customer.full_name.lower()
        or needle in customer.email.lower()
        or needle in customer.membership_number.lower()
    )


class CustomerRepository:
    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = utcnow,
        base_url: str = "",
        membership_number_attempts: int = 50,
    ):
        self.store = store
        self.clock = clock
        self.base_url = base_url
        self.membership_number_attempts = membership_number_attempts

    # ── Reads ──────────────────────────────────────

    async def list(self, sort: bool = True) -> list[Customer]:
        """All customers, newest first unless ``sort`` is False."""
        customers = await self.store.load()
        if sort:
            customers.sort(key=lambda c: c.created_at, reverse=True)
        return customers

    async def get_by_id(self, customer_id: str) -> Customer | None:
        for customer in await self.store.load():
            if customer.id == customer_id:
                return customer
        return None

    async def get_by_membership_number(self, membership_number: str) -> Customer | None:
        for customer in await self.store.load():
            if customer.membership_number == membership_number:
                return customer
        return None

    async def paginate(self, page: int, page_size: int, search: str = "") -> CustomerPage:
        """One page of the sorted, search-filtered collection.

        ``page`` is clamped into ``[1, total_pages]`` (1 when nothing matches);
        the returned page carries the effective page number.
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        customers = await self.list()
        if search:
            customers = [c for c in customers if matches_search(c, search)]

        total_items = len(customers)
        total_pages = math.ceil(total_items / page_size)
        if page < 1:
            page = 1
        elif total_pages > 0 and page > total_pages:
            page = total_pages

        start = (page - 1) * page_size
        return CustomerPage(
            items=customers[start:start + page_size],
            total_items=total_items,
            total_pages=total_pages,
            page=page,
            page_size=page_size,
        )

    # ── Writes ─────────────────────────────────────

    async def create(self, data: CustomerCreate | Mapping[str, Any]) -> Customer:
        """Validate form data and append a new customer.

        Raises pydantic's ValidationError before anything is persisted.
        """
        form = data if isinstance(data, CustomerCreate) else CustomerCreate.model_validate(data)
        customers = await self.store.load()

        taken = {c.membership_number for c in customers}
        customer = Customer(
            id=new_identifier(),
            membership_number=unique_membership_number(
                form.membership_type, taken, self.membership_number_attempts
            ),
            created_at=self.clock(),
            **form.model_dump(),
        )

        customers.append(customer)
        await self.store.save(customers)
        logger.info(f"Customer created: {customer.id} ({customer.membership_number})")
        return customer

    async def update(
        self, customer_id: str, data: CustomerUpdate | CustomerCreate | Mapping[str, Any]
    ) -> Customer:
        """Merge the supplied fields onto an existing customer.

        A full CustomerCreate form replaces every editable field, defaults
        included. Identifier, membership number and creation time never change.
        """
        if isinstance(data, CustomerCreate):
            changes = data.model_dump()
        elif isinstance(data, CustomerUpdate):
            changes = data.model_dump(exclude_unset=True)
        else:
            changes = CustomerUpdate.model_validate(data).model_dump(exclude_unset=True)

        customers = await self.store.load()
        for index, existing in enumerate(customers):
            if existing.id == customer_id:
                break
        else:
            raise CustomerNotFoundError(customer_id)

        updated = existing.model_copy(update=changes)
        customers[index] = updated
        await self.store.save(customers)
        logger.info(f"Customer updated: {customer_id} fields={sorted(changes)}")
        return updated

    async def delete(self, customer_id: str) -> None:
        """Remove a customer permanently; unknown ids are ignored."""
        customers = await self.store.load()
        remaining = [c for c in customers if c.id != customer_id]
        if len(remaining) == len(customers):
            return
        await self.store.save(remaining)
        logger.info(f"Customer deleted: {customer_id}")

    async def decrement_visits(self, customer_id: str) -> Customer | None:
        """Use one visit. A zero balance is left untouched and returned as is."""
        customers = await self.store.load()
        for index, customer in enumerate(customers):
            if customer.id == customer_id:
                break
        else:
            return None

        if customer.visits <= 0:
            return customer

        updated = customer.model_copy(update={"visits": customer.visits - 1})
        customers[index] = updated
        await self.store.save(customers)
        logger.info(f"Visit recorded for {customer.membership_number}: {updated.visits} left")
        return updated

    # ── Card support ───────────────────────────────

    async def qr_code_value(self, customer_id: str) -> str:
        """Verification link encoded in the customer's QR code."""
        customer = await self.get_by_id(customer_id)
        if customer is None:
            logger.error(f"Could not generate QR code: customer {customer_id} not found")
            return verification_url(self.base_url, error=CUSTOMER_NOT_FOUND)
        return verification_url(self.base_url, membershipNumber=customer.membership_number)
