"""Dashboard statistics over the customer collection."""

import math
from collections import Counter
from datetime import datetime, timedelta

from lounge.schemas.customer import Customer, CustomerStats, MembershipType
from lounge.services.customers import CustomerRepository

DAY = timedelta(days=1)


def days_until(expiry: datetime, now: datetime) -> int:
    """Whole days left before ``expiry``, rounded up."""
    return math.ceil((expiry - now) / DAY)


def is_expiring_soon(customer: Customer, now: datetime, window_days: int = 30) -> bool:
    return 0 < days_until(customer.expiry_date, now) <= window_days


def summarize(customers: list[Customer], now: datetime, window_days: int = 30) -> CustomerStats:
    tiers = Counter(c.membership_type for c in customers)
    return CustomerStats(
        total=len(customers),
        gold=tiers[MembershipType.GOLD],
        platinum=tiers[MembershipType.PLATINUM],
        diamond=tiers[MembershipType.DIAMOND],
        expiring_soon=sum(1 for c in customers if is_expiring_soon(c, now, window_days)),
    )


async def compute_stats(
    repository: CustomerRepository,
    now: datetime | None = None,
    window_days: int = 30,
) -> CustomerStats:
    customers = await repository.list(sort=False)
    return summarize(customers, now or repository.clock(), window_days)
