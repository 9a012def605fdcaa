"""Lounge access verification.

A ``VerificationSession`` models one visit to the verification screen as a
small state machine::

    resolving ──► loaded ──► granted
        │           │
        │           └──────► denied
        └─────────► error

``granted``, ``denied`` and ``error`` are terminal. Only ``allow`` has a side
effect: it uses one visit from the customer's balance.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from lounge.core.exceptions import CustomerNotFoundError, InvalidTransitionError
from lounge.schemas.customer import Customer
from lounge.schemas.verification import Eligibility, VerificationState, VerificationView
from lounge.services.customers import CUSTOMER_NOT_FOUND, CustomerRepository

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Customer not found in the system"
MISSING_NUMBER_MESSAGE = "No membership number provided"
INVALID_NUMBER_MESSAGE = "Invalid membership number"

TRANSITIONS: dict[VerificationState, frozenset[VerificationState]] = {
    VerificationState.RESOLVING: frozenset({VerificationState.LOADED, VerificationState.ERROR}),
    VerificationState.LOADED: frozenset(
        {VerificationState.GRANTED, VerificationState.DENIED, VerificationState.ERROR}
    ),
    VerificationState.GRANTED: frozenset(),
    VerificationState.DENIED: frozenset(),
    VerificationState.ERROR: frozenset(),
}


def evaluate(customer: Customer, now: datetime) -> Eligibility:
    expired = customer.expiry_date < now
    no_visits_left = customer.visits <= 0
    return Eligibility(
        expired=expired,
        no_visits_left=no_visits_left,
        can_access=not expired and not no_visits_left,
    )


class VerificationSession:
    def __init__(
        self,
        repository: CustomerRepository,
        membership_number: str | None,
        error: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repository = repository
        self.membership_number = membership_number
        self.error = error
        self.clock = clock or repository.clock

        self.state = VerificationState.RESOLVING
        self.message: str | None = None
        self.customer: Customer | None = None
        self.eligibility: Eligibility | None = None

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self.state]

    def _transition(self, target: VerificationState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Cannot move from {self.state.value} to {target.value}"
            )
        self.state = target

    def _fail(self, message: str) -> None:
        self._transition(VerificationState.ERROR)
        self.message = message
        logger.info(f"Verification failed for {self.membership_number!r}: {message}")

    def _load(self, customer: Customer) -> None:
        self.customer = customer
        self.eligibility = evaluate(customer, self.clock())

    async def resolve(self) -> VerificationState:
        """Look up the membership number and move to ``loaded`` or ``error``."""
        if self.state is not VerificationState.RESOLVING:
            return self.state

        if self.error == CUSTOMER_NOT_FOUND:
            self._fail(NOT_FOUND_MESSAGE)
            return self.state

        number = self.membership_number
        if not number:
            self._fail(MISSING_NUMBER_MESSAGE)
            return self.state

        customer = await self.repository.get_by_membership_number(number)
        if customer is None:
            self._fail(INVALID_NUMBER_MESSAGE)
            return self.state

        self._transition(VerificationState.LOADED)
        self._load(customer)
        return self.state

    async def allow(self) -> Customer:
        """Grant access and use one visit. Only offered when access is possible."""
        if self.state is not VerificationState.LOADED or not self.eligibility.can_access:
            raise InvalidTransitionError("Access cannot be granted for this membership")

        updated = await self.repository.decrement_visits(self.customer.id)
        if updated is None:
            self._fail(NOT_FOUND_MESSAGE)
            raise CustomerNotFoundError(self.customer.id)

        self._transition(VerificationState.GRANTED)
        self._load(updated)
        logger.info(
            f"Access granted to {updated.membership_number}, {updated.visits} visits left"
        )
        return updated

    def deny(self) -> None:
        """Decline access; the record is left as it is."""
        self._transition(VerificationState.DENIED)
        logger.info(f"Access denied to {self.membership_number}")

    def snapshot(self) -> VerificationView:
        return VerificationView(
            state=self.state,
            message=self.message,
            customer=self.customer,
            eligibility=self.eligibility,
        )
