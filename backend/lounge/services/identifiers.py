"""Record identifiers and human-facing membership numbers."""

import random
import uuid
from collections.abc import Container

from lounge.core.exceptions import MembershipNumberExhaustedError
from lounge.schemas.customer import MembershipType


def new_identifier() -> str:
    return str(uuid.uuid4())


def new_membership_number(tier: MembershipType | str, rng: random.Random | None = None) -> str:
    """Tier initial followed by six digits, e.g. ``G482913`` for gold."""
    name = tier.value if isinstance(tier, MembershipType) else str(tier)
    digits = (rng or random).randint(100000, 999999)
    return f"{name[:1].upper()}{digits}"


def unique_membership_number(
    tier: MembershipType | str,
    taken: Container[str],
    attempts: int = 50,
    rng: random.Random | None = None,
) -> str:
    """Draw membership numbers until one is not in ``taken``."""
    name = tier.value if isinstance(tier, MembershipType) else str(tier)
    for _ in range(attempts):
        number = new_membership_number(tier, rng)
        if number not in taken:
            return number
    raise MembershipNumberExhaustedError(
        f"No free membership number for tier '{name}' after {attempts} attempts"
    )
