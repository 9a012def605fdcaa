"""Verification screen request/response schemas."""

import enum

from pydantic import Field

from lounge.schemas.customer import CamelModel, Customer


class VerificationState(str, enum.Enum):
    RESOLVING = "resolving"
    LOADED = "loaded"
    GRANTED = "granted"
    DENIED = "denied"
    ERROR = "error"


class Eligibility(CamelModel):
    expired: bool
    no_visits_left: bool
    can_access: bool


class VerificationView(CamelModel):
    state: VerificationState
    message: str | None = None
    customer: Customer | None = None
    eligibility: Eligibility | None = None


class VerificationDecision(CamelModel):
    membership_number: str = Field(..., min_length=1)
