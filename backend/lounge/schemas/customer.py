"""Customer record and form schemas.

Field names are snake_case in Python and camelCase on the wire, which is also
the persisted layout of the record store.
"""

import enum
from datetime import date, datetime, time, timezone
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel


class MembershipType(str, enum.Enum):
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"


def _date_to_datetime(value):
    # A bare calendar date means midnight UTC of that day
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDateTime = Annotated[datetime, BeforeValidator(_date_to_datetime), AfterValidator(_ensure_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Form input ─────────────────────────────────────
class CustomerCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=30)
    membership_type: MembershipType
    expiry_date: UtcDateTime
    visits: int = Field(default=0, ge=0)


class CustomerUpdate(CamelModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=30)
    membership_type: MembershipType | None = None
    expiry_date: UtcDateTime | None = None
    visits: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self):
        for name in self.model_fields_set:
            if name != "phone" and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


# ── Persisted record ───────────────────────────────
class Customer(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    membership_type: MembershipType
    membership_number: str
    expiry_date: UtcDateTime
    created_at: UtcDateTime
    visits: int = Field(default=0, ge=0)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class CustomerPage(CamelModel):
    items: list[Customer]
    total_items: int
    total_pages: int
    page: int
    page_size: int


class CustomerStats(CamelModel):
    total: int
    gold: int
    platinum: int
    diamond: int
    expiring_soon: int


class DigitalCard(CamelModel):
    customer_id: str
    full_name: str
    membership_type: MembershipType
    membership_number: str
    member_since: datetime
    expires_at: datetime
    visits: int
    qr_value: str
    download_filename: str


class QRCodeValue(BaseModel):
    value: str
