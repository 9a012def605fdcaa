from lounge.schemas.customer import (
    MembershipType, Customer, CustomerCreate, CustomerUpdate,
    CustomerPage, CustomerStats, DigitalCard, QRCodeValue,
)
from lounge.schemas.verification import (
    VerificationState, Eligibility, VerificationView, VerificationDecision,
)

__all__ = [
    "MembershipType", "Customer", "CustomerCreate", "CustomerUpdate",
    "CustomerPage", "CustomerStats", "DigitalCard", "QRCodeValue",
    "VerificationState", "Eligibility", "VerificationView", "VerificationDecision",
]
