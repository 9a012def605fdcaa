"""Access verification endpoints behind the membership QR code."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from lounge.api.deps import get_repository
from lounge.core.exceptions import CustomerNotFoundError, InvalidTransitionError
from lounge.schemas.verification import VerificationDecision, VerificationState, VerificationView
from lounge.services.customers import CustomerRepository
from lounge.services.verification import NOT_FOUND_MESSAGE, VerificationSession

router = APIRouter(prefix="/verify", tags=["verification"])


async def _open_session(repo: CustomerRepository, membership_number: str) -> VerificationSession:
    session = VerificationSession(repo, membership_number)
    if await session.resolve() is VerificationState.ERROR:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=session.message,
        )
    return session


@router.get("", response_model=VerificationView)
async def verify(
    membership_number: str | None = Query(None, alias="membershipNumber"),
    error: str | None = None,
    repo: CustomerRepository = Depends(get_repository),
):
    """Resolve a scanned QR link into the record and its eligibility.

    Failures are part of the view (state ``error`` plus a message), not HTTP errors.
    """
    session = VerificationSession(repo, membership_number, error=error)
    await session.resolve()
    return session.snapshot()


@router.post("/allow", response_model=VerificationView)
async def allow_access(
    body: VerificationDecision,
    repo: CustomerRepository = Depends(get_repository),
):
    """Grant lounge access and record the visit."""
    session = await _open_session(repo, body.membership_number)
    try:
        await session.allow()
    except InvalidTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=exc.message,
        )
    except CustomerNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_MESSAGE,
        )
    return session.snapshot()


@router.post("/deny", response_model=VerificationView)
async def deny_access(
    body: VerificationDecision,
    repo: CustomerRepository = Depends(get_repository),
):
    """Decline lounge access. The record is not touched."""
    session = await _open_session(repo, body.membership_number)
    session.deny()
    return session.snapshot()
