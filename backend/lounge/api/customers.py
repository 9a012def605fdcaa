"""Customer management endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from lounge.api.deps import get_repository
from lounge.core.config import settings
from lounge.core.exceptions import CustomerNotFoundError, MembershipNumberExhaustedError
from lounge.schemas.customer import (
    Customer,
    CustomerCreate,
    CustomerPage,
    CustomerUpdate,
    DigitalCard,
    QRCodeValue,
)
from lounge.services.customers import CustomerRepository
from lounge.services.qr import render_qr_png

router = APIRouter(prefix="/customers", tags=["customers"])


async def _get_or_404(repo: CustomerRepository, customer_id: str) -> Customer:
    customer = await repo.get_by_id(customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )
    return customer


@router.get("", response_model=CustomerPage)
async def list_customers(
    page: int = Query(1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: str | None = None,
    repo: CustomerRepository = Depends(get_repository),
):
    """List customers newest first, with pagination and optional search.

    Out-of-range page numbers are clamped rather than rejected.
    """
    return await repo.paginate(page, size, search or "")


@router.get("/by-membership/{membership_number}", response_model=Customer)
async def get_customer_by_membership_number(
    membership_number: str,
    repo: CustomerRepository = Depends(get_repository),
):
    customer = await repo.get_by_membership_number(membership_number)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid membership number",
        )
    return customer


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(
    customer_id: str,
    repo: CustomerRepository = Depends(get_repository),
):
    """Get a single customer by ID."""
    return await _get_or_404(repo, customer_id)


@router.post("", response_model=Customer, status_code=status.HTTP_201_CREATED)
async def create_customer(
    body: CustomerCreate,
    repo: CustomerRepository = Depends(get_repository),
):
    """Create a customer; id, membership number and creation time are assigned."""
    try:
        return await repo.create(body)
    except MembershipNumberExhaustedError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        )


async def _update(repo: CustomerRepository, customer_id: str, body) -> Customer:
    try:
        return await repo.update(customer_id, body)
    except CustomerNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )


@router.put("/{customer_id}", response_model=Customer)
async def replace_customer(
    customer_id: str,
    body: CustomerCreate,
    repo: CustomerRepository = Depends(get_repository),
):
    """Save the full edit form."""
    return await _update(repo, customer_id, body)


@router.patch("/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    repo: CustomerRepository = Depends(get_repository),
):
    """Update only the supplied fields."""
    return await _update(repo, customer_id, body)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    repo: CustomerRepository = Depends(get_repository),
):
    """Delete a customer. Deleting an unknown id is not an error."""
    await repo.delete(customer_id)


@router.post("/{customer_id}/visits/decrement", response_model=Customer)
async def decrement_visits(
    customer_id: str,
    repo: CustomerRepository = Depends(get_repository),
):
    """Use one visit; a zero balance is returned unchanged."""
    customer = await repo.decrement_visits(customer_id)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )
    return customer


# ── Digital card ───────────────────────────────────

@router.get("/{customer_id}/card", response_model=DigitalCard)
async def get_digital_card(
    customer_id: str,
    repo: CustomerRepository = Depends(get_repository),
):
    customer = await _get_or_404(repo, customer_id)
    return DigitalCard(
        customer_id=customer.id,
        full_name=customer.full_name,
        membership_type=customer.membership_type,
        membership_number=customer.membership_number,
        member_since=customer.created_at,
        expires_at=customer.expiry_date,
        visits=customer.visits,
        qr_value=await repo.qr_code_value(customer.id),
        download_filename=f"{customer.last_name}-{customer.first_name}-membership-card.png",
    )


@router.get("/{customer_id}/qr", response_model=QRCodeValue)
async def get_qr_value(
    customer_id: str,
    repo: CustomerRepository = Depends(get_repository),
):
    """Verification link for the QR code; unknown ids get the not-found link."""
    return QRCodeValue(value=await repo.qr_code_value(customer_id))


@router.get("/{customer_id}/qr.png", response_class=Response)
async def get_qr_image(
    customer_id: str,
    repo: CustomerRepository = Depends(get_repository),
):
    png = render_qr_png(await repo.qr_code_value(customer_id))
    return Response(content=png, media_type="image/png")
