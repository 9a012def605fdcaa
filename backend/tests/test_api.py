"""Unit tests for the HTTP endpoints, called directly with an in-memory repository."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from lounge.core.exceptions import StoreConflictError
from lounge.schemas.customer import CustomerCreate, CustomerUpdate
from lounge.schemas.verification import VerificationDecision, VerificationState
from lounge.services.customers import CustomerRepository
from lounge.store.records import InMemoryRecordStore, KeyValueRecordStore

from conftest import NOW, make_form


def _body(**overrides) -> CustomerCreate:
    return CustomerCreate.model_validate(make_form(**overrides))


# ── customers ──────────────────────────────────────

@pytest.mark.asyncio
async def test_create_and_get_customer(repo):
    from lounge.api.customers import create_customer, get_customer

    created = await create_customer(_body(), repo=repo)
    fetched = await get_customer(created.id, repo=repo)

    assert fetched == created


@pytest.mark.asyncio
async def test_create_customer_numbers_exhausted(store, clock):
    from lounge.api.customers import create_customer

    repo = CustomerRepository(store, clock=clock, membership_number_attempts=0)

    with pytest.raises(HTTPException) as exc_info:
        await create_customer(_body(), repo=repo)

    assert exc_info.value.status_code == 503
    assert store.data == {}


@pytest.mark.asyncio
async def test_get_customer_not_found(repo):
    from lounge.api.customers import get_customer

    with pytest.raises(HTTPException) as exc_info:
        await get_customer("missing", repo=repo)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_customer_by_membership_number(repo):
    from lounge.api.customers import get_customer_by_membership_number

    created = await repo.create(make_form())

    found = await get_customer_by_membership_number(created.membership_number, repo=repo)
    assert found.id == created.id

    with pytest.raises(HTTPException) as exc_info:
        await get_customer_by_membership_number("Z999999", repo=repo)
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_list_customers_clamps_page(repo):
    from lounge.api.customers import list_customers

    for i in range(3):
        await repo.create(make_form(email=f"m{i}@example.com"))

    result = await list_customers(page=7, size=2, search=None, repo=repo)

    assert result.page == 2
    assert result.total_pages == 2
    assert result.total_items == 3
    assert len(result.items) == 1


@pytest.mark.asyncio
async def test_list_customers_serializes_camel_case(repo):
    from lounge.api.customers import list_customers

    await repo.create(make_form())

    payload = (await list_customers(page=1, size=10, search="ada", repo=repo)).model_dump(
        mode="json", by_alias=True
    )

    assert payload["totalItems"] == 1
    assert payload["totalPages"] == 1
    assert payload["pageSize"] == 10
    assert payload["items"][0]["membershipType"] == "gold"


@pytest.mark.asyncio
async def test_replace_and_patch_customer(repo):
    from lounge.api.customers import replace_customer, update_customer

    created = await repo.create(make_form())

    replaced = await replace_customer(created.id, _body(lastName="Byron"), repo=repo)
    patched = await update_customer(created.id, CustomerUpdate(visits=1), repo=repo)

    assert replaced.last_name == "Byron"
    assert patched.last_name == "Byron"
    assert patched.visits == 1
    assert patched.membership_number == created.membership_number


@pytest.mark.asyncio
async def test_replace_customer_resets_omitted_fields(repo):
    from lounge.api.customers import replace_customer

    created = await repo.create(make_form(visits=7))
    form = make_form()
    del form["phone"], form["visits"]

    replaced = await replace_customer(created.id, CustomerCreate.model_validate(form), repo=repo)

    assert replaced.phone is None
    assert replaced.visits == 0


@pytest.mark.asyncio
async def test_update_customer_not_found(repo):
    from lounge.api.customers import update_customer

    with pytest.raises(HTTPException) as exc_info:
        await update_customer("missing", CustomerUpdate(visits=1), repo=repo)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_delete_customer(repo):
    from lounge.api.customers import delete_customer

    created = await repo.create(make_form())

    await delete_customer(created.id, repo=repo)
    # deleting again is not an error
    await delete_customer(created.id, repo=repo)

    assert await repo.get_by_id(created.id) is None


@pytest.mark.asyncio
async def test_decrement_visits_endpoint(repo):
    from lounge.api.customers import decrement_visits

    created = await repo.create(make_form(visits=2))

    assert (await decrement_visits(created.id, repo=repo)).visits == 1

    with pytest.raises(HTTPException) as exc_info:
        await decrement_visits("missing", repo=repo)
    assert exc_info.value.status_code == 404


# ── card & QR ──────────────────────────────────────

@pytest.mark.asyncio
async def test_digital_card(repo):
    from lounge.api.customers import get_digital_card

    created = await repo.create(make_form())

    card = await get_digital_card(created.id, repo=repo)

    assert card.full_name == "Ada Lovelace"
    assert card.membership_number == created.membership_number
    assert card.member_since == created.created_at
    assert card.expires_at == created.expiry_date
    assert card.qr_value == f"/api/v1/verify?membershipNumber={created.membership_number}"
    assert card.download_filename == "Lovelace-Ada-membership-card.png"


@pytest.mark.asyncio
async def test_digital_card_not_found(repo):
    from lounge.api.customers import get_digital_card

    with pytest.raises(HTTPException) as exc_info:
        await get_digital_card("missing", repo=repo)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_qr_value_for_unknown_customer(repo):
    from lounge.api.customers import get_qr_value

    result = await get_qr_value("missing", repo=repo)

    assert result.value == "/api/v1/verify?error=customer_not_found"


@pytest.mark.asyncio
async def test_qr_image_is_png(repo):
    from lounge.api.customers import get_qr_image

    created = await repo.create(make_form())

    response = await get_qr_image(created.id, repo=repo)

    assert response.media_type == "image/png"
    assert response.body.startswith(b"\x89PNG\r\n\x1a\n")


# ── dashboard ──────────────────────────────────────

@pytest.mark.asyncio
async def test_dashboard_stats(repo):
    from lounge.api.dashboard import get_stats

    await repo.create(make_form(membershipType="gold"))
    await repo.create(make_form(membershipType="diamond", expiryDate=(NOW + timedelta(days=300)).isoformat()))

    stats = await get_stats(repo=repo)

    assert stats.total == 2
    assert stats.gold == 1
    assert stats.diamond == 1
    assert stats.platinum == 0


# ── verification ───────────────────────────────────

@pytest.mark.asyncio
async def test_verify_view_reports_errors_in_body(repo):
    from lounge.api.verification import verify

    missing = await verify(membership_number=None, error=None, repo=repo)
    invalid = await verify(membership_number="G000000", error=None, repo=repo)
    upstream = await verify(membership_number="G000000", error="customer_not_found", repo=repo)

    assert missing.state is VerificationState.ERROR
    assert missing.message == "No membership number provided"
    assert invalid.message == "Invalid membership number"
    assert upstream.message == "Customer not found in the system"


@pytest.mark.asyncio
async def test_verify_view_loaded(repo):
    from lounge.api.verification import verify

    created = await repo.create(make_form(visits=0))

    view = await verify(membership_number=created.membership_number, error=None, repo=repo)

    assert view.state is VerificationState.LOADED
    assert view.customer.id == created.id
    assert view.eligibility.no_visits_left
    assert view.eligibility.can_access is False


@pytest.mark.asyncio
async def test_allow_access_endpoint(repo):
    from lounge.api.verification import allow_access

    created = await repo.create(make_form(visits=3))

    view = await allow_access(VerificationDecision(membership_number=created.membership_number), repo=repo)

    assert view.state is VerificationState.GRANTED
    assert view.customer.visits == 2


@pytest.mark.asyncio
async def test_allow_access_without_visits_conflicts(repo):
    from lounge.api.verification import allow_access

    created = await repo.create(make_form(visits=0))

    with pytest.raises(HTTPException) as exc_info:
        await allow_access(VerificationDecision(membership_number=created.membership_number), repo=repo)

    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_allow_access_unknown_number(repo):
    from lounge.api.verification import allow_access

    with pytest.raises(HTTPException) as exc_info:
        await allow_access(VerificationDecision(membership_number="G000000"), repo=repo)

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Invalid membership number"


@pytest.mark.asyncio
async def test_deny_access_endpoint(repo):
    from lounge.api.verification import deny_access

    created = await repo.create(make_form(visits=3))

    view = await deny_access(VerificationDecision(membership_number=created.membership_number), repo=repo)

    assert view.state is VerificationState.DENIED
    assert (await repo.get_by_id(created.id)).visits == 3


# ── wiring ─────────────────────────────────────────

def test_dependencies_build_repository():
    from lounge.api.deps import get_record_store, get_repository
    from lounge.core.config import settings

    store = get_record_store(db=MagicMock())
    assert isinstance(store, KeyValueRecordStore)
    assert store.key == settings.STORAGE_KEY

    repo = get_repository(store=InMemoryRecordStore())
    assert repo.base_url == settings.PUBLIC_BASE_URL
    assert repo.membership_number_attempts == settings.MEMBERSHIP_NUMBER_ATTEMPTS


@pytest.mark.asyncio
async def test_store_conflict_maps_to_409():
    from lounge.main import store_conflict_handler

    response = await store_conflict_handler(MagicMock(), StoreConflictError("airport_lounge_customers"))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_health_check():
    from lounge.main import health_check

    assert (await health_check())["status"] == "ok"


def test_routes_registered():
    from lounge.main import app

    paths = {route.path for route in app.routes}
    assert "/api/v1/customers" in paths
    assert "/api/v1/customers/{customer_id}/qr.png" in paths
    assert "/api/v1/dashboard/stats" in paths
    assert "/api/v1/verify" in paths
    assert "/api/v1/verify/allow" in paths


@pytest.mark.asyncio
async def test_qr_link_resolves_to_verify_route(repo):
    from urllib.parse import urlsplit

    from lounge.main import app

    created = await repo.create(make_form())
    link = await repo.qr_code_value(created.id)

    get_paths = {
        route.path for route in app.routes if "GET" in getattr(route, "methods", set())
    }
    assert urlsplit(link).path in get_paths
