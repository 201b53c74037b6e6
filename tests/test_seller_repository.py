import uuid
import pytest
from fastapi import HTTPException
from sqlalchemy.orm.exc import StaleDataError
from nexora.common.custom_exceptions import InvalidArgument
from nexora.db.connection import async_session
from nexora.schema.seller import Seller, SellerStatus
from nexora.sellers import services
from nexora.sellers.repository import (find_active_sellers, find_sellers_by_status, find_top_rated_sellers,
                                       get_seller_by_public_id, get_seller_by_user_id, get_sellers_overview,
                                       insert_seller, save_seller, search_sellers)


async def add_seller(session, user_id, shop_name, approve=True, rating=None, earnings=0, orders=0,
                     business_type="local") -> Seller:
    seller = Seller.onboard(user_id=user_id, shop_name=shop_name, business_type=business_type,
                            commission_rate=10.0)
    if approve:
        seller.approve("admin-1")
    if rating is not None:
        seller.update_rating(rating)
    seller.total_earnings = earnings
    seller.total_orders = orders
    return await insert_seller(session, seller)


@pytest.mark.asyncio
async def test_insert_and_lookup(db_session):
    seller = await add_seller(db_session, "u-1", "Saffron Sweets")

    assert seller.id is not None
    assert seller.version == 1

    by_pid = await get_seller_by_public_id(db_session, str(seller.public_id))
    assert by_pid.id == seller.id

    by_user = await get_seller_by_user_id(db_session, "u-1")
    assert by_user.public_id == seller.public_id


@pytest.mark.asyncio
async def test_lookup_missing_raises_404(db_session):
    with pytest.raises(HTTPException) as exc:
        await get_seller_by_public_id(db_session, str(uuid.uuid4()))
    assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        await get_seller_by_public_id(db_session, "not-a-uuid")
    assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        await get_seller_by_user_id(db_session, "nobody")
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_one_seller_per_user(db_session):
    await services.onboard_seller(db_session, "u-1", {"shop_name": "First", "business_type": "local"})

    with pytest.raises(HTTPException) as exc:
        await services.onboard_seller(db_session, "u-1", {"shop_name": "Second", "business_type": "dropship"})
    assert exc.value.status_code == 409


@pytest.mark.asyncio
async def test_onboard_uses_configured_commission(db_session):
    seller = await services.onboard_seller(db_session, "u-9", {"shop_name": "Chai Point", "business_type": "local"})
    assert seller.commission_rate == 10.0
    assert seller.cod_commission_rate == 0.0
    assert seller.status == SellerStatus.PENDING


@pytest.mark.asyncio
async def test_find_by_status(db_session):
    await add_seller(db_session, "u-1", "Alpha", approve=False)
    await add_seller(db_session, "u-2", "Beta", approve=False)
    await add_seller(db_session, "u-3", "Gamma")

    pending = await find_sellers_by_status(db_session, SellerStatus.PENDING)
    assert {s.shop_name for s in pending} == {"Alpha", "Beta"}

    approved = await find_sellers_by_status(db_session, SellerStatus.APPROVED)
    assert [s.shop_name for s in approved] == ["Gamma"]

    page = await find_sellers_by_status(db_session, SellerStatus.PENDING, limit=1)
    assert len(page) == 1


@pytest.mark.asyncio
async def test_active_and_top_rated_skip_non_operating(db_session):
    await add_seller(db_session, "u-1", "Alpha", rating=3)
    await add_seller(db_session, "u-2", "Beta", rating=5)
    await add_seller(db_session, "u-3", "Gamma", rating=4)
    await add_seller(db_session, "u-4", "Pending Shop", approve=False, rating=5)

    blocked = await add_seller(db_session, "u-5", "Blocked Shop", rating=5)
    blocked.block("admin-1", "fraud")
    await save_seller(db_session, blocked)

    active = await find_active_sellers(db_session)
    assert [s.shop_name for s in active] == ["Alpha", "Beta", "Gamma"]

    top = await find_top_rated_sellers(db_session, limit=2)
    assert [s.shop_name for s in top] == ["Beta", "Gamma"]


@pytest.mark.asyncio
async def test_search_matches_shop_name(db_session):
    await add_seller(db_session, "u-1", "Saffron Sweets")
    await add_seller(db_session, "u-2", "Sweet Tooth")
    await add_seller(db_session, "u-3", "Chai Point")
    await add_seller(db_session, "u-4", "100% Organic")

    found = await search_sellers(db_session, "SWEET")
    assert {s.shop_name for s in found} == {"Saffron Sweets", "Sweet Tooth"}

    assert await search_sellers(db_session, "   ") == []
    # wildcard characters match literally
    assert [s.shop_name for s in await search_sellers(db_session, "%")] == ["100% Organic"]
    assert await search_sellers(db_session, "_") == []


@pytest.mark.asyncio
async def test_overview(db_session):
    assert await get_sellers_overview(db_session) == {
        "total_sellers": 0, "average_rating": 0.0, "total_earnings": 0, "total_orders": 0,
    }

    await add_seller(db_session, "u-1", "Alpha", rating=4, earnings=1000, orders=3)
    await add_seller(db_session, "u-2", "Beta", rating=5, earnings=500, orders=2)
    await add_seller(db_session, "u-3", "Pending", approve=False, rating=1, earnings=9999, orders=9)

    overview = await get_sellers_overview(db_session)
    assert overview == {"total_sellers": 2, "average_rating": 4.5, "total_earnings": 1500, "total_orders": 5}


@pytest.mark.asyncio
async def test_state_survives_reload(db_session):
    seller = await add_seller(db_session, "u-1", "Alpha")
    seller.suspend("admin-1", 3, "late shipments")
    seller.update_bank_details({"account_number": "123"})
    await save_seller(db_session, seller)

    async with async_session() as other:
        loaded = await get_seller_by_public_id(other, seller.public_id)
        assert loaded.status == SellerStatus.SUSPENDED
        assert loaded.status_reason == "late shipments"
        assert loaded.bank_details["account_number"] == "123"
        assert loaded.bank_details["is_verified"] is False
        assert loaded.is_suspension_active() is True
        assert loaded.version == 2


@pytest.mark.asyncio
async def test_concurrent_write_is_rejected(db_session):
    seller = await add_seller(db_session, "u-1", "Alpha")
    pid = seller.public_id

    async with async_session() as first, async_session() as second:
        a = await get_seller_by_public_id(first, pid)
        b = await get_seller_by_public_id(second, pid)

        a.update_rating(5)
        await save_seller(first, a)

        b.update_rating(1)
        with pytest.raises(StaleDataError):
            await save_seller(second, b)

    async with async_session() as fresh:
        current = await get_seller_by_public_id(fresh, pid)
        assert (current.average_rating, current.total_ratings) == (5.0, 1)


@pytest.mark.asyncio
async def test_invalid_change_writes_nothing(db_session):
    seller = await add_seller(db_session, "u-1", "Alpha")

    with pytest.raises(InvalidArgument):
        await services.block_seller(db_session, seller.public_id, "admin-1", "  ")

    async with async_session() as other:
        loaded = await get_seller_by_public_id(other, seller.public_id)
        assert loaded.status == SellerStatus.APPROVED
        assert loaded.version == 1


@pytest.mark.asyncio
async def test_overview_rating_rounds_half_up(db_session):
    for user, name in (("u-1", "Alpha"), ("u-2", "Beta")):
        seller = Seller.onboard(user_id=user, shop_name=name, business_type="local", commission_rate=10.0)
        seller.approve("admin-1")
        seller.average_rating = 2.675
        await insert_seller(db_session, seller)

    overview = await get_sellers_overview(db_session)
    assert overview["average_rating"] == 2.68
