from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from nexora.auth.dependencies import current_user_id, require_roles
from nexora.common.utils import success_response
from nexora.config.admin_config import admin_config
from nexora.db.dependencies import get_session
from nexora.schema.seller import SellerStatus
from nexora.sellers import services
from nexora.sellers.constants import SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT, TOP_RATED_DEFAULT_LIMIT, TOP_RATED_MAX_LIMIT, logger
from nexora.sellers.models import (AddressIn, AmountIn, ApproveIn, BankDetailsIn, BlockIn, CodSettingsIn, CommissionIn,
                                   CountIn, EarningsIn, OrderEventIn, ProfileUpdateIn, RatingIn, SellerOnboardIn,
                                   StatisticsIn, SuspendIn)
from nexora.sellers.repository import (find_active_sellers, find_sellers_by_status, find_top_rated_sellers,
                                       get_seller_by_public_id, get_seller_by_user_id, get_sellers_overview,
                                       search_sellers)

seller_router = APIRouter()
seller_admin_router = APIRouter()
seller_events_router = APIRouter()

require_admin = require_roles(admin_config.ADMIN_ROLE)
require_event_source = require_roles(admin_config.SERVICE_ROLE, admin_config.ADMIN_ROLE)


# ---------------------------------------------------------------------------------- self service

@seller_router.post("", status_code=status.HTTP_201_CREATED)
async def onboard(payload: SellerOnboardIn, user_id: str = Depends(current_user_id),
                  session: AsyncSession = Depends(get_session)):

    logger.info("seller.onboard.attempt", extra={"user_id": user_id})
    seller = await services.onboard_seller(session, user_id, payload.model_dump())
    return success_response({"message": "Seller account created", "seller": seller.get_summary()}, 201)


@seller_router.get("")
async def list_sellers(q: Optional[str] = Query(None, max_length=100),
                       limit: int = Query(SEARCH_DEFAULT_LIMIT, ge=1, le=SEARCH_MAX_LIMIT),
                       offset: int = Query(0, ge=0),
                       session: AsyncSession = Depends(get_session)):
    if q:
        sellers = await search_sellers(session, q, limit)
    else:
        sellers = await find_active_sellers(session, limit, offset)
    return success_response({"items": [s.get_public_profile() for s in sellers]})


@seller_router.get("/top-rated")
async def top_rated(limit: int = Query(TOP_RATED_DEFAULT_LIMIT, ge=1, le=TOP_RATED_MAX_LIMIT),
                    session: AsyncSession = Depends(get_session)):
    sellers = await find_top_rated_sellers(session, limit)
    return success_response({"items": [s.get_public_profile() for s in sellers]})


@seller_router.get("/me")
async def my_account(user_id: str = Depends(current_user_id), session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_user_id(session, user_id)
    return success_response({"seller": seller.get_summary(), "statistics": seller.get_statistics(),
                             "bank_details": seller.bank_details, "address": seller.address})


@seller_router.get("/me/eligibility")
async def my_eligibility(user_id: str = Depends(current_user_id), session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_user_id(session, user_id)
    return success_response(seller.get_eligibility().model_dump())


@seller_router.patch("/me/profile")
async def update_profile(payload: ProfileUpdateIn, user_id: str = Depends(current_user_id),
                         session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_user_id(session, user_id)
    changes = payload.model_dump(exclude_unset=True)
    await services.apply_seller_change(session, seller, lambda s: s.update_profile(changes), "profile.update")
    return success_response({"seller": seller.get_summary()})


@seller_router.patch("/me/cod")
async def update_cod(payload: CodSettingsIn, user_id: str = Depends(current_user_id),
                     session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_user_id(session, user_id)
    await services.apply_seller_change(session, seller, lambda s: s.update_cod_settings(payload.enabled, payload.rate),
                                       "cod.update", {"enabled": payload.enabled})
    return success_response({"seller": seller.get_summary()})


@seller_router.patch("/me/bank-details")
async def update_bank_details(payload: BankDetailsIn, user_id: str = Depends(current_user_id),
                              session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_user_id(session, user_id)
    changes = payload.model_dump(exclude_unset=True)
    await services.apply_seller_change(session, seller, lambda s: s.update_bank_details(changes), "bank_details.update")
    return success_response({"bank_details": seller.bank_details, "bank_verified": seller.bank_verified})


@seller_router.patch("/me/address")
async def update_address(payload: AddressIn, user_id: str = Depends(current_user_id),
                         session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_user_id(session, user_id)
    changes = payload.model_dump(exclude_unset=True)
    await services.apply_seller_change(session, seller, lambda s: s.update_address(changes), "address.update")
    return success_response({"address": seller.address, "address_verified": seller.address_verified})


@seller_router.post("/me/documents")
async def submit_documents(user_id: str = Depends(current_user_id), session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_user_id(session, user_id)
    await services.apply_seller_change(session, seller, lambda s: s.submit_documents(), "documents.submit")
    return success_response({"document_submitted_at": seller.document_submitted_at})


@seller_router.get("/{seller_public_id}")
async def seller_profile(seller_public_id: str, session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_public_id(session, seller_public_id)
    return success_response(seller.get_public_profile())


# ------------------------------------------------------------------------------------------ admin

@seller_admin_router.get("")
async def sellers_by_status(seller_status: SellerStatus = Query(SellerStatus.PENDING, alias="status"),
                            limit: int = Query(100, ge=1, le=500), offset: int = Query(0, ge=0),
                            actor_id: str = Depends(require_admin), session: AsyncSession = Depends(get_session)):
    sellers = await find_sellers_by_status(session, seller_status, limit, offset)
    return success_response({"items": [s.get_summary() for s in sellers]})


@seller_admin_router.get("/overview")
async def sellers_overview(actor_id: str = Depends(require_admin), session: AsyncSession = Depends(get_session)):
    return success_response(await get_sellers_overview(session))


@seller_admin_router.get("/{seller_public_id}")
async def seller_details(seller_public_id: str, actor_id: str = Depends(require_admin),
                         session: AsyncSession = Depends(get_session)):
    seller = await get_seller_by_public_id(session, seller_public_id)
    return success_response({
        "seller": seller.get_summary(),
        "statistics": seller.get_statistics(),
        "user_id": seller.user_id,
        "status_reason": seller.status_reason,
        "status_changed_at": seller.status_changed_at,
        "status_changed_by": seller.status_changed_by,
        "approved_at": seller.approved_at,
        "bank_details": seller.bank_details,
        "address": seller.address,
        "document_submitted_at": seller.document_submitted_at,
        "document_verified_at": seller.document_verified_at,
    })


@seller_admin_router.post("/{seller_public_id}/approve")
async def approve(seller_public_id: str, payload: Optional[ApproveIn] = None, actor_id: str = Depends(require_admin),
                  session: AsyncSession = Depends(get_session)):
    reason = payload.reason if payload else None
    seller = await services.approve_seller(session, seller_public_id, actor_id, reason)
    return success_response({"seller": seller.get_summary(), "status_reason": seller.status_reason})


@seller_admin_router.post("/{seller_public_id}/block")
async def block(seller_public_id: str, payload: BlockIn, actor_id: str = Depends(require_admin),
                session: AsyncSession = Depends(get_session)):
    seller = await services.block_seller(session, seller_public_id, actor_id, payload.reason)
    return success_response({"seller": seller.get_summary(), "status_reason": seller.status_reason})


@seller_admin_router.post("/{seller_public_id}/suspend")
async def suspend(seller_public_id: str, payload: SuspendIn, actor_id: str = Depends(require_admin),
                  session: AsyncSession = Depends(get_session)):
    seller = await services.suspend_seller(session, seller_public_id, actor_id, payload.days, payload.reason)
    return success_response({"seller": seller.get_summary(), "status_reason": seller.status_reason})


@seller_admin_router.post("/{seller_public_id}/unsuspend")
async def unsuspend(seller_public_id: str, actor_id: str = Depends(require_admin),
                    session: AsyncSession = Depends(get_session)):
    seller = await services.unsuspend_seller(session, seller_public_id, actor_id)
    return success_response({"seller": seller.get_summary(), "status_reason": seller.status_reason})


@seller_admin_router.patch("/{seller_public_id}/commission")
async def update_commission(seller_public_id: str, payload: CommissionIn, actor_id: str = Depends(require_admin),
                            session: AsyncSession = Depends(get_session)):
    seller = await services.update_commission_rate(session, seller_public_id, payload.rate, actor_id)
    return success_response({"seller": seller.get_summary()})


@seller_admin_router.post("/{seller_public_id}/documents/{kind}/verify")
async def verify_document(seller_public_id: str, kind: str, actor_id: str = Depends(require_admin),
                          session: AsyncSession = Depends(get_session)):
    seller = await services.verify_document(session, seller_public_id, kind, actor_id)
    return success_response({"seller": seller.get_summary(), "document_verified_at": seller.document_verified_at})


@seller_admin_router.patch("/{seller_public_id}/statistics")
async def overwrite_statistics(seller_public_id: str, payload: StatisticsIn, actor_id: str = Depends(require_admin),
                               session: AsyncSession = Depends(get_session)):
    changes = payload.model_dump(exclude_unset=True)
    seller = await services.overwrite_statistics(session, seller_public_id, changes, actor_id)
    return success_response({"statistics": seller.get_statistics()})


# ----------------------------------------------------------------------------------- domain events
#* called by the order / payment / review services , not by sellers themselves

@seller_events_router.post("/{seller_public_id}/products/increment")
async def products_increment(seller_public_id: str, payload: CountIn, _: str = Depends(require_event_source),
                             session: AsyncSession = Depends(get_session)):
    seller = await services.record_product_delta(session, seller_public_id, payload.count, increment=True)
    return success_response({"statistics": seller.get_statistics()})


@seller_events_router.post("/{seller_public_id}/products/decrement")
async def products_decrement(seller_public_id: str, payload: CountIn, _: str = Depends(require_event_source),
                             session: AsyncSession = Depends(get_session)):
    seller = await services.record_product_delta(session, seller_public_id, payload.count, increment=False)
    return success_response({"statistics": seller.get_statistics()})


@seller_events_router.post("/{seller_public_id}/orders")
async def order_recorded(seller_public_id: str, payload: OrderEventIn, _: str = Depends(require_event_source),
                         session: AsyncSession = Depends(get_session)):
    seller = await services.record_order(session, seller_public_id, payload.amount, payload.completed)
    return success_response({"statistics": seller.get_statistics()})


@seller_events_router.post("/{seller_public_id}/orders/cancelled")
async def order_cancelled(seller_public_id: str, _: str = Depends(require_event_source),
                          session: AsyncSession = Depends(get_session)):
    seller = await services.record_cancellation(session, seller_public_id)
    return success_response({"statistics": seller.get_statistics()})


@seller_events_router.post("/{seller_public_id}/ratings")
async def rating_recorded(seller_public_id: str, payload: RatingIn, _: str = Depends(require_event_source),
                          session: AsyncSession = Depends(get_session)):
    seller = await services.record_rating(session, seller_public_id, payload.rating, payload.increment)
    return success_response({"average_rating": seller.average_rating, "total_ratings": seller.total_ratings})


@seller_events_router.post("/{seller_public_id}/earnings")
async def earnings_added(seller_public_id: str, payload: EarningsIn, _: str = Depends(require_event_source),
                         session: AsyncSession = Depends(get_session)):
    seller = await services.add_earnings(session, seller_public_id, payload.amount, payload.pending)
    return success_response({"statistics": seller.get_statistics()})


@seller_events_router.post("/{seller_public_id}/earnings/release")
async def earnings_released(seller_public_id: str, payload: AmountIn, _: str = Depends(require_event_source),
                            session: AsyncSession = Depends(get_session)):
    seller = await services.release_pending_earnings(session, seller_public_id, payload.amount)
    return success_response({"statistics": seller.get_statistics()})


@seller_events_router.post("/{seller_public_id}/withdrawals")
async def withdrawal_recorded(seller_public_id: str, payload: AmountIn, _: str = Depends(require_event_source),
                              session: AsyncSession = Depends(get_session)):
    seller = await services.record_withdrawal(session, seller_public_id, payload.amount)
    return success_response({"statistics": seller.get_statistics(),
                             "eligibility": seller.get_eligibility().model_dump()})
