from typing import Any, Callable, Dict, Mapping, Optional
from fastapi import HTTPException,status
from sqlalchemy.ext.asyncio import AsyncSession
from nexora.common.custom_exceptions import InvalidArgument
from nexora.config.settings import config_settings
from nexora.schema.seller import Seller
from nexora.sellers.constants import logger
from nexora.sellers.repository import get_seller_by_public_id, insert_seller, save_seller, seller_exists_for_user


async def onboard_seller(session: AsyncSession, user_id: str, payload: Mapping[str, Any]) -> Seller:

    if await seller_exists_for_user(session, user_id):
        logger.warning("seller.onboard.duplicate", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Seller account already exists for this user")

    commission_rate = payload.get("commission_rate")
    cod_commission_rate = payload.get("cod_commission_rate")

    try:
        seller = Seller.onboard(
            user_id=user_id,
            shop_name=payload.get("shop_name"),
            business_type=payload.get("business_type"),
            shop_description=payload.get("shop_description"),
            shop_image=payload.get("shop_image"),
            commission_rate=config_settings.DEFAULT_COMMISSION_RATE if commission_rate is None else commission_rate,
            cod_enabled=payload.get("cod_enabled", False),
            cod_commission_rate=config_settings.DEFAULT_COD_COMMISSION_RATE if cod_commission_rate is None else cod_commission_rate,
        )
    except InvalidArgument as exc:
        logger.warning("seller.onboard.invalid_argument", extra={"user_id": user_id, "field": exc.field, "reason": exc.message})
        raise

    await insert_seller(session, seller)
    logger.info("seller.onboard.success", extra={"user_id": user_id, "seller_public_id": str(seller.public_id),
                                                 "business_type": seller.business_type.value})
    return seller


async def apply_seller_change(session: AsyncSession, seller: Seller, change: Callable[[Seller], None],
                              event: str, extra: Optional[Dict[str, Any]] = None) -> Seller:
    """Mutate the loaded seller in memory, then persist the whole record once.

    An InvalidArgument leaves the record untouched and nothing is written.
    If the write fails the in-memory instance stays mutated , callers reload.
    """
    extra = {"seller_public_id": str(seller.public_id), **(extra or {})}
    try:
        change(seller)
    except InvalidArgument as exc:
        logger.warning(f"seller.{event}.invalid_argument", extra={**extra, "field": exc.field, "reason": exc.message})
        raise

    await save_seller(session, seller)
    logger.info(f"seller.{event}.success", extra=extra)
    return seller


async def change_seller(session: AsyncSession, seller_pid, change: Callable[[Seller], None],
                        event: str, extra: Optional[Dict[str, Any]] = None) -> Seller:
    seller = await get_seller_by_public_id(session, seller_pid)
    return await apply_seller_change(session, seller, change, event, extra)


# ------------------------------------------------------------------------------- admin lifecycle

async def approve_seller(session, seller_pid, actor_id: str, reason: Optional[str] = None) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.approve(actor_id, reason),
                               "status.approve", {"actor_id": actor_id})


async def block_seller(session, seller_pid, actor_id: str, reason: Optional[str]) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.block(actor_id, reason),
                               "status.block", {"actor_id": actor_id})


async def suspend_seller(session, seller_pid, actor_id: str, days: float, reason: Optional[str] = None) -> Seller:
    if isinstance(days, (int, float)) and days <= 0:
        # accepted as-is , suspended_until lands in the past
        logger.warning("seller.status.suspend.non_positive_days", extra={"actor_id": actor_id, "days": days})
    return await change_seller(session, seller_pid, lambda s: s.suspend(actor_id, days, reason),
                               "status.suspend", {"actor_id": actor_id, "days": days})


async def unsuspend_seller(session, seller_pid, actor_id: str) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.unsuspend(actor_id),
                               "status.unsuspend", {"actor_id": actor_id})


async def update_commission_rate(session, seller_pid, rate: float, actor_id: str) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.update_commission_rate(rate, actor_id),
                               "commission.update", {"actor_id": actor_id, "rate": rate})


async def verify_document(session, seller_pid, kind: str, actor_id: str) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.mark_document_as_verified(kind),
                               "document.verify", {"actor_id": actor_id, "kind": kind})


async def overwrite_statistics(session, seller_pid, changes: Mapping[str, Any], actor_id: str) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.update_statistics(changes),
                               "statistics.overwrite", {"actor_id": actor_id, "fields": sorted(changes)})


# ---------------------------------------------------------------------------- domain events

async def record_product_delta(session, seller_pid, count: int, increment: bool = True) -> Seller:
    if increment:
        return await change_seller(session, seller_pid, lambda s: s.increment_product_count(count),
                                   "products.increment", {"count": count})
    return await change_seller(session, seller_pid, lambda s: s.decrement_product_count(count),
                               "products.decrement", {"count": count})


async def record_order(session, seller_pid, amount: Optional[int], completed: bool = False) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.record_order(amount, completed),
                               "orders.record", {"completed": completed})


async def record_cancellation(session, seller_pid) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.record_cancellation(), "orders.cancel")


async def record_rating(session, seller_pid, rating: float, increment: bool = True) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.update_rating(rating, increment),
                               "rating.record", {"rating": rating})


async def add_earnings(session, seller_pid, amount: int, pending: bool = True) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.add_earnings(amount, pending),
                               "earnings.add", {"amount": amount, "pending": pending})


async def release_pending_earnings(session, seller_pid, amount: int) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.release_pending_earnings(amount),
                               "earnings.release", {"amount": amount})


async def record_withdrawal(session, seller_pid, amount: int) -> Seller:
    return await change_seller(session, seller_pid, lambda s: s.record_withdrawal(amount),
                               "earnings.withdraw", {"amount": amount})
