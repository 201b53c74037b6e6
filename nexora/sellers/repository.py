
import uuid
from typing import Any, Dict, List, Optional
from fastapi import HTTPException,status
from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from nexora.common.utils import round_half_up
from nexora.schema.seller import Seller, SellerStatus
from nexora.sellers.constants import logger


def _parse_public_id(seller_pid) -> Optional[uuid.UUID]:
    if isinstance(seller_pid, uuid.UUID):
        return seller_pid
    try:
        return uuid.UUID(str(seller_pid))
    except ValueError:
        return None


async def get_seller_by_public_id(session: AsyncSession, seller_pid) -> Seller:
    pid = _parse_public_id(seller_pid)
    seller = None
    if pid is not None:
        res = await session.execute(select(Seller).where(Seller.public_id == pid))
        seller = res.scalar_one_or_none()

    if seller is None:
        logger.warning("seller.not_found", extra={"seller_public_id": str(seller_pid)})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Seller not found")
    return seller


async def get_seller_by_user_id(session: AsyncSession, user_id: str) -> Seller:
    res = await session.execute(select(Seller).where(Seller.user_id == user_id))
    seller = res.scalar_one_or_none()
    if seller is None:
        logger.warning("seller.not_found", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No seller account for this user")
    return seller


async def seller_exists_for_user(session: AsyncSession, user_id: str) -> bool:
    res = await session.execute(select(Seller.id).where(Seller.user_id == user_id))
    return res.first() is not None


async def insert_seller(session: AsyncSession, seller: Seller) -> Seller:
    session.add(seller)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning("seller.create.integrity_error", extra={"user_id": seller.user_id})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Seller account already exists for this user")
    return seller


async def save_seller(session: AsyncSession, seller: Seller) -> Seller:
    """Write the whole record back. A stale version raises StaleDataError."""
    session.add(seller)
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return seller


# ------------------------------------------------------------------------------------------- reads

def _operating():
    return (Seller.status == SellerStatus.APPROVED, Seller.is_active.is_(True))


async def find_sellers_by_status(session: AsyncSession, seller_status: SellerStatus,
                                 limit: int = 100, offset: int = 0) -> List[Seller]:
    stmt = (
        select(Seller)
        .where(Seller.status == seller_status)
        .order_by(desc(Seller.created_at), desc(Seller.id))
        .offset(offset)
        .limit(limit)
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def find_active_sellers(session: AsyncSession, limit: int = 100, offset: int = 0) -> List[Seller]:
    stmt = (
        select(Seller)
        .where(*_operating())
        .order_by(Seller.shop_name, Seller.id)
        .offset(offset)
        .limit(limit)
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def find_top_rated_sellers(session: AsyncSession, limit: int = 10) -> List[Seller]:
    stmt = (
        select(Seller)
        .where(*_operating())
        .order_by(desc(Seller.average_rating), desc(Seller.total_ratings), Seller.id)
        .limit(limit)
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def search_sellers(session: AsyncSession, text: str, limit: int = 20) -> List[Seller]:
    term = (text or "").strip()
    if not term:
        return []
    # escape LIKE wildcards so user input matches literally
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    stmt = (
        select(Seller)
        .where(*_operating(), func.lower(Seller.shop_name).like(f"%{escaped.lower()}%", escape="\\"))
        .order_by(desc(Seller.average_rating), Seller.shop_name)
        .limit(limit)
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def get_sellers_overview(session: AsyncSession) -> Dict[str, Any]:
    stmt = select(
        func.count(Seller.id),
        func.avg(Seller.average_rating),
        func.coalesce(func.sum(Seller.total_earnings), 0),
        func.coalesce(func.sum(Seller.total_orders), 0),
    ).where(*_operating())

    count, avg_rating, earnings, orders = (await session.execute(stmt)).one()
    return {
        "total_sellers": int(count or 0),
        "average_rating": round_half_up(float(avg_rating)) if avg_rating is not None else 0.0,
        "total_earnings": int(earnings or 0),
        "total_orders": int(orders or 0),
    }
