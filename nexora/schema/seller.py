import math
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from numbers import Real
from typing import Any, Dict, Iterable, Mapping, Optional
from pydantic import BaseModel
from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlmodel import Column, SQLModel, Field
from uuid6 import uuid7
from nexora.common.custom_exceptions import InvalidArgument
from nexora.common.utils import now, round_half_up


class SellerStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    BLOCKED = "blocked"
    SUSPENDED = "suspended"


class BusinessType(str, Enum):
    LOCAL = "local"
    DROPSHIP = "dropship"


class DocumentKind(str, Enum):
    GST = "gst"
    PAN = "pan"
    BANK = "bank"
    ADDRESS = "address"


DEFAULT_APPROVAL_REASON = "Seller account approved"
UNSUSPEND_REASON = "Suspension lifted"

BANK_DETAIL_FIELDS = ("account_holder_name", "account_number", "ifsc_code", "bank_name", "branch_name", "upi_id")
ADDRESS_FIELDS = ("street", "city", "state", "country", "zip_code", "gst_number", "pan_number")
PROFILE_FIELDS = ("shop_name", "shop_description", "shop_image")

# statistics field -> (min, max, integral)
STATISTICS_BOUNDS: Dict[str, tuple] = {
    "total_products": (0, None, True),
    "active_products": (0, None, True),
    "total_orders": (0, None, True),
    "completed_orders": (0, None, True),
    "cancelled_orders": (0, None, True),
    "total_earnings": (0, None, True),
    "pending_earnings": (0, None, True),
    "withdrawn_amount": (0, None, True),
    "average_rating": (0, 5, False),
    "total_ratings": (0, None, True),
    "response_rate": (0, 100, False),
    "shipping_accuracy": (0, 100, False),
}

_json_type = JSON().with_variant(JSONB, "postgresql")

_version_col = Column("version", Integer, nullable=False)


def _enum_column(enum_cls, name: str, **kw) -> Column:
    return Column(SAEnum(enum_cls, name=name, native_enum=False, length=16,
                         values_callable=lambda e: [m.value for m in e]), **kw)


def _require_number(value: Any, field: str, low: Optional[float] = None, high: Optional[float] = None,
                    integral: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgument(f"{field} must be a number", field=field)
    if not math.isfinite(value):
        raise InvalidArgument(f"{field} must be a finite number", field=field)
    if integral and value != int(value):
        raise InvalidArgument(f"{field} must be a whole number", field=field)
    if low is not None and not value >= low:
        raise InvalidArgument(f"{field} must be >= {low}", field=field)
    if high is not None and not value <= high:
        raise InvalidArgument(f"{field} must be <= {high}", field=field)


def _require_rate(value: Any, field: str) -> None:
    _require_number(value, field, 0, 100)


def _require_known_keys(changes: Mapping[str, Any], allowed: Iterable[str], field: str) -> None:
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise InvalidArgument(f"Unknown {field} field(s): {', '.join(unknown)}", field=field)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # sqlite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SellerEligibility(BaseModel):
    can_list_products: bool
    can_accept_orders: bool
    can_withdraw_earnings: bool
    can_use_cod: bool
    can_accept_dropship: bool


class Seller(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    public_id: uuid.UUID = Field(
        default_factory=uuid7,
        sa_column=Column(UUID(as_uuid=True), unique=True, index=True, nullable=False)
    )
    user_id: str = Field(sa_column=Column(String(64), unique=True, index=True, nullable=False))  # external user id, one seller per user

    shop_name: str = Field(sa_column=Column(String(255), nullable=False))
    shop_description: Optional[str] = Field(default=None, sa_column=Column(Text(), nullable=True))
    shop_image: Optional[str] = Field(default=None, sa_column=Column(String(1024), nullable=True))
    business_type: BusinessType = Field(sa_column=_enum_column(BusinessType, "business_type", nullable=False))

    commission_rate: float = Field(default=0.0, sa_column=Column(Float, nullable=False, default=0.0))
    cod_enabled: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    cod_commission_rate: float = Field(default=0.0, sa_column=Column(Float, nullable=False, default=0.0))

    status: SellerStatus = Field(default=SellerStatus.PENDING,
        sa_column=_enum_column(SellerStatus, "seller_status", nullable=False, index=True, default=SellerStatus.PENDING))
    status_reason: Optional[str] = Field(default=None, sa_column=Column(Text(), nullable=True))
    status_changed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    status_changed_by: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    approved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    suspended_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    # documents, always reassigned as a new dict so the ORM sees the change
    bank_details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(_json_type, nullable=False))
    address: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(_json_type, nullable=False))

    # statistics , money in paise
    total_products: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    active_products: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    total_orders: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    completed_orders: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    cancelled_orders: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    total_earnings: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    pending_earnings: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    withdrawn_amount: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    average_rating: float = Field(default=0.0, sa_column=Column(Float, nullable=False, default=0.0, index=True))
    total_ratings: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    response_rate: float = Field(default=0.0, sa_column=Column(Float, nullable=False, default=0.0))
    shipping_accuracy: float = Field(default=0.0, sa_column=Column(Float, nullable=False, default=0.0))

    gst_verified: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    pan_verified: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    bank_verified: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    address_verified: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    document_submitted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    document_verified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))
    last_activity_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text(), nullable=True))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now, onupdate=now))

    #* optimistic concurrency token , a stale flush raises StaleDataError
    version: Optional[int] = Field(default=None, sa_column=_version_col)

    __mapper_args__ = {"version_id_col": _version_col}

    # ------------------------------------------------------------------ creation

    @classmethod
    def onboard(cls, user_id: str, shop_name: str, business_type: Any, commission_rate: float,
                cod_commission_rate: float = 0.0, cod_enabled: bool = False,
                shop_description: Optional[str] = None, shop_image: Optional[str] = None) -> "Seller":
        if not user_id:
            raise InvalidArgument("user_id is required", field="user_id")
        if not shop_name or not shop_name.strip():
            raise InvalidArgument("shop_name is required", field="shop_name")
        try:
            business_type = BusinessType(business_type)
        except ValueError:
            raise InvalidArgument(f"Unknown business_type: {business_type}", field="business_type")
        _require_rate(commission_rate, "commission_rate")
        _require_rate(cod_commission_rate, "cod_commission_rate")
        if not isinstance(cod_enabled, bool):
            raise InvalidArgument("cod_enabled must be a boolean", field="cod_enabled")

        seller = cls(
            user_id=user_id,
            shop_name=shop_name.strip(),
            shop_description=shop_description,
            shop_image=shop_image,
            business_type=business_type,
            commission_rate=float(commission_rate),
            cod_enabled=cod_enabled,
            cod_commission_rate=float(cod_commission_rate),
            status=SellerStatus.PENDING,
        )
        seller._touch()
        return seller

    def _touch(self, ts: Optional[datetime] = None) -> datetime:
        ts = ts or now()
        self.last_activity_at = ts
        self.updated_at = ts
        return ts

    def _set_status(self, status: SellerStatus, actor_id: Optional[str], reason: Optional[str],
                    ts: Optional[datetime] = None) -> datetime:
        ts = self._touch(ts)
        self.status = status
        self.status_reason = reason
        self.status_changed_at = ts
        self.status_changed_by = actor_id
        return ts

    # ----------------------------------------------------------------- lifecycle

    def approve(self, actor_id: str, reason: Optional[str] = None) -> None:
        ts = self._set_status(SellerStatus.APPROVED, actor_id, reason or DEFAULT_APPROVAL_REASON)
        self.approved_at = ts
        self.is_active = True

    def block(self, actor_id: str, reason: Optional[str]) -> None:
        if not reason or not reason.strip():
            raise InvalidArgument("A reason is required to block a seller", field="reason")
        self._set_status(SellerStatus.BLOCKED, actor_id, reason)
        self.is_active = False

    def suspend(self, actor_id: str, days: float, reason: Optional[str] = None) -> None:
        # non-positive days are accepted and give a suspended_until in the past
        _require_number(days, "days")
        ts = now()
        try:
            until = ts + timedelta(days=days)
        except (OverflowError, ValueError):
            raise InvalidArgument("days is out of range", field="days")
        self._set_status(SellerStatus.SUSPENDED, actor_id, reason, ts)
        self.suspended_until = until

    def unsuspend(self, actor_id: str) -> None:
        self._set_status(SellerStatus.APPROVED, actor_id, UNSUSPEND_REASON)
        self.suspended_until = None
        self.is_active = True

    def is_suspension_active(self, at: Optional[datetime] = None) -> bool:
        """Whether ``suspended_until`` is still ahead of ``at``. Never changes state."""
        until = _as_utc(self.suspended_until)
        if self.status != SellerStatus.SUSPENDED or until is None:
            return False
        return until > (at or now())

    # ------------------------------------------------------- commercial / profile

    def update_profile(self, changes: Mapping[str, Any]) -> None:
        if "business_type" in changes:
            raise InvalidArgument("business_type cannot be changed after onboarding", field="business_type")
        _require_known_keys(changes, PROFILE_FIELDS, "profile")
        if "shop_name" in changes and (not changes["shop_name"] or not str(changes["shop_name"]).strip()):
            raise InvalidArgument("shop_name cannot be empty", field="shop_name")

        for key, value in changes.items():
            setattr(self, key, value.strip() if key == "shop_name" else value)
        self._touch()

    def update_commission_rate(self, rate: float, actor_id: Optional[str] = None) -> None:
        _require_rate(rate, "commission_rate")
        self.commission_rate = float(rate)
        self._touch()

    def update_cod_settings(self, enabled: bool, rate: Optional[float] = None) -> None:
        if not isinstance(enabled, bool):
            raise InvalidArgument("enabled must be a boolean", field="cod_enabled")
        if rate is not None:
            _require_rate(rate, "cod_commission_rate")
            self.cod_commission_rate = float(rate)
        self.cod_enabled = enabled
        self._touch()

    def update_bank_details(self, changes: Mapping[str, Any]) -> None:
        _require_known_keys(changes, BANK_DETAIL_FIELDS, "bank_details")
        self.bank_details = {**(self.bank_details or {}), **changes, "is_verified": False, "verified_at": None}
        self.bank_verified = False
        self._touch()

    def update_address(self, changes: Mapping[str, Any]) -> None:
        _require_known_keys(changes, ADDRESS_FIELDS, "address")
        self.address = {**(self.address or {}), **changes}
        self.address_verified = False
        self._touch()

    # ---------------------------------------------------------------- statistics

    def update_statistics(self, changes: Mapping[str, Any]) -> None:
        """Direct overwrite of statistics fields, no aggregation."""
        _require_known_keys(changes, STATISTICS_BOUNDS, "statistics")
        for key, value in changes.items():
            low, high, integral = STATISTICS_BOUNDS[key]
            _require_number(value, key, low, high, integral)

        for key, value in changes.items():
            setattr(self, key, int(value) if STATISTICS_BOUNDS[key][2] else float(value))
        self._touch()

    def increment_product_count(self, n: int = 1) -> None:
        _require_number(n, "count", 0, integral=True)
        self.total_products += int(n)
        self.active_products += int(n)
        self._touch()

    def decrement_product_count(self, n: int = 1) -> None:
        _require_number(n, "count", 0, integral=True)
        self.total_products = max(0, self.total_products - int(n))
        self.active_products = max(0, self.active_products - int(n))
        self._touch()

    def record_order(self, amount: Optional[int] = None, completed: bool = False) -> None:
        # amount is informational , earnings arrive separately through add_earnings
        self.total_orders += 1
        if completed:
            self.completed_orders += 1
        self._touch()

    def record_cancellation(self) -> None:
        self.cancelled_orders += 1
        self._touch()

    def update_rating(self, new_rating: float, increment: bool = True) -> None:
        # increment=False has no separate behaviour , every call adds one rating
        _require_number(new_rating, "rating", 0, 5)
        total = self.total_ratings
        self.average_rating = round_half_up((self.average_rating * total + new_rating) / (total + 1))
        self.total_ratings = total + 1
        self._touch()

    def add_earnings(self, amount: int, pending: bool = True) -> None:
        _require_number(amount, "amount", 0, integral=True)
        if pending:
            self.pending_earnings += int(amount)
        else:
            self.total_earnings += int(amount)
        self._touch()

    def release_pending_earnings(self, amount: int) -> None:
        _require_number(amount, "amount", 0, self.pending_earnings, integral=True)
        self.pending_earnings -= int(amount)
        self.total_earnings += int(amount)
        self._touch()

    def record_withdrawal(self, amount: int) -> None:
        _require_number(amount, "amount", 0, integral=True)
        if amount > self.total_earnings:
            raise InvalidArgument("Withdrawal amount exceeds available earnings", field="amount")
        self.total_earnings -= int(amount)
        self.withdrawn_amount += int(amount)
        self._touch()

    # -------------------------------------------------------------- verification

    def submit_documents(self) -> None:
        self.document_submitted_at = self._touch()

    def mark_document_as_verified(self, kind: Any) -> None:
        try:
            kind = DocumentKind(kind)
        except ValueError:
            raise InvalidArgument(f"Unknown document kind: {kind}", field="kind")

        ts = self._touch()
        setattr(self, f"{kind.value}_verified", True)
        self.document_verified_at = ts
        if kind == DocumentKind.BANK:
            self.bank_details = {**(self.bank_details or {}), "is_verified": True, "verified_at": ts.isoformat()}

    # --------------------------------------------------------------- projections

    def get_eligibility(self) -> SellerEligibility:
        operating = self.status == SellerStatus.APPROVED and self.is_active
        return SellerEligibility(
            can_list_products=operating,
            can_accept_orders=operating,
            can_withdraw_earnings=operating and self.bank_verified and self.total_earnings > 0,
            can_use_cod=operating and self.cod_enabled,
            can_accept_dropship=operating and self.business_type == BusinessType.DROPSHIP,
        )

    def get_statistics(self) -> Dict[str, Any]:
        return {key: getattr(self, key) for key in STATISTICS_BOUNDS}

    def get_summary(self) -> Dict[str, Any]:
        return {
            "public_id": str(self.public_id),
            "shop_name": self.shop_name,
            "shop_description": self.shop_description,
            "shop_image": self.shop_image,
            "business_type": self.business_type.value,
            "status": self.status.value,
            "is_active": self.is_active,
            "commission_rate": self.commission_rate,
            "cod_enabled": self.cod_enabled,
            "cod_commission_rate": self.cod_commission_rate,
            "average_rating": self.average_rating,
            "total_ratings": self.total_ratings,
            "total_products": self.total_products,
            "total_orders": self.total_orders,
            "suspended_until": self.suspended_until,
            "verification": {
                "gst_verified": self.gst_verified,
                "pan_verified": self.pan_verified,
                "bank_verified": self.bank_verified,
                "address_verified": self.address_verified,
            },
            "eligibility": self.get_eligibility().model_dump(),
        }

    def get_public_profile(self) -> Dict[str, Any]:
        return {
            "public_id": str(self.public_id),
            "shop_name": self.shop_name,
            "shop_description": self.shop_description,
            "shop_image": self.shop_image,
            "business_type": self.business_type.value,
            "average_rating": self.average_rating,
            "total_ratings": self.total_ratings,
            "active_products": self.active_products,
        }
