
from typing import Any, Optional
from pydantic import BaseModel, Field

# numeric fields stay unconstrained here , range checks live on the Seller entity
# so violations come back as INVALID_ARGUMENT rather than a 422


class SellerOnboardIn(BaseModel):
    shop_name: str = Field(..., max_length=255, example="Saffron Sweets")
    business_type: str = Field(..., example="local")
    shop_description: Optional[str] = None
    shop_image: Optional[str] = Field(None, max_length=1024)
    commission_rate: Optional[float] = None
    cod_enabled: bool = False
    cod_commission_rate: Optional[float] = None

    model_config = {"extra": "forbid"}


class ProfileUpdateIn(BaseModel):
    shop_name: Optional[str] = Field(None, max_length=255)
    shop_description: Optional[str] = None
    shop_image: Optional[str] = Field(None, max_length=1024)
    business_type: Optional[Any] = None   # rejected by the entity , business type is fixed

    model_config = {"extra": "forbid"}


class CodSettingsIn(BaseModel):
    enabled: bool
    rate: Optional[float] = None


class BankDetailsIn(BaseModel):
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    bank_name: Optional[str] = None
    branch_name: Optional[str] = None
    upi_id: Optional[str] = None

    model_config = {"extra": "forbid"}


class AddressIn(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None

    model_config = {"extra": "forbid"}


class StatisticsIn(BaseModel):
    total_products: Optional[int] = None
    active_products: Optional[int] = None
    total_orders: Optional[int] = None
    completed_orders: Optional[int] = None
    cancelled_orders: Optional[int] = None
    total_earnings: Optional[int] = None
    pending_earnings: Optional[int] = None
    withdrawn_amount: Optional[int] = None
    average_rating: Optional[float] = None
    total_ratings: Optional[int] = None
    response_rate: Optional[float] = None
    shipping_accuracy: Optional[float] = None

    model_config = {"extra": "forbid"}


class ApproveIn(BaseModel):
    reason: Optional[str] = None


class BlockIn(BaseModel):
    reason: Optional[str] = None


class SuspendIn(BaseModel):
    days: float
    reason: Optional[str] = None


class CommissionIn(BaseModel):
    rate: float


class CountIn(BaseModel):
    count: int = 1


class OrderEventIn(BaseModel):
    amount: Optional[int] = Field(None, description="Order value in paise")
    completed: bool = False


class RatingIn(BaseModel):
    rating: float
    increment: bool = True


class EarningsIn(BaseModel):
    amount: int = Field(..., description="Amount in paise")
    pending: bool = True


class AmountIn(BaseModel):
    amount: int = Field(..., description="Amount in paise")
