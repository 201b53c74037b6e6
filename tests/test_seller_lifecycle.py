from datetime import timedelta
import pytest
from nexora.common.custom_exceptions import InvalidArgument
from nexora.common.utils import now
from nexora.schema.seller import (DEFAULT_APPROVAL_REASON, UNSUSPEND_REASON, BusinessType, Seller, SellerStatus)


def new_seller(**kw) -> Seller:
    params = dict(user_id="u-1", shop_name="  Saffron Sweets ", business_type="local", commission_rate=10.0)
    params.update(kw)
    return Seller.onboard(**params)


def test_onboard_starts_pending():
    seller = new_seller()

    assert seller.status == SellerStatus.PENDING
    assert seller.shop_name == "Saffron Sweets"
    assert seller.business_type == BusinessType.LOCAL
    assert seller.is_active is True
    assert seller.total_products == 0 and seller.average_rating == 0.0
    assert seller.public_id is not None
    assert seller.last_activity_at is not None


@pytest.mark.parametrize("kw, field", [
    ({"shop_name": "   "}, "shop_name"),
    ({"business_type": "wholesale"}, "business_type"),
    ({"commission_rate": 101}, "commission_rate"),
    ({"commission_rate": -0.5}, "commission_rate"),
    ({"cod_commission_rate": 150}, "cod_commission_rate"),
    ({"user_id": ""}, "user_id"),
])
def test_onboard_rejects_bad_input(kw, field):
    with pytest.raises(InvalidArgument) as exc:
        new_seller(**kw)
    assert exc.value.field == field


def test_approve_sets_audit_fields():
    seller = new_seller()
    seller.approve("admin-1")

    assert seller.status == SellerStatus.APPROVED
    assert seller.status_reason == DEFAULT_APPROVAL_REASON
    assert seller.status_changed_by == "admin-1"
    assert seller.approved_at is not None
    assert seller.approved_at == seller.status_changed_at


def test_approve_keeps_given_reason():
    seller = new_seller()
    seller.approve("admin-1", "KYC looks fine")
    assert seller.status_reason == "KYC looks fine"


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_block_without_reason_is_rejected(reason):
    seller = new_seller()
    seller.approve("admin-1")

    with pytest.raises(InvalidArgument):
        seller.block("admin-1", reason)

    assert seller.status == SellerStatus.APPROVED
    assert seller.is_active is True
    assert seller.status_reason == DEFAULT_APPROVAL_REASON


def test_block_deactivates():
    seller = new_seller()
    seller.approve("admin-1")
    seller.block("admin-2", "counterfeit goods")

    assert seller.status == SellerStatus.BLOCKED
    assert seller.is_active is False
    assert seller.status_reason == "counterfeit goods"
    assert seller.status_changed_by == "admin-2"


def test_blocked_seller_can_be_approved_again():
    seller = new_seller()
    seller.block("admin-1", "fraud check")
    seller.approve("admin-1")

    assert seller.status == SellerStatus.APPROVED
    assert seller.is_active is True


def test_suspend_then_unsuspend():
    seller = new_seller()
    seller.approve("admin-1")
    before = now()
    seller.suspend("admin-1", 7, "policy")

    assert seller.status == SellerStatus.SUSPENDED
    assert seller.status_reason == "policy"
    assert seller.suspended_until >= before + timedelta(days=7)
    assert seller.suspended_until <= now() + timedelta(days=7)
    assert seller.is_suspension_active() is True

    seller.unsuspend("admin-2")

    assert seller.status == SellerStatus.APPROVED
    assert seller.suspended_until is None
    assert seller.status_reason == UNSUSPEND_REASON
    assert seller.status_changed_by == "admin-2"
    assert seller.is_suspension_active() is False


def test_suspend_fractional_days():
    seller = new_seller()
    seller.suspend("admin-1", 0.5)
    delta = seller.suspended_until - seller.status_changed_at
    assert delta == timedelta(hours=12)
    assert seller.status_reason is None


def test_suspend_non_positive_days_lands_in_past():
    seller = new_seller()
    seller.suspend("admin-1", -1, "oops")

    assert seller.status == SellerStatus.SUSPENDED
    assert seller.suspended_until < now()
    # expired suspension is not lifted automatically
    assert seller.is_suspension_active() is False
    assert seller.status == SellerStatus.SUSPENDED


def test_suspend_rejects_non_numeric_days():
    seller = new_seller()
    with pytest.raises(InvalidArgument):
        seller.suspend("admin-1", "seven")
    assert seller.status == SellerStatus.PENDING


def test_unsuspend_from_pending_approves():
    seller = new_seller()
    seller.unsuspend("admin-1")
    assert seller.status == SellerStatus.APPROVED


def test_status_change_refreshes_activity():
    seller = new_seller()
    first = seller.last_activity_at
    seller.approve("admin-1")
    assert seller.last_activity_at >= first
    assert seller.updated_at == seller.last_activity_at


def test_update_profile_rejects_business_type():
    seller = new_seller()
    with pytest.raises(InvalidArgument) as exc:
        seller.update_profile({"business_type": "dropship"})
    assert exc.value.field == "business_type"
    assert seller.business_type == BusinessType.LOCAL


def test_update_profile_changes_shop_fields():
    seller = new_seller()
    seller.update_profile({"shop_name": " Kesar House ", "shop_image": "https://cdn.example/k.png"})
    assert seller.shop_name == "Kesar House"
    assert seller.shop_image == "https://cdn.example/k.png"

    with pytest.raises(InvalidArgument):
        seller.update_profile({"shop_name": ""})
    assert seller.shop_name == "Kesar House"


@pytest.mark.parametrize("days", [float("nan"), float("inf"), float("-inf"), 1e7, -1e7, 1e12])
def test_suspend_rejects_unrepresentable_days(days):
    seller = new_seller()
    seller.approve("admin-1")
    changed_at = seller.status_changed_at
    touched_at = seller.last_activity_at

    with pytest.raises(InvalidArgument) as exc:
        seller.suspend("admin-2", days, "policy")

    assert exc.value.field == "days"
    assert seller.status == SellerStatus.APPROVED
    assert seller.status_reason == DEFAULT_APPROVAL_REASON
    assert seller.status_changed_by == "admin-1"
    assert seller.status_changed_at == changed_at
    assert seller.last_activity_at == touched_at
    assert seller.suspended_until is None
