from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apps.storefront.config import settings
from apps.storefront.db import get_store
from apps.storefront.services.auth import require_user
from apps.storefront.services.errors import LoyaltyError
from apps.storefront.services.loyalty import tier_calculator as calc
from apps.storefront.services.loyalty.loyalty_repository import LoyaltyRepository
from apps.storefront.services.loyalty.loyalty_service import LoyaltyService
from apps.storefront.utils.envelope import ok, error

router = APIRouter(prefix="/loyalty", tags=["Loyalty"], dependencies=[Depends(require_user)])


class OrderAwardRequest(BaseModel):
    order_total: Decimal = Field(ge=0)
    order_id: str


class RedeemRequest(BaseModel):
    points: int = Field(gt=0)
    description: str = "Points redeemed"


class BonusRequest(BaseModel):
    points: int = Field(ge=0)
    description: Optional[str] = Field(default=None)


def get_loyalty_service() -> LoyaltyService:
    if not settings.SETTINGS["loyalty_enabled"]:
        raise LoyaltyError("Loyalty program is disabled", 503)
    store = get_store()
    if not store:
        raise LoyaltyError("Data store unavailable: DATABASE_URL is not set", 500)
    return LoyaltyService(LoyaltyRepository(store))


# -----------------------------
# Calculator lookups (no store)
# -----------------------------
@router.get("/tiers/{tier}/benefits")
def loyalty_tier_benefits(tier: str):
    return ok(data={"tier": tier, **calc.tier_benefits(tier).to_dict()})


@router.get("/convert/points/{points}")
def loyalty_points_to_currency(points: int):
    return ok(data={"points": points, "amount": calc.format_currency(calc.points_to_currency(points))})


@router.get("/convert/currency/{amount}")
def loyalty_currency_to_points(amount: Decimal):
    return ok(data={"amount": str(amount), "points": calc.currency_to_points(amount)})


# -----------------------------
# Customer ledger
# -----------------------------
@router.get("/{customer_id}")
def loyalty_card(customer_id: str, service: LoyaltyService = Depends(get_loyalty_service)):
    return ok(data=service.get_loyalty_card(customer_id).to_dict())


@router.get("/{customer_id}/transactions")
def loyalty_transactions(customer_id: str, service: LoyaltyService = Depends(get_loyalty_service)):
    history = service.get_transaction_history(customer_id)
    return ok(data=[t.to_dict() for t in history], meta={"count": len(history)})


@router.post("/{customer_id}/orders")
def loyalty_award_order(
    customer_id: str,
    body: OrderAwardRequest,
    service: LoyaltyService = Depends(get_loyalty_service),
):
    tx = service.award_points_for_order(customer_id, body.order_total, body.order_id)
    return ok(data=tx.to_dict(), status=201)


@router.post("/{customer_id}/redeem")
def loyalty_redeem(
    customer_id: str,
    body: RedeemRequest,
    service: LoyaltyService = Depends(get_loyalty_service),
):
    result = service.redeem_points(customer_id, body.points, body.description)
    if not result.success:
        return error(result.error or "Redemption failed", "insufficient_points", 409, data=result.to_dict())
    return ok(data=result.to_dict(), status=201)


@router.post("/{customer_id}/bonus")
def loyalty_bonus(
    customer_id: str,
    body: BonusRequest,
    service: LoyaltyService = Depends(get_loyalty_service),
):
    tx = service.award_bonus_points(customer_id, body.points, body.description or "Bonus points")
    return ok(data=tx.to_dict(), status=201)


@router.post("/{customer_id}/bonus/birthday")
def loyalty_birthday_bonus(customer_id: str, service: LoyaltyService = Depends(get_loyalty_service)):
    return ok(data=service.award_birthday_bonus(customer_id).to_dict(), status=201)


@router.post("/{customer_id}/bonus/referral")
def loyalty_referral_bonus(customer_id: str, service: LoyaltyService = Depends(get_loyalty_service)):
    return ok(data=service.award_referral_bonus(customer_id).to_dict(), status=201)
