"""
Loyalty Service
===============

Purpose:
- Read a customer's ledger and derive balance, lifetime points and tier.
- Append earn / redeem / bonus transactions.
- Build the loyalty card snapshot consumed by routes.

No HTTP here. Routes should call this.

Store failures propagate to the caller untouched. The only handled failure is
an insufficient balance on redemption, which comes back as a
``RedemptionResult`` rather than an exception.

Redemption is a read followed by a write with nothing in between holding a
lock, so two concurrent redemptions for one customer can both pass the
balance check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from . import tier_calculator as calc
from .loyalty_repository import LoyaltyRepository
from .points_ledger import CustomerLoyalty, LoyaltyTransaction, fold_transactions, now_utc_iso

log = logging.getLogger("storefront.loyalty")

BIRTHDAY_BONUS = 50
REFERRAL_BONUS = 25


@dataclass(frozen=True)
class RedemptionResult:
    success: bool
    transaction: Optional[LoyaltyTransaction] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.transaction is not None:
            out["transaction"] = self.transaction.to_dict()
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class LoyaltyCard:
    customer_id: str
    tier: str
    total_points: int
    lifetime_points: int
    progress_percentage: float
    next_tier: Optional[str]
    points_to_next_tier: int
    benefits: calc.TierBenefits
    can_redeem: bool
    redeem_value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "customer_id": self.customer_id,
            "tier": self.tier,
            "total_points": int(self.total_points),
            "lifetime_points": int(self.lifetime_points),
            "progress_percentage": self.progress_percentage,
            "next_tier": self.next_tier,
            "points_to_next_tier": int(self.points_to_next_tier),
            "benefits": self.benefits.to_dict(),
            "can_redeem": self.can_redeem,
            "redeem_value": calc.format_currency(self.redeem_value),
        }


class LoyaltyService:
    """
    Repo contract:
    - list_transactions(customer_id, newest_first=False) -> List[LoyaltyTransaction]
    - append_transaction(transaction) -> LoyaltyTransaction
    """

    def __init__(self, repo: LoyaltyRepository) -> None:
        self.repo = repo

    # -----------------------------
    # Reads
    # -----------------------------
    def get_customer_loyalty(self, customer_id: str) -> CustomerLoyalty:
        transactions = self.repo.list_transactions(customer_id)
        return fold_transactions(customer_id, transactions)

    def get_transaction_history(self, customer_id: str) -> List[LoyaltyTransaction]:
        return self.repo.list_transactions(customer_id, newest_first=True)

    def get_loyalty_card(self, customer_id: str) -> LoyaltyCard:
        loyalty = self.get_customer_loyalty(customer_id)
        balance = loyalty.total_points
        return LoyaltyCard(
            customer_id=customer_id,
            tier=loyalty.tier,
            total_points=balance,
            lifetime_points=loyalty.lifetime_points,
            progress_percentage=calc.progress_to_next_tier(balance, loyalty.tier),
            next_tier=calc.next_tier(loyalty.tier),
            points_to_next_tier=calc.points_to_next_tier(balance, loyalty.tier),
            benefits=calc.tier_benefits(loyalty.tier),
            can_redeem=calc.can_redeem(balance),
            redeem_value=calc.points_to_currency(balance),
        )

    # -----------------------------
    # Earning
    # -----------------------------
    @staticmethod
    def calculate_order_points(order_total: Any) -> int:
        return calc.calculate_order_points(order_total)

    def award_points_for_order(self, customer_id: str, order_total: Any, order_id: str) -> LoyaltyTransaction:
        points = self.calculate_order_points(order_total)
        total_str = calc.format_currency(Decimal(str(order_total)))

        saved = self.repo.append_transaction(
            LoyaltyTransaction(
                customer_id=customer_id,
                points=points,
                transaction_type="earn",
                description=f"Points earned for order ${total_str}",
                order_id=order_id,
                created_at=now_utc_iso(),
            )
        )
        log.info("earn customer=%s order=%s points=%s", customer_id, order_id, points)
        return saved

    def award_bonus_points(self, customer_id: str, points: int, description: str) -> LoyaltyTransaction:
        saved = self.repo.append_transaction(
            LoyaltyTransaction(
                customer_id=customer_id,
                points=int(points),
                transaction_type="bonus",
                description=description,
                created_at=now_utc_iso(),
            )
        )
        log.info("bonus customer=%s points=%s", customer_id, points)
        return saved

    def award_birthday_bonus(self, customer_id: str) -> LoyaltyTransaction:
        return self.award_bonus_points(customer_id, BIRTHDAY_BONUS, "Birthday bonus")

    def award_referral_bonus(self, customer_id: str) -> LoyaltyTransaction:
        return self.award_bonus_points(customer_id, REFERRAL_BONUS, "Referral bonus")

    # -----------------------------
    # Redemption
    # -----------------------------
    def redeem_points(self, customer_id: str, points_to_redeem: int, description: str) -> RedemptionResult:
        loyalty = self.get_customer_loyalty(customer_id)

        if loyalty.total_points < points_to_redeem:
            log.info(
                "redeem refused customer=%s requested=%s available=%s",
                customer_id,
                points_to_redeem,
                loyalty.total_points,
            )
            return RedemptionResult(
                success=False,
                error=f"Insufficient points. Available: {loyalty.total_points}",
            )

        saved = self.repo.append_transaction(
            LoyaltyTransaction(
                customer_id=customer_id,
                points=-int(points_to_redeem),
                transaction_type="redeem",
                description=description,
                created_at=now_utc_iso(),
            )
        )
        log.info("redeem customer=%s points=%s", customer_id, points_to_redeem)
        return RedemptionResult(success=True, transaction=saved)
