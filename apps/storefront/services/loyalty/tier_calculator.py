"""
Tier & Conversion Calculator
============================

Purpose:
- Map a point total to a tier (bronze/silver/gold/platinum).
- Look up per-tier benefits.
- Convert between points and currency for redemption.

No DB access, no HTTP, no shared mutable state. Tier and benefit tables are
read-only mappings.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

D = Decimal

TierName = Literal["bronze", "silver", "gold", "platinum"]

POINTS_PER_CURRENCY_UNIT_SPENT = D("1")  # 1 point per $1 spent
POINTS_PER_CURRENCY_UNIT_REDEEMED = D("100")  # 100 points = $1
MIN_REDEEMABLE_POINTS = 100

# Ordered lowest to highest; thresholds strictly increasing.
TIER_THRESHOLDS: Mapping[str, int] = MappingProxyType(
    {
        "bronze": 0,
        "silver": 100,
        "gold": 500,
        "platinum": 1000,
    }
)

TIER_ORDER: Tuple[str, ...] = tuple(TIER_THRESHOLDS)
LOWEST_TIER = TIER_ORDER[0]


@dataclass(frozen=True)
class TierBenefits:
    discount: Decimal
    perks: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discount": float(self.discount),
            "perks": list(self.perks),
        }


TIER_BENEFITS: Mapping[str, TierBenefits] = MappingProxyType(
    {
        "bronze": TierBenefits(
            discount=D("0"),
            perks=("Earn 1 point per $1 spent",),
        ),
        "silver": TierBenefits(
            discount=D("0.05"),
            perks=(
                "Earn 1 point per $1 spent",
                "5% discount on all orders",
                "Early access to new products",
            ),
        ),
        "gold": TierBenefits(
            discount=D("0.10"),
            perks=(
                "Earn 1 point per $1 spent",
                "10% discount on all orders",
                "Free delivery",
                "Birthday bonus (50 points)",
            ),
        ),
        "platinum": TierBenefits(
            discount=D("0.15"),
            perks=(
                "Earn 1 point per $1 spent",
                "15% discount on all orders",
                "Free delivery",
                "Birthday bonus (100 points)",
                "Priority support",
            ),
        ),
    }
)


def _to_decimal(v: Any) -> Decimal:
    if isinstance(v, Decimal):
        return v
    return D(str(v))


# -----------------------------
# Tiers
# -----------------------------
def tier_of(points: int) -> str:
    """
    Highest tier whose threshold is <= points. Boundaries are inclusive.
    """
    current = LOWEST_TIER
    for name, threshold in TIER_THRESHOLDS.items():
        if points >= threshold:
            current = name
    return current


def tier_benefits(tier: str) -> TierBenefits:
    return TIER_BENEFITS.get(tier, TIER_BENEFITS[LOWEST_TIER])


def next_tier(tier: str) -> Optional[str]:
    if tier not in TIER_THRESHOLDS:
        tier = LOWEST_TIER
    idx = TIER_ORDER.index(tier)
    if idx + 1 >= len(TIER_ORDER):
        return None
    return TIER_ORDER[idx + 1]


def points_to_next_tier(current_points: int, tier: str) -> int:
    nxt = next_tier(tier)
    if nxt is None:
        return 0
    return TIER_THRESHOLDS[nxt] - current_points


def progress_to_next_tier(current_points: int, tier: str) -> float:
    """
    Percentage of the way from this tier's threshold to the next one.
    Saturates at 100 for the top tier.
    """
    nxt = next_tier(tier)
    if nxt is None:
        return 100.0
    this_threshold = TIER_THRESHOLDS.get(tier, TIER_THRESHOLDS[LOWEST_TIER])
    next_threshold = TIER_THRESHOLDS[nxt]
    return (current_points - this_threshold) / (next_threshold - this_threshold) * 100


# -----------------------------
# Earning
# -----------------------------
def calculate_order_points(order_total: Any) -> int:
    points = _to_decimal(order_total) * POINTS_PER_CURRENCY_UNIT_SPENT
    return int(points.to_integral_value(rounding=ROUND_FLOOR))


# -----------------------------
# Redemption conversion
# -----------------------------
def points_to_currency(points: int) -> Decimal:
    return _to_decimal(points) / POINTS_PER_CURRENCY_UNIT_REDEEMED


def currency_to_points(amount: Any) -> int:
    """
    Points needed for a currency amount, rounded up so the customer is never
    charged less than the point equivalent.
    """
    points = _to_decimal(amount) * POINTS_PER_CURRENCY_UNIT_REDEEMED
    return int(points.to_integral_value(rounding=ROUND_CEILING))


def can_redeem(points: int) -> bool:
    return points >= MIN_REDEEMABLE_POINTS


def format_currency(amount: Decimal) -> str:
    return str(amount.quantize(D("0.01"), rounding=ROUND_HALF_UP))
