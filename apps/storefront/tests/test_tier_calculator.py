"""
Unit tests for the tier & conversion calculator.
"""

from decimal import Decimal

import pytest

from apps.storefront.services.loyalty import tier_calculator as calc


class TestTierOf:
    """Tier classification from a point total."""

    def test_zero_is_bronze(self):
        assert calc.tier_of(0) == "bronze"

    def test_negative_balance_is_bronze(self):
        assert calc.tier_of(-25) == "bronze"

    @pytest.mark.parametrize(
        "points,expected",
        [
            (99, "bronze"),
            (100, "silver"),
            (499, "silver"),
            (500, "gold"),
            (999, "gold"),
            (1000, "platinum"),
            (25000, "platinum"),
        ],
    )
    def test_boundaries_are_inclusive(self, points, expected):
        assert calc.tier_of(points) == expected

    def test_monotonic_in_points(self):
        ranks = [calc.TIER_ORDER.index(calc.tier_of(p)) for p in range(0, 1500, 7)]
        assert ranks == sorted(ranks)

    def test_thresholds_strictly_increasing(self):
        values = list(calc.TIER_THRESHOLDS.values())
        assert all(a < b for a, b in zip(values, values[1:]))

    def test_thresholds_are_read_only(self):
        with pytest.raises(TypeError):
            calc.TIER_THRESHOLDS["bronze"] = 5


class TestTierBenefits:
    """Per-tier discount and perks lookup."""

    def test_gold(self):
        benefits = calc.tier_benefits("gold")
        assert benefits.discount == Decimal("0.10")
        assert len(benefits.perks) == 4
        assert "Free delivery" in benefits.perks
        assert "Birthday bonus (50 points)" in benefits.perks

    def test_discounts_per_tier(self):
        assert calc.tier_benefits("bronze").discount == Decimal("0")
        assert calc.tier_benefits("silver").discount == Decimal("0.05")
        assert calc.tier_benefits("platinum").discount == Decimal("0.15")

    def test_platinum_perks(self):
        perks = calc.tier_benefits("platinum").perks
        assert "Priority support" in perks
        assert "Birthday bonus (100 points)" in perks

    def test_unknown_tier_falls_back_to_bronze(self):
        assert calc.tier_benefits("diamond") == calc.tier_benefits("bronze")

    def test_to_dict(self):
        assert calc.tier_benefits("silver").to_dict() == {
            "discount": 0.05,
            "perks": [
                "Earn 1 point per $1 spent",
                "5% discount on all orders",
                "Early access to new products",
            ],
        }


class TestConversion:
    """Points <-> currency conversion."""

    def test_points_to_currency(self):
        assert calc.points_to_currency(250) == Decimal("2.5")
        assert calc.points_to_currency(0) == Decimal("0")

    def test_currency_to_points_rounds_up(self):
        assert calc.currency_to_points(Decimal("1.001")) == 101
        assert calc.currency_to_points(Decimal("2.50")) == 250

    def test_currency_to_points_avoids_float_artifacts(self):
        assert calc.currency_to_points(0.29) == 29

    def test_round_trip_never_undercharges(self):
        for p in list(range(0, 300)) + [999, 1001, 123456]:
            assert calc.currency_to_points(calc.points_to_currency(p)) >= p

    def test_format_currency(self):
        assert calc.format_currency(calc.points_to_currency(150)) == "1.50"


class TestOrderPoints:
    """Points earned for an order total."""

    @pytest.mark.parametrize(
        "total,expected",
        [(0, 0), (0.99, 0), (1, 1), (49.99, 49), (Decimal("120.50"), 120), ("75.10", 75)],
    )
    def test_floor_of_total(self, total, expected):
        assert calc.calculate_order_points(total) == expected


class TestProgress:
    """Progress toward the next tier."""

    def test_partway_through_silver(self):
        assert calc.progress_to_next_tier(300, "silver") == pytest.approx(50.0)

    def test_at_threshold_is_zero(self):
        assert calc.progress_to_next_tier(100, "silver") == 0

    def test_top_tier_saturates(self):
        assert calc.progress_to_next_tier(5000, "platinum") == 100.0

    def test_next_tier(self):
        assert calc.next_tier("bronze") == "silver"
        assert calc.next_tier("gold") == "platinum"
        assert calc.next_tier("platinum") is None

    def test_points_to_next_tier(self):
        assert calc.points_to_next_tier(40, "bronze") == 60
        assert calc.points_to_next_tier(1200, "platinum") == 0

    def test_can_redeem_minimum(self):
        assert calc.can_redeem(99) is False
        assert calc.can_redeem(100) is True
