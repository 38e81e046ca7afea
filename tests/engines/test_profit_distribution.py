"""
Tests for gross profit and its distribution.
"""

from decimal import Decimal

import pytest

from catering_engines.distribution import calculate_gross_profit, distribute_profit
from catering_kernel.domain.rules import Owner, ProfitDistributionRules


class TestGrossProfit:
    """Tests for calculate_gross_profit."""

    def test_conservation(self):
        assert calculate_gross_profit(
            Decimal("720"), Decimal("200"), Decimal("258")
        ) == Decimal("262")

    def test_negative_profit_is_valid(self):
        assert calculate_gross_profit(
            Decimal("100"), Decimal("80"), Decimal("60")
        ) == Decimal("-40")


class TestDistribution:
    """Tests for distribute_profit."""

    def test_default_split(self):
        result = distribute_profit(Decimal("262"), ProfitDistributionRules())

        assert result.retained_amount == Decimal("78.6")
        assert result.distribution_amount == Decimal("183.4")
        assert result.owner_distributions == {
            "owner-a": Decimal("73.36"),
            "owner-b": Decimal("110.04"),
        }

    def test_owner_order_preserved(self):
        rules = ProfitDistributionRules(
            owners=(
                Owner("z", "Zed", Decimal("50")),
                Owner("a", "Ann", Decimal("50")),
            )
        )
        result = distribute_profit(Decimal("100"), rules)
        assert list(result.owner_distributions) == ["z", "a"]

    def test_inconsistent_percentages_applied_as_configured(self):
        rules = ProfitDistributionRules(
            business_retained_percent=Decimal("40"),
            owner_distribution_percent=Decimal("70"),
            owners=(
                Owner("a", "A", Decimal("50")),
                Owner("b", "B", Decimal("60")),
            ),
        )
        result = distribute_profit(Decimal("1000"), rules)

        assert result.retained_amount == Decimal("400")
        assert result.distribution_amount == Decimal("700")
        assert result.owner_distributions["a"] == Decimal("350")
        assert result.owner_distributions["b"] == Decimal("420")

    def test_negative_profit_distributed_unchanged(self):
        result = distribute_profit(Decimal("-100"), ProfitDistributionRules())

        assert result.retained_amount == Decimal("-30")
        assert result.owner_distributions["owner-b"] == Decimal("-42")

    def test_no_owners(self):
        result = distribute_profit(Decimal("100"), ProfitDistributionRules(owners=()))
        assert dict(result.owner_distributions) == {}
        assert result.distribution_amount == Decimal("70")

    def test_owner_distributions_read_only(self):
        result = distribute_profit(Decimal("100"), ProfitDistributionRules())
        with pytest.raises(TypeError):
            result.owner_distributions["owner-a"] = Decimal("0")
