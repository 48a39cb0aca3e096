"""
Unit Tests for Credit & Deposit Calculators

Tests verify credit aggregation, override precedence and security deposits.
"""

import logging
from decimal import Decimal

import pytest

from agreement_engine.calculators.credits import CreditCalculator, aggregate_credits, effective
from agreement_engine.calculators.deposit import DepositCalculator, deposit_for
from agreement_engine.models import (
    AgreementInput,
    AgreementTerm,
    OfficeSpaceLine,
    Overrides,
    PricingContext,
    offices_from_data,
)


@pytest.fixture
def offices():
    return offices_from_data([
        {"id": "o1", "mr_credits": 10, "print_quota_bw": 100, "print_quota_color": 20, "list_price": 13000},
        {"id": "o2", "mr_credits": 5, "print_quota_bw": 50, "print_quota_color": None, "list_price": 7333},
    ])


class TestCreditAggregation:
    """Test summing of per-office allotments."""

    @pytest.fixture
    def calculator(self):
        return CreditCalculator()

    def test_sums_over_office_lines(self, calculator, offices):
        lines = [_office_line("o1"), _office_line("o2")]
        totals = calculator.aggregate(lines, offices)

        assert totals.mr_credits == 15
        assert totals.print_bw == 150
        assert totals.print_color == 20

    def test_same_office_twice_counts_twice(self, calculator, offices):
        totals = calculator.aggregate([_office_line("o1"), _office_line("o1")], offices)

        assert totals.mr_credits == 20

    def test_lookup_miss_contributes_zero(self, calculator, offices, caplog):
        """Unknown office id is silent for the calculation, logged for the host."""
        with caplog.at_level(logging.WARNING):
            totals = calculator.aggregate([_office_line("o1"), _office_line("ghost")], offices)

        assert totals.mr_credits == 10
        assert totals.missing_office_ids == ["ghost"]
        assert "ghost" in caplog.text

    def test_no_lines(self, offices):
        totals = aggregate_credits([], offices)

        assert (totals.mr_credits, totals.print_bw, totals.print_color) == (0, 0, 0)

    def test_offices_mapping_keyed_by_id(self):
        lookup = offices_from_data({"o9": {"mr_credits": 3}})
        totals = aggregate_credits([_office_line("o9")], lookup)

        assert totals.mr_credits == 3

    def test_overrides_applied_per_kind(self, calculator, offices):
        ctx = _make_context(
            [_office_line("o1")],
            offices,
            Overrides(conference_room_credits=0, print_credits_color=99)
        )
        _, allotment = calculator.calculate(ctx)

        assert allotment.conference_room.calculated == 10
        assert allotment.conference_room.effective == 0
        assert allotment.print_bw.override is None
        assert allotment.print_bw.effective == 100
        assert allotment.print_color.effective == 99


class TestOverridePrecedence:
    """Test the None-aware override rule."""

    def test_no_override_tracks_calculated(self):
        assert effective(5, None) == 5

    def test_zero_override_wins(self):
        assert effective(5, 0) == 0

    def test_positive_override_wins(self):
        assert effective(5, 12) == 12

    def test_effective_is_never_none_without_override(self):
        assert effective(5, None) is not None


class TestSecurityDeposits:
    """Test 200% + 18% VAT deposits for both phases."""

    @pytest.fixture
    def calculator(self):
        return DepositCalculator()

    def test_fixed_uses_discounted_price(self):
        """13000 at 3% → 12610; 12610 * 2 * 1.18 = 29759.6 → 29760."""
        lines = [_office_line("o1", 13000, discount=3)]

        assert deposit_for("fixed", lines) == 29760

    def test_continuous_uses_list_price(self):
        """13000 * 2 * 1.18 = 30680, discount ignored."""
        lines = [_office_line("o1", 13000, discount=3)]

        assert deposit_for("continuous", lines) == 30680

    def test_multiple_lines(self, calculator):
        """Fixed fees 8500 + 7113 = 15613 → 36846.68; list 17333 → 40905.88."""
        lines = [
            _office_line("o1", 10000, discount=10, special=5),
            _office_line("o2", 7333, discount=3),
        ]

        assert calculator.deposit_for("fixed", lines) == 36847
        assert calculator.deposit_for("continuous", lines) == 40906

    def test_no_lines_no_deposit(self, calculator):
        assert calculator.deposit_for("fixed", []) == 0
        assert calculator.deposit_for("continuous", []) == 0

    def test_unknown_phase_rejected(self, calculator):
        with pytest.raises(ValueError, match="Invalid deposit phase"):
            calculator.deposit_for("weekly", [])

    def test_overrides_independent(self, calculator, offices):
        ctx = _make_context(
            [_office_line("o1", 13000, discount=3)],
            offices,
            Overrides(security_deposit_continuous=0)
        )
        deposits = calculator.calculate(ctx)

        assert deposits.fixed.effective == 29760
        assert deposits.continuous.calculated == 30680
        assert deposits.continuous.effective == 0


def _office_line(office_id, list_price=1000, discount=0, special=0) -> OfficeSpaceLine:
    return OfficeSpaceLine(
        list_price=Decimal(str(list_price)),
        discount_percentage=Decimal(str(discount)),
        special_discount_percentage=Decimal(str(special)),
        office_id=office_id
    )


def _make_context(lines, offices, overrides=None) -> PricingContext:
    """Helper to create PricingContext for credit and deposit tests."""
    agreement = AgreementInput(
        term=AgreementTerm(has_fixed_term=False, start_date="2025-01-01"),
        office_spaces=lines,
        overrides=overrides or Overrides(),
        offices=offices
    )
    return PricingContext(agreement=agreement)
