"""
Unit Tests for Termination Notice Resolver

Tests verify both notice rules, fixed-term reconciliation and
governing-agreement selection.
"""

from datetime import date

import pytest

from agreement_engine.calculators.termination import (
    TerminationNoticeResolver,
    resolve_end_date,
    select_governing_agreement,
)
from agreement_engine.models import CLAUSE_4_4, CURRENT_MONTH_PLUS_DAYS, AgreementTerm


class TestClause44:
    """By the 20th → next month end; after the 20th → second month end."""

    @pytest.mark.parametrize("notice_date,expected", [
        ("2025-03-20", "2025-04-30"),
        ("2025-03-21", "2025-05-31"),
        ("2025-03-01", "2025-04-30"),
        ("2025-11-10", "2025-12-31"),
        ("2025-12-25", "2026-02-28"),
        ("2024-12-31", "2025-02-28"),
        ("2025-01-31", "2025-03-31"),
        ("2023-12-21", "2024-02-29"),
    ])
    def test_cutoff(self, notice_date, expected):
        assert resolve_end_date(notice_date, _term(CLAUSE_4_4)) == expected


class TestCurrentMonthPlusDays:
    """Notice date + N days, rounded up to month end."""

    def test_plus_180_days(self):
        """2025-01-10 + 180 days = 2025-07-09 → 2025-07-31."""
        assert resolve_end_date("2025-01-10", _term(CURRENT_MONTH_PLUS_DAYS, days=180)) == "2025-07-31"

    def test_plus_180_days_from_march(self):
        """2025-03-05 + 180 days = 2025-09-01 → 2025-09-30."""
        assert resolve_end_date("2025-03-05", _term(CURRENT_MONTH_PLUS_DAYS, days=180)) == "2025-09-30"

    def test_zero_days_is_current_month_end(self):
        assert resolve_end_date("2025-03-05", _term(CURRENT_MONTH_PLUS_DAYS, days=0)) == "2025-03-31"

    def test_landing_on_month_end_stays(self):
        """2025-01-01 + 30 days = 2025-01-31."""
        assert resolve_end_date("2025-01-01", _term(CURRENT_MONTH_PLUS_DAYS, days=30)) == "2025-01-31"

    def test_missing_days_cannot_resolve(self):
        assert resolve_end_date("2025-03-05", _term(CURRENT_MONTH_PLUS_DAYS, days=None)) is None

    def test_negative_days_cannot_resolve(self):
        assert resolve_end_date("2025-03-05", _term(CURRENT_MONTH_PLUS_DAYS, days=-1)) is None


class TestFixedTermReconciliation:
    """The later of the fixed-term month end and the continuous end wins."""

    @pytest.fixture
    def resolver(self):
        return TerminationNoticeResolver()

    def test_fixed_term_later_than_notice_period(self, resolver):
        term = _term(CLAUSE_4_4, fixed_end="2025-12-15")

        assert resolver.resolve("2025-03-05", term) == "2025-12-31"

    def test_notice_period_later_than_fixed_term(self, resolver):
        term = _term(CLAUSE_4_4, fixed_end="2025-02-10")

        assert resolver.resolve("2025-03-25", term) == "2025-05-31"

    def test_equal_dates(self, resolver):
        term = _term(CLAUSE_4_4, fixed_end="2025-04-30")

        assert resolver.resolve("2025-03-05", term) == "2025-04-30"

    def test_fixed_term_fallback_when_continuous_unknown(self, resolver):
        term = _term(CURRENT_MONTH_PLUS_DAYS, days=None, fixed_end="2025-09-14")

        assert resolver.resolve("2025-03-05", term) == "2025-09-30"

    def test_unknown_rule_falls_back_to_fixed_term(self, resolver):
        term = _term("CLAUSE_9_9", fixed_end="2025-09-14")

        assert resolver.resolve("2025-03-05", term) == "2025-09-30"

    def test_end_date_ignored_without_fixed_term(self, resolver):
        term = _term(CLAUSE_4_4, fixed_end="2025-12-15")
        term.has_fixed_term = False

        assert resolver.resolve("2025-03-05", term) == "2025-04-30"


class TestCannotDetermine:
    """Null signals instead of exceptions."""

    def test_unknown_rule_without_fixed_term(self):
        assert resolve_end_date("2025-03-05", _term("CLAUSE_9_9")) is None

    def test_missing_notice_date(self):
        assert resolve_end_date(None, _term(CLAUSE_4_4)) is None

    def test_missing_agreement(self):
        assert resolve_end_date("2025-03-05", None) is None

    def test_rule_descriptions(self):
        describe = TerminationNoticeResolver.describe_rule

        assert describe(_term(CURRENT_MONTH_PLUS_DAYS, days=90)) == "Current month + 90 days"
        assert describe(_term(CLAUSE_4_4)).startswith("Clause 4.4")


class TestGoverningAgreement:
    """Choose the signed agreement a notice applies to."""

    @pytest.fixture
    def agreements(self):
        return [
            {
                "id": "old",
                "has_fixed_term": False,
                "start_date": "2023-01-01",
                "continuous_term_start_date": "2023-01-01",
            },
            {
                "id": "fixed",
                "has_fixed_term": True,
                "start_date": "2025-01-01",
                "first_fixed_term_end_date": "2025-12-31",
                "continuous_term_start_date": "2026-01-01",
            },
        ]

    def test_active_fixed_term_preferred(self, agreements):
        assert select_governing_agreement(agreements, date(2025, 6, 1))["id"] == "fixed"

    def test_started_continuous_term(self, agreements):
        assert select_governing_agreement(agreements, date(2026, 3, 1))["id"] == "fixed"

    def test_older_continuous_agreement(self, agreements):
        assert select_governing_agreement(agreements, date(2024, 6, 1))["id"] == "old"

    def test_future_only_falls_back_to_most_recent(self):
        agreements = [
            {"id": "a", "has_fixed_term": False, "start_date": "2027-01-01"},
            {"id": "b", "has_fixed_term": False, "start_date": "2028-01-01"},
        ]

        assert select_governing_agreement(agreements, date(2025, 1, 1))["id"] == "b"

    def test_no_agreements(self):
        assert select_governing_agreement([], date(2025, 1, 1)) is None

    def test_newer_draft_agreement_ignored(self):
        agreements = [
            {"id": "draft", "status": "draft", "has_fixed_term": False, "start_date": "2025-06-01"},
            {
                "id": "signed",
                "status": "signed",
                "has_fixed_term": True,
                "start_date": "2025-01-01",
                "first_fixed_term_end_date": "2025-12-31",
            },
        ]

        assert select_governing_agreement(agreements, date(2025, 7, 1))["id"] == "signed"

    def test_only_unsigned_agreements(self):
        agreements = [
            {"id": "draft", "status": "draft", "has_fixed_term": False, "start_date": "2025-06-01"},
            {"id": "gone", "status": "cancelled", "has_fixed_term": False, "start_date": "2024-01-01"},
        ]

        assert select_governing_agreement(agreements, date(2025, 7, 1)) is None



def _term(rule, days=None, fixed_end=None) -> AgreementTerm:
    return AgreementTerm(
        has_fixed_term=fixed_end is not None,
        start_date="2024-01-01",
        first_fixed_term_end_date=fixed_end,
        continuous_notice_rule=rule,
        continuous_notice_days=days
    )
