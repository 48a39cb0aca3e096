"""
Term Resolver

Derives the continuous-term start date and the fixed-term duration from the
agreement's start and end dates.
"""

from datetime import date

from ..dates import add_days, parse_date, to_iso
from ..models import PricingContext, TermResolution


class TermResolver:
    """Resolves fixed + continuous vs. continuous-only term structure."""

    # Remainder days added when the end day-of-month precedes the start day
    SHORT_MONTH_DAYS = 31

    def calculate(self, ctx: PricingContext) -> TermResolution:
        term = ctx.agreement.term
        return self.resolve(term.has_fixed_term, term.start_date, term.first_fixed_term_end_date)

    def resolve(
        self,
        has_fixed_term: bool,
        start_date: str | None,
        first_fixed_term_end_date: str | None = None,
    ) -> TermResolution:
        """
        Resolve the term structure.

        A fixed term with a missing date is an in-progress draft: continuous
        start and duration stay None.
        """
        start = parse_date(start_date)

        if not has_fixed_term:
            return TermResolution(has_fixed_term=False, continuous_start_date=to_iso(start))

        end = parse_date(first_fixed_term_end_date)
        if start is None or end is None:
            return TermResolution(has_fixed_term=True)

        months, days = self.duration(start, end)
        return TermResolution(
            has_fixed_term=True,
            continuous_start_date=to_iso(self.continuous_start(end)),
            duration_months=months,
            duration_days=days,
        )

    @staticmethod
    def continuous_start(fixed_term_end: date) -> date:
        """The continuous term starts the day after the (inclusive) fixed end."""
        return add_days(fixed_term_end, 1)

    @classmethod
    def duration(cls, start: date, end: date) -> tuple[int, int]:
        """
        Fixed-term duration as (months, days).

        Months count calendar-month transitions between the two dates. The
        remainder is end.day - start.day + 1, plus a flat 31 when the end
        day-of-month is earlier than the start day. The flat 31 is not
        calendar-accurate for short months; stored agreements depend on it.
        """
        months = (end.year - start.year) * 12 + (end.month - start.month)
        days = end.day - start.day + 1
        if end.day >= start.day:
            return months, days
        return months, days + cls.SHORT_MONTH_DAYS
