"""
Credit Allotment Calculator

Sums per-office conference-room and print allotments over the agreement's
office lines and applies manual overrides.
"""

import logging

from ..models import CreditAllotment, CreditTotals, Office, OfficeSpaceLine, OverridableFigure, PricingContext

logger = logging.getLogger(__name__)


def effective(calculated, override):
    """Override wins whenever it is set, including an override of zero."""
    return override if override is not None else calculated


class CreditCalculator:
    """Aggregates credit allotments and resolves overrides."""

    def calculate(self, ctx: PricingContext) -> tuple[CreditTotals, CreditAllotment]:
        agreement = ctx.agreement
        totals = self.aggregate(agreement.office_spaces, agreement.offices)
        overrides = agreement.overrides
        allotment = CreditAllotment(
            conference_room=OverridableFigure(totals.mr_credits, overrides.conference_room_credits),
            print_bw=OverridableFigure(totals.print_bw, overrides.print_credits_bw),
            print_color=OverridableFigure(totals.print_color, overrides.print_credits_color),
        )
        return totals, allotment

    def aggregate(self, office_lines: list[OfficeSpaceLine], offices: dict[str, Office]) -> CreditTotals:
        """
        Sum allotments of the offices referenced by each line.

        A line whose office is not in the lookup contributes nothing.
        """
        totals = CreditTotals()
        for line in office_lines:
            office = offices.get(line.office_id) if line.office_id is not None else None
            if office is None:
                logger.warning(f"Office not found in lookup, contributing no credits: {line.office_id}")
                totals.missing_office_ids.append(line.office_id)
                continue
            totals.mr_credits += office.mr_credits
            totals.print_bw += office.print_quota_bw
            totals.print_color += office.print_quota_color
        return totals


def aggregate_credits(office_lines: list[OfficeSpaceLine], offices: dict[str, Office]) -> CreditTotals:
    return CreditCalculator().aggregate(office_lines, offices)
