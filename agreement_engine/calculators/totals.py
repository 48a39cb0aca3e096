"""
Monthly Totals Calculator

A = office fees during the fixed term, B = parking, C = add-on services,
A+B+C = monthly payment during the fixed term, D = office fees during the
continuous term (list price).
"""

from decimal import Decimal

from ..models import LinePrice, MonthlyTotals, PricingContext
from .deposit import DepositCalculator


class TotalsCalculator:
    """Sums priced lines into the agreement's monthly figures."""

    def calculate(self, ctx: PricingContext) -> MonthlyTotals:
        lines = ctx.lines
        office = self._sum(lines.office_spaces)
        parking = self._sum(lines.parking_spaces)
        services = self._sum(lines.services)

        return MonthlyTotals(
            office_fees_fixed=office,
            parking_fees=parking,
            service_fees=services,
            monthly_payment_fixed=office + parking + services,
            office_fees_continuous=DepositCalculator.continuous_office_fees(ctx.agreement.office_spaces),
        )

    @staticmethod
    def _sum(priced: list[LinePrice]) -> Decimal:
        return sum((p.final_price for p in priced), Decimal("0"))
