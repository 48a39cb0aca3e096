"""
Security Deposit Calculator

Deposit = 200% of the phase's monthly office fees plus 18% VAT on that amount.
The fixed phase uses discounted office prices; the continuous phase is
always billed at list price.
"""

from decimal import Decimal

from ..models import PHASE_CONTINUOUS, PHASE_FIXED, OfficeSpaceLine, OverridableFigure, PricingContext, SecurityDeposits
from .pricing import LineItemPricer, quantize_units, to_units


class DepositCalculator:
    """Calculates fixed and continuous security deposits."""

    MONTHS_HELD = Decimal("2")
    VAT_RATE = Decimal("0.18")

    def __init__(self):
        self.pricer = LineItemPricer()

    def calculate(self, ctx: PricingContext) -> SecurityDeposits:
        office_lines = ctx.agreement.office_spaces
        overrides = ctx.agreement.overrides
        return SecurityDeposits(
            fixed=OverridableFigure(
                self.deposit_for(PHASE_FIXED, office_lines), overrides.security_deposit_fixed
            ),
            continuous=OverridableFigure(
                self.deposit_for(PHASE_CONTINUOUS, office_lines), overrides.security_deposit_continuous
            ),
        )

    def deposit_for(self, phase: str, office_lines: list[OfficeSpaceLine]) -> int:
        if phase == PHASE_FIXED:
            fees = self.fixed_office_fees(office_lines)
        elif phase == PHASE_CONTINUOUS:
            fees = self.continuous_office_fees(office_lines)
        else:
            raise ValueError(f"Invalid deposit phase: {phase}. Must be '{PHASE_FIXED}' or '{PHASE_CONTINUOUS}'")
        return self.deposit(fees)

    def deposit(self, office_fees: Decimal) -> int:
        base = office_fees * self.MONTHS_HELD
        return to_units(base + base * self.VAT_RATE)

    def fixed_office_fees(self, office_lines: list[OfficeSpaceLine]) -> Decimal:
        """Sum of per-line rounded discounted prices."""
        return sum(
            (self.pricer.price_line(line).final_price for line in office_lines),
            Decimal("0"),
        )

    @staticmethod
    def continuous_office_fees(office_lines: list[OfficeSpaceLine]) -> Decimal:
        """Sum of list prices, discounts ignored."""
        return sum(
            (quantize_units(line.list_price * (line.quantity or 1)) for line in office_lines),
            Decimal("0"),
        )


def deposit_for(phase: str, office_lines: list[OfficeSpaceLine]) -> int:
    return DepositCalculator().deposit_for(phase, office_lines)
