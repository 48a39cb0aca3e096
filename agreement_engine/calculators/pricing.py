"""
Line-Item Pricer

Prices office, parking and service lines. Discounts are summed, never
compounded, and applied once. All rounding is to whole currency units
using ROUND_HALF_UP.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import LinePrice, LinePricing, PricedLine, PricingContext

HUNDRED = Decimal("100")


def quantize_units(value: Decimal) -> Decimal:
    """Round to whole currency units, .5 goes up."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def to_units(value: Decimal) -> int:
    return int(quantize_units(value))


def price(list_price, quantity=None, discount_pct=0, special_discount_pct=0) -> int:
    """
    Final price of one line.

    round(list_price * quantity * (1 - (discount + special) / 100)), with a
    missing or zero quantity treated as 1 and the combined discount capped
    at 100% so the result is never negative.
    """
    return to_units(
        LineItemPricer.discounted(
            Decimal(str(list_price)),
            int(quantity or 1),
            Decimal(str(discount_pct or 0)),
            Decimal(str(special_discount_pct or 0)),
        )
    )


class LineItemPricer:
    """Prices every line of an agreement."""

    def calculate(self, ctx: PricingContext) -> LinePricing:
        agreement = ctx.agreement
        return LinePricing(
            office_spaces=[self.price_line(line, line.office_id) for line in agreement.office_spaces],
            parking_spaces=[self.price_line(line) for line in agreement.parking_spaces],
            services=[self.price_line(line) for line in agreement.services],
        )

    def price_line(self, line: PricedLine, office_id: str | None = None) -> LinePrice:
        quantity = line.quantity or 1
        return LinePrice(
            list_price=line.list_price,
            quantity=quantity,
            total_discount_percentage=self.combined_discount(
                line.discount_percentage, line.special_discount_percentage
            ),
            final_price=quantize_units(
                self.discounted(
                    line.list_price,
                    quantity,
                    line.discount_percentage,
                    line.special_discount_percentage,
                )
            ),
            office_id=office_id,
        )

    @staticmethod
    def combined_discount(discount: Decimal, special: Decimal) -> Decimal:
        """Stacked discount, capped at 100%."""
        return min(discount + special, HUNDRED)

    @staticmethod
    def discounted(
        list_price: Decimal,
        quantity: int,
        discount: Decimal,
        special: Decimal = Decimal("0"),
    ) -> Decimal:
        """Unrounded discounted amount for a line."""
        total_discount = LineItemPricer.combined_discount(discount, special)
        return list_price * (quantity or 1) * (1 - total_discount / HUNDRED)
