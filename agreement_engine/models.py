"""
Domain Models for the Agreement Pricing & Term Engine

These dataclasses provide type-safe representations of agreement records.
All monetary values and percentages use Decimal; dates stay ISO strings
until a calculator needs them.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

# Continuous-term notice rules
CLAUSE_4_4 = "CLAUSE_4_4"
CURRENT_MONTH_PLUS_DAYS = "CURRENT_MONTH_PLUS_DAYS"
NOTICE_RULES = (CLAUSE_4_4, CURRENT_MONTH_PLUS_DAYS)

# Term phases used by security deposits
PHASE_FIXED = "fixed"
PHASE_CONTINUOUS = "continuous"


def to_decimal(value, name: str = "value", default: str = "0") -> Decimal:
    """Decimal from a JSON number or string; blank means the default."""
    if value is None or value == "":
        return Decimal(default)
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{name} must be a number, got: {value}")
    if not result.is_finite():
        raise ValueError(f"{name} must be a number, got: {value}")
    return result


def to_int(value, name: str = "value", default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a whole number, got: {value}")


def to_optional_int(value, name: str = "value") -> int | None:
    if value is None or value == "":
        return None
    return to_int(value, name)


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class PricedLine:
    """A billable line: parking space or add-on service."""

    list_price: Decimal
    quantity: int = 1
    discount_percentage: Decimal = Decimal("0")
    special_discount_percentage: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: dict) -> "PricedLine":
        # Parking and service lines never carry a special discount
        return cls(
            list_price=to_decimal(data.get("list_price"), "list_price"),
            quantity=to_int(data.get("quantity") or 1, "quantity"),
            discount_percentage=to_decimal(data.get("discount_percentage"), "discount_percentage"),
        )


@dataclass
class OfficeSpaceLine(PricedLine):
    """An office space line, priced with both discounts stacked."""

    office_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "OfficeSpaceLine":
        office_id = data.get("office_id")
        return cls(
            list_price=to_decimal(data.get("list_price"), "list_price"),
            quantity=to_int(data.get("quantity") or 1, "quantity"),
            discount_percentage=to_decimal(data.get("discount_percentage"), "discount_percentage"),
            special_discount_percentage=to_decimal(data.get("special_discount_percentage"), "special_discount_percentage"),
            office_id=str(office_id) if office_id is not None else None,
        )


@dataclass
class Office:
    """Office inventory record used as a credit lookup."""

    id: str
    mr_credits: int = 0
    print_quota_bw: int = 0
    print_quota_color: int = 0
    list_price: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: dict) -> "Office":
        return cls(
            id=str(data["id"]),
            mr_credits=to_int(data.get("mr_credits"), "mr_credits"),
            print_quota_bw=to_int(data.get("print_quota_bw"), "print_quota_bw"),
            print_quota_color=to_int(data.get("print_quota_color"), "print_quota_color"),
            list_price=to_decimal(data.get("list_price"), "list_price"),
        )


def offices_from_data(data) -> dict[str, Office]:
    """Build the office lookup from a list of records or a mapping keyed by id."""
    if not data:
        return {}
    if isinstance(data, dict):
        records = [{"id": key, **record} for key, record in data.items()]
    else:
        records = data
    offices = [Office.from_dict(record) for record in records]
    return {office.id: office for office in offices}


@dataclass
class AgreementTerm:
    """Temporal structure and notice configuration of one agreement."""

    has_fixed_term: bool
    start_date: str | None = None
    first_fixed_term_end_date: str | None = None
    continuous_term_start_date: str | None = None  # Stored value, may be stale
    continuous_notice_rule: str = CLAUSE_4_4
    continuous_notice_days: int | None = None
    # Fixed-term non-renewal notice, reported alongside the term
    notice_period_fixed: int | None = None
    notice_period_fixed_current_month: bool = False

    def fixed_term_notice(self) -> dict | None:
        """Notice period for ending the fixed term, None without one."""
        if not self.has_fixed_term:
            return None
        return {
            "days": self.notice_period_fixed,
            "includes_current_month": self.notice_period_fixed_current_month,
        }


    @classmethod
    def from_dict(cls, data: dict) -> "AgreementTerm":
        return cls(
            has_fixed_term=bool(data.get("has_fixed_term", False)),
            start_date=data.get("start_date") or None,
            first_fixed_term_end_date=data.get("first_fixed_term_end_date") or None,
            continuous_term_start_date=data.get("continuous_term_start_date") or None,
            # A stored agreement without a rule falls under clause 4.4
            continuous_notice_rule=data.get("continuous_notice_rule") or CLAUSE_4_4,
            continuous_notice_days=to_optional_int(data.get("continuous_notice_days"), "continuous_notice_days"),
            notice_period_fixed=to_optional_int(data.get("notice_period_fixed"), "notice_period_fixed"),
            notice_period_fixed_current_month=bool(data.get("notice_period_fixed_current_month", False)),
        )


@dataclass
class Overrides:
    """Manually entered values. None means 'track the calculated value'."""

    conference_room_credits: int | None = None
    print_credits_bw: int | None = None
    print_credits_color: int | None = None
    security_deposit_fixed: int | None = None
    security_deposit_continuous: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Overrides":
        def read(key):
            return to_optional_int(data.get(key), key)

        return cls(
            conference_room_credits=read("conference_room_credits_override"),
            print_credits_bw=read("print_credits_bw_override"),
            print_credits_color=read("print_credits_color_override"),
            security_deposit_fixed=read("security_deposit_fixed_override"),
            security_deposit_continuous=read("security_deposit_continuous_override"),
        )


@dataclass
class AgreementInput:
    """Complete input for pricing an agreement."""

    term: AgreementTerm
    office_spaces: list[OfficeSpaceLine] = field(default_factory=list)
    parking_spaces: list[PricedLine] = field(default_factory=list)
    services: list[PricedLine] = field(default_factory=list)
    overrides: Overrides = field(default_factory=Overrides)
    offices: dict[str, Office] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "AgreementInput":
        agreement = data["agreement"]
        return cls(
            term=AgreementTerm.from_dict(agreement),
            office_spaces=[OfficeSpaceLine.from_dict(s) for s in agreement.get("office_spaces") or []],
            parking_spaces=[PricedLine.from_dict(s) for s in agreement.get("parking_spaces") or []],
            services=[PricedLine.from_dict(s) for s in agreement.get("services") or []],
            overrides=Overrides.from_dict(agreement),
            offices=offices_from_data(data.get("offices")),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class LinePrice:
    """Final price of a single line."""

    list_price: Decimal
    quantity: int
    total_discount_percentage: Decimal
    final_price: Decimal
    office_id: str | None = None


@dataclass
class LinePricing:
    """Priced lines grouped by kind."""

    office_spaces: list[LinePrice] = field(default_factory=list)
    parking_spaces: list[LinePrice] = field(default_factory=list)
    services: list[LinePrice] = field(default_factory=list)


@dataclass
class TermResolution:
    """Derived term values. None marks an incomplete draft."""

    has_fixed_term: bool = False
    continuous_start_date: str | None = None
    duration_months: int | None = None
    duration_days: int | None = None


@dataclass
class MonthlyTotals:
    """Monthly figures shown on the agreement summary."""

    office_fees_fixed: Decimal = Decimal("0")  # A
    parking_fees: Decimal = Decimal("0")  # B
    service_fees: Decimal = Decimal("0")  # C
    monthly_payment_fixed: Decimal = Decimal("0")  # A+B+C
    office_fees_continuous: Decimal = Decimal("0")  # D, list price


@dataclass
class CreditTotals:
    """Credit allotments summed over office lines."""

    mr_credits: int = 0
    print_bw: int = 0
    print_color: int = 0
    missing_office_ids: list[str] = field(default_factory=list)


@dataclass
class OverridableFigure:
    """A calculated value paired with an optional manual override."""

    calculated: int
    override: int | None = None

    @property
    def effective(self) -> int:
        return self.override if self.override is not None else self.calculated

    @property
    def is_overridden(self) -> bool:
        return self.override is not None


@dataclass
class CreditAllotment:
    conference_room: OverridableFigure = field(default_factory=lambda: OverridableFigure(0))
    print_bw: OverridableFigure = field(default_factory=lambda: OverridableFigure(0))
    print_color: OverridableFigure = field(default_factory=lambda: OverridableFigure(0))


@dataclass
class SecurityDeposits:
    fixed: OverridableFigure = field(default_factory=lambda: OverridableFigure(0))
    continuous: OverridableFigure = field(default_factory=lambda: OverridableFigure(0))


@dataclass
class PricingContext:
    """
    Holds all intermediate state during agreement pricing.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    agreement: AgreementInput

    # Step results (populated as we go)
    lines: LinePricing = field(default_factory=LinePricing)
    term: TermResolution = field(default_factory=TermResolution)
    totals: MonthlyTotals = field(default_factory=MonthlyTotals)
    credit_totals: CreditTotals = field(default_factory=CreditTotals)
    credits: CreditAllotment = field(default_factory=CreditAllotment)
    deposits: SecurityDeposits = field(default_factory=SecurityDeposits)


@dataclass
class AgreementResult:
    """Final output of agreement pricing."""

    line_items: dict
    totals: dict
    term: dict
    credits: dict
    security_deposits: dict
    stored_fields: dict
