"""
Agreement Draft Editing

A pure reducer over agreement draft dicts: (old draft, field change) -> new
draft with every derived field recomputed. The host owns the edit loop and
calls it after each mutating edit.

Overrides are typed into an OverrideBuffer and only reach the draft on an
explicit commit, so calculated values do not thrash while a user is typing.
"""

import copy

from .dates import parse_date
from .models import CLAUSE_4_4, AgreementInput, to_decimal, to_int, to_optional_int
from .processor import AgreementProcessor

# Pre-filled notice days when switching to the plus-days rule
DEFAULT_NOTICE_DAYS = 180

OVERRIDE_FIELDS = (
    "conference_room_credits_override",
    "print_credits_bw_override",
    "print_credits_color_override",
    "security_deposit_fixed_override",
    "security_deposit_continuous_override",
)

LINE_KINDS = ("office_spaces", "parking_spaces", "services")

DATE_FIELDS = ("start_date", "first_fixed_term_end_date", "continuous_term_start_date")
WHOLE_NUMBER_FIELDS = ("continuous_notice_days", "notice_period_fixed") + OVERRIDE_FIELDS
LINE_FIELDS = {
    "list_price": to_decimal,
    "quantity": to_int,
    "discount_percentage": to_decimal,
    "special_discount_percentage": to_decimal,
}


def recompute(draft: dict, offices=None) -> dict:
    """
    Return a copy of the draft with derived fields refreshed.

    Half-typed values such as "-" or "2025-0" count as unset for the
    calculation and are kept as typed in the returned draft.
    """
    updated = copy.deepcopy(draft)
    agreement = AgreementInput.from_dict({"agreement": _computable(updated), "offices": offices})
    result = AgreementProcessor().derive(agreement)
    updated.update({
        key: value for key, value in result.stored_fields.items()
        if key not in OVERRIDE_FIELDS or _parses(to_optional_int, updated.get(key))
    })
    return updated



def _parses(convert, value) -> bool:
    try:
        convert(value)
    except ValueError:
        return False
    return True


def _computable(draft: dict) -> dict:
    agreement = copy.deepcopy(draft)
    for field in DATE_FIELDS:
        if not _parses(parse_date, agreement.get(field)):
            agreement[field] = None
    for field in WHOLE_NUMBER_FIELDS:
        if not _parses(to_optional_int, agreement.get(field)):
            agreement[field] = None
    for kind in LINE_KINDS:
        for line in agreement.get(kind) or []:
            for field, convert in LINE_FIELDS.items():
                if not _parses(convert, line.get(field)):
                    line[field] = None
    return agreement



def apply_change(draft: dict, field: str, value, offices=None) -> dict:
    """
    Apply one field edit and recompute.

    Toggling has_fixed_term clears the fixed end date. Switching the notice
    rule clears the days for clause 4.4 and pre-fills them otherwise.
    """
    updated = copy.deepcopy(draft)
    updated[field] = value

    if field == "has_fixed_term":
        updated["first_fixed_term_end_date"] = None
        updated["first_fixed_term_duration"] = None
    elif field == "continuous_notice_rule":
        if value == CLAUSE_4_4:
            updated["continuous_notice_days"] = None
        elif updated.get("continuous_notice_days") is None:
            updated["continuous_notice_days"] = DEFAULT_NOTICE_DAYS

    return recompute(updated, offices)


def apply_line_change(draft: dict, kind: str, index: int, field: str, value, offices=None) -> dict:
    """Edit one field of an office, parking or service line and recompute."""
    if kind not in LINE_KINDS:
        raise ValueError(f"Invalid line kind: {kind}. Must be one of {', '.join(LINE_KINDS)}")
    lines = copy.deepcopy(draft.get(kind) or [])
    if not 0 <= index < len(lines):
        raise ValueError(f"{kind} has no line at index {index}")
    lines[index][field] = value
    return apply_change(draft, kind, lines, offices)


class OverrideBuffer:
    """Locally staged override edits, applied to a draft on commit."""

    def __init__(self):
        self._staged = {}

    def stage(self, field: str, raw) -> None:
        """Record a keystroke-level edit. Blank input stages 'no override'."""
        if field not in OVERRIDE_FIELDS:
            raise ValueError(f"Not an override field: {field}")
        self._staged[field] = to_optional_int(raw, field)

    @property
    def pending(self) -> dict:
        return dict(self._staged)

    def discard(self) -> None:
        self._staged.clear()

    def commit(self, draft: dict, offices=None) -> dict:
        """Apply staged overrides to a copy of the draft and recompute."""
        for field, value in self._staged.items():
            if value is not None and value < 0:
                raise ValueError(f"{field} cannot be negative, got: {value}")

        updated = copy.deepcopy(draft)
        updated.update(self._staged)
        self._staged.clear()
        return recompute(updated, offices)
