"""
Termination Notice Records

Status lifecycle, save-time validation and expected end date refresh for
termination notices.
"""

from dataclasses import asdict, dataclass, replace

from .calculators.termination import TerminationNoticeResolver
from .dates import parse_date
from .models import AgreementTerm

STATUS_DRAFT = "draft"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

ALLOWED_TRANSITIONS = {
    STATUS_DRAFT: {STATUS_ACTIVE, STATUS_CANCELLED},
    STATUS_ACTIVE: {STATUS_COMPLETED, STATUS_CANCELLED},
    STATUS_COMPLETED: set(),
    STATUS_CANCELLED: set(),
}

# A company with a notice in one of these states cannot receive another
OPEN_STATUSES = {STATUS_DRAFT, STATUS_ACTIVE}


@dataclass
class TerminationNotice:
    """One termination action against a client's agreement."""

    company_id: str | None
    notice_date: str | None
    expected_end_date: str | None = None
    override_end_date: str | None = None
    status: str = STATUS_DRAFT
    notes: str = ""

    @property
    def effective_end_date(self) -> str | None:
        return self.override_end_date or self.expected_end_date

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    @classmethod
    def from_dict(cls, data: dict) -> "TerminationNotice":
        return cls(
            company_id=data.get("company_id") or None,
            notice_date=data.get("notice_date") or None,
            expected_end_date=data.get("expected_end_date") or None,
            override_end_date=data.get("override_end_date") or None,
            status=data.get("status") or STATUS_DRAFT,
            notes=data.get("notes") or "",
        )

    def to_dict(self) -> dict:
        output = asdict(self)
        output["effective_end_date"] = self.effective_end_date
        return output

    def validate(self) -> None:
        """Save-time checks. Raises ValueError if any check fails."""
        if not self.company_id:
            raise ValueError("Please select a company")
        if self.status not in ALLOWED_TRANSITIONS:
            raise ValueError(f"Invalid status: {self.status}")
        self.validate_dates()

    def validate_dates(self) -> None:
        notice = self._parse("notice_date", self.notice_date)
        if notice is None:
            raise ValueError("Please enter a notice date")
        override = self._parse("override_end_date", self.override_end_date)
        if override is not None and override < notice:
            raise ValueError("Override end date must be on or after the notice date")

    @staticmethod
    def _parse(name: str, value):
        try:
            return parse_date(value)
        except ValueError:
            raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got: {value}") from None

    def transition_to(self, status: str) -> "TerminationNotice":
        """Return a copy of the notice in the new status."""
        allowed = ALLOWED_TRANSITIONS.get(self.status)
        if allowed is None:
            raise ValueError(f"Invalid status: {self.status}")
        if status not in allowed:
            raise ValueError(f"Cannot change notice status from '{self.status}' to '{status}'")
        return replace(self, status=status)


def refresh_expected_end_date(notice: TerminationNotice, term: AgreementTerm | None) -> TerminationNotice:
    """
    Recompute the expected end date while the notice is still open.

    Completed and cancelled notices keep the date they were closed with.
    """
    if not notice.is_open:
        return notice
    expected = TerminationNoticeResolver().resolve(notice.notice_date, term)
    return replace(notice, expected_end_date=expected)


def is_eligible_for_new_notice(company_id: str, notices: list[TerminationNotice]) -> bool:
    """True if the company has no draft or active notice."""
    return not any(n.company_id == company_id and n.is_open for n in notices)
