"""
Termination Notice Resolver

Computes the contractual end-of-license date for a notice given on a date,
under the agreement's continuous-term notice rule, reconciled against any
fixed term.
"""

import logging
from datetime import date

from ..dates import add_days, month_end, month_end_after, parse_date, to_iso
from ..models import CLAUSE_4_4, CURRENT_MONTH_PLUS_DAYS, AgreementTerm

logger = logging.getLogger(__name__)

# Only signed agreements govern a termination notice
SIGNED_STATUS = "signed"


class TerminationNoticeResolver:
    """Resolves the expected end date of a termination notice."""

    # Clause 4.4: notice by the 20th ends next month, later ends the month after
    CLAUSE_4_4_CUTOFF_DAY = 20

    def resolve(self, notice_date: str | None, term: AgreementTerm | None) -> str | None:
        """
        Expected end date as an ISO string.

        Returns None when it cannot be determined: no notice date, no
        governing agreement, or neither a continuous nor a fixed end date.
        """
        notice = parse_date(notice_date)
        if notice is None or term is None:
            logger.warning("Cannot resolve end date: missing notice date or agreement")
            return None

        continuous_end = self.continuous_end_date(notice, term)
        final_end = continuous_end

        fixed_end = parse_date(term.first_fixed_term_end_date) if term.has_fixed_term else None
        if fixed_end is not None:
            fixed_month_end = month_end(fixed_end)
            if continuous_end is None or fixed_month_end > continuous_end:
                final_end = fixed_month_end
            logger.debug(f"Fixed term month end {fixed_month_end}, continuous end {continuous_end}")

        if final_end is None:
            return None
        return to_iso(month_end(final_end))

    def continuous_end_date(self, notice: date, term: AgreementTerm) -> date | None:
        rule = term.continuous_notice_rule

        if rule == CURRENT_MONTH_PLUS_DAYS:
            days = term.continuous_notice_days
            if days is None or days < 0:
                logger.warning(f"Missing or invalid continuous_notice_days for rule {rule}: {days}")
                return None
            return month_end(add_days(notice, days))

        if rule == CLAUSE_4_4:
            months_ahead = 1 if notice.day <= self.CLAUSE_4_4_CUTOFF_DAY else 2
            return month_end_after(notice, months_ahead)

        logger.warning(f"Unknown continuous_notice_rule: {rule}")
        return None

    @staticmethod
    def describe_rule(term: AgreementTerm) -> str:
        """Human-readable notice requirement for the governing agreement."""
        if term.continuous_notice_rule == CURRENT_MONTH_PLUS_DAYS:
            days = term.continuous_notice_days if term.continuous_notice_days is not None else "N/A"
            return f"Current month + {days} days"
        if term.continuous_notice_rule == CLAUSE_4_4:
            return "Clause 4.4 (by 20th -> next month end, after 20th -> second next month end)"
        return f"Unknown notice rule: {term.continuous_notice_rule}"


def resolve_end_date(notice_date: str | None, term: AgreementTerm | None) -> str | None:
    return TerminationNoticeResolver().resolve(notice_date, term)


def select_governing_agreement(agreements: list[dict], as_of: date) -> dict | None:
    """
    Pick the signed agreement a termination notice applies to.

    Priority order (most recent start date first):
    1. An agreement whose fixed term is running on as_of
    2. An agreement whose continuous term has started by as_of
    3. The most recent agreement

    Records carrying a status other than "signed" are ignored.
    """
    signed = [a for a in agreements or [] if a.get("status") in (None, SIGNED_STATUS)]
    if not signed:
        return None

    ordered = sorted(signed, key=lambda a: a.get("start_date") or "", reverse=True)

    for agreement in ordered:
        if not agreement.get("has_fixed_term"):
            continue
        start = parse_date(agreement.get("start_date"))
        end = parse_date(agreement.get("first_fixed_term_end_date"))
        if start and end and start <= as_of <= end:
            return agreement

    for agreement in ordered:
        if agreement.get("continuous_term_start_date"):
            continuous_start = parse_date(agreement["continuous_term_start_date"])
        elif not agreement.get("has_fixed_term"):
            continuous_start = parse_date(agreement.get("start_date"))
        else:
            continuous_start = None
        if continuous_start and continuous_start <= as_of:
            return agreement

    logger.warning(f"No active agreement on {as_of}, using most recent signed agreement")
    return ordered[0]
