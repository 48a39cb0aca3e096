"""
Agreement Processor - Main Orchestrator

Coordinates the agreement pricing pipeline and termination resolution
through discrete, testable steps.
"""

import logging
from datetime import date
from typing import Any, Dict

from .calculators import (
    CreditCalculator,
    DepositCalculator,
    LineItemPricer,
    TermResolver,
    TerminationNoticeResolver,
    TotalsCalculator,
)
from .calculators.termination import select_governing_agreement
from .dates import parse_date
from .models import AgreementInput, AgreementResult, AgreementTerm, PricingContext
from .notices import TerminationNotice
from .output import OutputBuilder
from .validators import InputValidator

logger = logging.getLogger(__name__)


class AgreementProcessor:
    """
    Main orchestrator for agreement pricing.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Build Context
    3. Price Lines
    4. Resolve Term
    5. Sum Monthly Totals
    6. Aggregate Credits
    7. Calculate Security Deposits
    8. Build Output
    """

    def __init__(self):
        self.validator = InputValidator()
        self.pricer = LineItemPricer()
        self.term_resolver = TermResolver()
        self.totals_calculator = TotalsCalculator()
        self.credit_calculator = CreditCalculator()
        self.deposit_calculator = DepositCalculator()
        self.output_builder = OutputBuilder()

    def process(self, input_data: AgreementInput, for_save: bool = False) -> AgreementResult:
        """
        Price an agreement through the complete pipeline.

        Args:
            input_data: AgreementInput object
            for_save: apply save-boundary validation instead of draft rules

        Returns:
            AgreementResult with all derived figures
        """
        # Step 1: Validate
        if for_save:
            self.validator.validate_for_save(input_data)
        else:
            self.validator.validate(input_data)

        return self.derive(input_data)

    def derive(self, input_data: AgreementInput) -> AgreementResult:
        """Run steps 2-8 without validation, for recomputation while editing."""
        # Step 2: Build initial context
        ctx = PricingContext(agreement=input_data)

        # Step 3: Price office, parking and service lines
        ctx.lines = self.pricer.calculate(ctx)

        # Step 4: Continuous start date and fixed-term duration
        ctx.term = self.term_resolver.calculate(ctx)

        # Step 5: Monthly totals
        ctx.totals = self.totals_calculator.calculate(ctx)

        # Step 6: Credit allotments
        ctx.credit_totals, ctx.credits = self.credit_calculator.calculate(ctx)

        # Step 7: Security deposits
        ctx.deposits = self.deposit_calculator.calculate(ctx)

        # Step 8: Build output
        return self.output_builder.build(ctx)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Price an agreement from raw dictionary input (draft rules).

        Convenience method for API usage.
        """
        result = self.process(AgreementInput.from_dict(data))
        return self._result_to_dict(result)

    def validate_for_save(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Price an agreement from raw dictionary input, rejecting incomplete data."""
        result = self.process(AgreementInput.from_dict(data), for_save=True)
        return self._result_to_dict(result)

    def _result_to_dict(self, result: AgreementResult) -> Dict[str, Any]:
        """Convert AgreementResult to dictionary for API response."""
        return {
            "line_items": result.line_items,
            "totals": result.totals,
            "term": result.term,
            "credits": result.credits,
            "security_deposits": result.security_deposits,
            "stored_fields": result.stored_fields,
        }


class TerminationProcessor:
    """Resolves the expected end date of a termination notice."""

    def __init__(self):
        self.resolver = TerminationNoticeResolver()

    def resolve_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Resolve a notice against a single `agreement` or, when `agreements`
        is given, against the one governing on `as_of` (default today).
        """
        notice = TerminationNotice.from_dict(data)
        notice.validate_dates()

        record = self._governing_agreement(data)
        term = AgreementTerm.from_dict(record) if record else None
        if record is None:
            logger.warning(f"No signed agreement found for company: {notice.company_id}")

        expected = self.resolver.resolve(notice.notice_date, term)
        logger.info(f"Resolved termination notice of {notice.notice_date}: expected end {expected}")

        return {
            "notice_date": notice.notice_date,
            "agreement_id": record.get("id") if record else None,
            "notice_requirement": self.resolver.describe_rule(term) if term else None,
            "fixed_term_notice": term.fixed_term_notice() if term else None,
            "expected_end_date": expected,
            "override_end_date": notice.override_end_date,
            "effective_end_date": notice.override_end_date or expected,
        }

    @staticmethod
    def _governing_agreement(data: Dict[str, Any]) -> dict | None:
        if data.get("agreement"):
            return data["agreement"]
        as_of = parse_date(data.get("as_of")) or date.today()
        return select_governing_agreement(data.get("agreements") or [], as_of)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def process_agreement_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Price an agreement from Python dict and return Python dict.
    """
    processor = AgreementProcessor()
    return processor.process_from_dict(input_data)


def process_agreement_from_json(json_input: str) -> str:
    """
    Price an agreement from JSON string input and return JSON string output.
    """
    import json

    try:
        input_data = json.loads(json_input)
        processor = AgreementProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
