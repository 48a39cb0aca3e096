"""
Calculators Package

Provides all calculation components for agreement pricing and termination.
"""

from .credits import CreditCalculator
from .deposit import DepositCalculator
from .pricing import LineItemPricer
from .term import TermResolver
from .termination import TerminationNoticeResolver
from .totals import TotalsCalculator

__all__ = [
    "LineItemPricer",
    "TermResolver",
    "TotalsCalculator",
    "CreditCalculator",
    "DepositCalculator",
    "TerminationNoticeResolver",
]
