"""
AGREEMENT PRICING & TERM ENGINE
Office licensing: line pricing, term structure, credits, deposits and
termination notice end dates.
"""

from .models import AgreementInput, AgreementResult
from .processor import AgreementProcessor, TerminationProcessor

__all__ = ['AgreementProcessor', 'TerminationProcessor', 'AgreementInput', 'AgreementResult']
