"""
Decision Engine
===============

Headline verdicts and the gap-based confidence meter built on top of a prediction.
"""

from .confidence_meter import ConfidenceMeter, calculate_confidence_meter
from .verdict import Verdict, VerdictType, calculate_verdict

__all__ = [
    'ConfidenceMeter',
    'Verdict',
    'VerdictType',
    'calculate_confidence_meter',
    'calculate_verdict',
]
