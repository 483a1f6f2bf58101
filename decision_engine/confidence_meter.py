"""
Confidence Meter
================

Gap-based confidence for the gauge display: how far the most likely outcome
sits above the second most likely one.

This is deliberately separate from football_predictor.calculate_confidence,
which only looks at the largest probability.
"""

from dataclasses import dataclass

FULL_CONFIDENCE_GAP = 50  # A 50-point gap reads as 100% confidence


@dataclass(frozen=True)
class ConfidenceMeter:
    value: float       # 0-100
    gap: float         # points between the top two outcomes
    level: str
    description: str

    def to_dict(self):
        return {
            'value': self.value,
            'gap': round(self.gap, 1),
            'level': self.level,
            'description': self.description,
        }


def calculate_confidence_meter(home_win: float, draw: float, away_win: float) -> ConfidenceMeter:
    """
    Gauge reading from the gap between the two most likely outcomes.

    Args:
        home_win: Home win percentage
        draw: Draw percentage
        away_win: Away win percentage

    Returns:
        ConfidenceMeter with normalised value, gap and level
    """
    highest, second, _ = sorted((home_win, draw, away_win), reverse=True)
    gap = highest - second
    value = min(100, gap / FULL_CONFIDENCE_GAP * 100)

    if value >= 70:
        level, description = 'VERY HIGH', 'Clear prediction'
    elif value >= 50:
        level, description = 'HIGH', 'Strong confidence'
    elif value >= 30:
        level, description = 'MEDIUM', 'Moderate confidence'
    else:
        level, description = 'LOW', 'Uncertain outcome'

    return ConfidenceMeter(value=value, gap=gap, level=level, description=description)
