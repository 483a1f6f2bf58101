"""
Odds Utilities
==============

Conversions between probabilities and bookmaker odds, plus value-bet helpers.

- Fair decimal odds from model probabilities (no bookmaker margin)
- Decimal -> probability / fractional / American conversions
- Expected value, profit, payout and ROI for a stake
- Margin (vig) removal from a 1X2 market
- Value detection: bookmaker price vs model fair price

All probabilities are percentages (0-100).
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class OddsFormat(Enum):
    DECIMAL = "decimal"
    FRACTIONAL = "fractional"
    AMERICAN = "american"


@dataclass(frozen=True)
class ValueSignal:
    """Result of comparing a bookmaker price against the model's fair price."""
    has_value: bool
    edge: float  # model probability minus bookmaker probability, in points


def round_half_up(value: float, digits: int = 0):
    """
    Round with halves going up (towards +inf).

    Returns an int when digits is 0.
    """
    factor = 10 ** digits
    scaled = math.floor(value * factor + 0.5)
    if digits == 0:
        return scaled
    return scaled / factor


def probability_to_decimal(probability: float) -> float:
    """
    Convert a win probability percentage to fair decimal odds.

    Args:
        probability: Probability as percentage (0-100)

    Returns:
        Decimal odds rounded to 2 places, 0 if probability is outside (0, 100]
    """
    if probability <= 0 or probability > 100:
        return 0
    return round_half_up(1 / (probability / 100), 2)


def decimal_to_probability(decimal_odds: float) -> float:
    """Implied probability percentage of decimal odds, 0 for odds <= 1."""
    if decimal_odds <= 1:
        return 0
    return round_half_up((1 / decimal_odds) * 100, 2)


def decimal_to_fractional(decimal_odds: float) -> str:
    """
    Convert decimal odds to fractional odds.

    Args:
        decimal_odds: Decimal odds

    Returns:
        Fractional odds such as "5/2"
    """
    if decimal_odds < 1:
        return '0/1'

    denominator = 100
    numerator = round_half_up((decimal_odds - 1) * denominator)
    divisor = math.gcd(numerator, denominator)

    return f"{numerator // divisor}/{denominator // divisor}"


def decimal_to_american(decimal_odds: float) -> str:
    """Convert decimal odds to American odds such as "+150" or "-200"."""
    if decimal_odds <= 1:
        return '+0'

    if decimal_odds >= 2:
        return f"+{round_half_up((decimal_odds - 1) * 100)}"
    return f"{round_half_up(-100 / (decimal_odds - 1))}"


def format_odds(decimal_odds: float, odds_format: OddsFormat = OddsFormat.DECIMAL) -> str:
    """Format odds for display in the requested style."""
    if odds_format is OddsFormat.FRACTIONAL:
        return decimal_to_fractional(decimal_odds)
    if odds_format is OddsFormat.AMERICAN:
        return decimal_to_american(decimal_odds)
    return f"{decimal_odds:.2f}"


def calculate_expected_value(stake: float, bookie_odds: float, true_probability: float) -> float:
    """
    Expected value of a bet.

    Args:
        stake: Amount to bet
        bookie_odds: Bookmaker's decimal odds
        true_probability: Model's probability percentage

    Returns:
        Expected value, positive means a good bet
    """
    win_amount = stake * bookie_odds
    win_probability = true_probability / 100
    lose_probability = 1 - win_probability

    ev = (win_amount * win_probability) - (stake * lose_probability)
    return round_half_up(ev, 2)


def calculate_profit(stake: float, decimal_odds: float) -> float:
    """Potential profit, excluding the stake."""
    return round_half_up(stake * (decimal_odds - 1), 2)


def calculate_payout(stake: float, decimal_odds: float) -> float:
    """Potential payout, including the stake."""
    return round_half_up(stake * decimal_odds, 2)


def calculate_roi(profit: float, total_staked: float) -> float:
    """Return on investment as a percentage."""
    if total_staked == 0:
        return 0
    return round_half_up((profit / total_staked) * 100, 2)


def remove_vig(home_odds: float, draw_odds: float, away_odds: float) -> Dict[str, float]:
    """
    Remove the bookmaker margin from a 1X2 market.

    Args:
        home_odds: Home decimal odds
        draw_odds: Draw decimal odds
        away_odds: Away decimal odds

    Returns:
        Dictionary with margin-free odds and the margin percentage
    """
    home_prob = 1 / home_odds
    draw_prob = 1 / draw_odds
    away_prob = 1 / away_odds

    total_prob = home_prob + draw_prob + away_prob
    margin = total_prob - 1

    return {
        "home_odds": round_half_up(1 / (home_prob / total_prob), 2),
        "draw_odds": round_half_up(1 / (draw_prob / total_prob), 2),
        "away_odds": round_half_up(1 / (away_prob / total_prob), 2),
        "margin": round_half_up(margin * 100, 2),
    }


def detect_value(bookie_odds: float, model_odds: float) -> ValueSignal:
    """
    Check whether a bookmaker price beats the model's fair price.

    Value exists when the bookmaker pays more than the fair return, i.e. the
    bookmaker underestimates the outcome.

    Args:
        bookie_odds: Bookmaker's decimal odds
        model_odds: Model's fair decimal odds

    Returns:
        ValueSignal with the flag and the probability edge in points
    """
    if not bookie_odds or not model_odds:
        return ValueSignal(has_value=False, edge=0)

    bookie_probability = decimal_to_probability(bookie_odds)
    model_probability = decimal_to_probability(model_odds)
    edge = model_probability - bookie_probability

    return ValueSignal(
        has_value=bookie_odds > model_odds,
        edge=round_half_up(edge, 2),
    )
