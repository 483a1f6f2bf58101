"""
Match Verdict Classifier
========================

Summarises a prediction as one headline verdict.

Rules are checked in order and the first match wins:
1. DOMINANT  - a side above 60% with the opponent under 0.5 xG
2. GOALFEST  - more than 3.5 total expected goals
3. DEADLOCK  - draw above 35%
4. TIGHT     - top probability under 55% or win gap under 15 points
5. CLEAR     - the leading side above 50%
6. CLEAR     - fallback "slight edge"
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VerdictType(Enum):
    DOMINANT = 'dominant'
    GOALFEST = 'goalfest'
    DEADLOCK = 'deadlock'
    TIGHT = 'tight'
    CLEAR = 'clear'


@dataclass(frozen=True)
class Verdict:
    kind: VerdictType
    headline: str
    subtext: str

    def to_dict(self):
        return {'type': self.kind.value, 'headline': self.headline, 'subtext': self.subtext}


def calculate_verdict(prediction, home_name: Optional[str] = None,
                      away_name: Optional[str] = None) -> Verdict:
    """
    Classify a prediction into a headline verdict.

    Args:
        prediction: PredictionResult (rounded probabilities and expected goals)
        home_name: Home team display name (short name preferred)
        away_name: Away team display name

    Returns:
        Verdict with type, headline and supporting statistic
    """
    home_name = home_name or 'Home Team'
    away_name = away_name or 'Away Team'

    home_win = prediction.home_win
    draw = prediction.draw
    away_win = prediction.away_win
    xg_home = prediction.expected_goals['home']
    xg_away = prediction.expected_goals['away']

    total_goals = xg_home + xg_away
    winner = home_name if home_win > away_win else away_name
    max_prob = max(home_win, draw, away_win)

    if home_win > 60 and xg_away < 0.5:
        return Verdict(VerdictType.DOMINANT, f"DOMINANT {home_name.upper()} WIN",
                       f"{home_win:.1f}% chance • Clean sheet likely")
    if away_win > 60 and xg_home < 0.5:
        return Verdict(VerdictType.DOMINANT, f"DOMINANT {away_name.upper()} WIN",
                       f"{away_win:.1f}% chance • Clean sheet likely")

    if total_goals > 3.5:
        return Verdict(VerdictType.GOALFEST, 'GOAL FEST INCOMING',
                       f"{total_goals:.1f} goals expected • Both teams to score")

    if draw > 35:
        return Verdict(VerdictType.DEADLOCK, 'DEADLOCK LIKELY',
                       f"{draw:.1f}% chance of draw • Evenly matched")

    if max_prob < 55 or abs(home_win - away_win) < 15:
        return Verdict(VerdictType.TIGHT, 'TIGHTLY CONTESTED',
                       f"Too close to call • {winner} slight edge")

    if home_win > away_win and home_win > 50:
        return Verdict(VerdictType.CLEAR, f"{home_name.upper()} FAVORED",
                       f"{home_win:.1f}% win probability • {xg_home:.1f} xG")
    if away_win > home_win and away_win > 50:
        return Verdict(VerdictType.CLEAR, f"{away_name.upper()} FAVORED",
                       f"{away_win:.1f}% win probability • {xg_away:.1f} xG")

    return Verdict(VerdictType.CLEAR, f"{winner.upper()} SLIGHT EDGE",
                   f"{max_prob:.1f}% probability")
