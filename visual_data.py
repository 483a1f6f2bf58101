"""
Visual Data Generators
======================

Numeric series behind the prediction charts. Rendering lives in the UI;
this module only produces the numbers.

- Radar chart: five fixed metrics per team, scaled to 0-100
- Stat battle ("tale of the tape"): attack, defense, form and win % bars
- Score heatmap: exact-score probability grid with the most likely score
- Form trend: per-game points and the slope of recent results
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np

FORM_POINTS = {'W': 3, 'D': 1}
MAX_FORM_POINTS = 15  # Five wins
NEUTRAL_FORM_POINTS = 7.5
TREND_THRESHOLD = 0.3


@dataclass(frozen=True)
class RadarMetric:
    metric: str
    home: float
    away: float


@dataclass(frozen=True)
class StatBattleRow:
    label: str
    home: float
    away: float
    home_raw: Union[float, str]
    away_raw: Union[float, str]


@dataclass(frozen=True)
class HeatmapCell:
    home_goals: int
    away_goals: int
    probability: float  # percentage
    intensity: float    # probability relative to the most likely cell


@dataclass(frozen=True)
class ScoreHeatmap:
    cells: Tuple[HeatmapCell, ...]
    most_likely_score: Tuple[int, int]
    max_probability: float


@dataclass(frozen=True)
class FormPoint:
    game: int
    result: str
    points: int
    letter: str


@dataclass(frozen=True)
class FormTrend:
    points: Tuple[FormPoint, ...]
    slope: float
    label: str


def calculate_form_points(form: Optional[str]) -> int:
    """Points from a form string: W = 3, D = 1, anything else 0."""
    if not form:
        return 0
    return sum(FORM_POINTS.get(result, 0) for result in form)


def _per_game(total: float, matches_played: int) -> float:
    return total / max(1, matches_played or 1)


def generate_radar_data(home_stats, away_stats,
                        home_attack: float, away_attack: float) -> List[RadarMetric]:
    """
    Build the radar chart feature vector for both teams.

    Args:
        home_stats: Home TeamStatistics
        away_stats: Away TeamStatistics
        home_attack: Home attack strength (with modifiers)
        away_attack: Away attack strength (with modifiers)

    Returns:
        Five metrics in fixed order: Attack, Defense, Form, Goals/Game, Consistency
    """
    home_form = calculate_form_points(home_stats.form) if home_stats.form else NEUTRAL_FORM_POINTS
    away_form = calculate_form_points(away_stats.form) if away_stats.form else NEUTRAL_FORM_POINTS

    def defense(stats):
        # Inverted: fewer goals conceded per game scores higher
        return min(100, (2 - _per_game(stats.goals_conceded, stats.matches_played)) * 40)

    def goals_per_game(stats):
        return min(100, _per_game(stats.goals_scored, stats.matches_played) * 30)

    def consistency(stats):
        if not stats.won:
            return 50
        return _per_game(stats.won, stats.matches_played) * 100

    return [
        RadarMetric('Attack', min(100, home_attack * 50), min(100, away_attack * 50)),
        RadarMetric('Defense', defense(home_stats), defense(away_stats)),
        RadarMetric('Form', home_form / MAX_FORM_POINTS * 100, away_form / MAX_FORM_POINTS * 100),
        RadarMetric('Goals/Game', goals_per_game(home_stats), goals_per_game(away_stats)),
        RadarMetric('Consistency', consistency(home_stats), consistency(away_stats)),
    ]


def calculate_form_score(form: Optional[str]) -> float:
    """Form as a 0-100 score relative to the maximum for its length (50 if unknown)."""
    if not form:
        return 50
    return calculate_form_points(form) / (len(form) * 3) * 100


def generate_stat_battle(prediction, home_form: Optional[str] = None,
                         away_form: Optional[str] = None) -> List[StatBattleRow]:
    """
    Head-to-head comparison bars from a prediction.

    Args:
        prediction: PredictionResult (uses strengths and win probabilities)
        home_form: Home form string, if known
        away_form: Away form string, if known

    Returns:
        ATTACK, DEFENSE, FORM and WIN % rows
    """
    strengths = prediction.strengths

    return [
        StatBattleRow('ATTACK', strengths.home_attack * 50, strengths.away_attack * 50,
                      strengths.home_attack, strengths.away_attack),
        StatBattleRow('DEFENSE',
                      max(0, (2 - strengths.home_defense) * 50),
                      max(0, (2 - strengths.away_defense) * 50),
                      strengths.home_defense, strengths.away_defense),
        StatBattleRow('FORM', calculate_form_score(home_form), calculate_form_score(away_form),
                      home_form or 'N/A', away_form or 'N/A'),
        StatBattleRow('WIN %', prediction.home_win, prediction.away_win,
                      f"{prediction.home_win:.1f}%", f"{prediction.away_win:.1f}%"),
    ]


def _poisson_row(lambda_: float, max_goals: int) -> np.ndarray:
    if lambda_ <= 0:
        # No expected goals: a clean 0 with certainty
        row = np.zeros(max_goals + 1)
        row[0] = 1.0
        return row
    k = np.arange(max_goals + 1)
    factorials = np.cumprod(np.concatenate(([1.0], np.arange(1, max_goals + 1, dtype=float))))
    return np.power(lambda_, k) * np.exp(-lambda_) / factorials


def generate_score_heatmap(xg_home: float, xg_away: float, max_score: int = 4) -> ScoreHeatmap:
    """
    Exact-score probability grid for the heatmap.

    Args:
        xg_home: Home expected goals
        xg_away: Away expected goals
        max_score: Highest score shown per side

    Returns:
        ScoreHeatmap with (max_score + 1)^2 cells in row-major order
    """
    grid = np.outer(_poisson_row(xg_home, max_score), _poisson_row(xg_away, max_score))
    max_probability = float(grid.max())
    # argmax returns the first maximum in row-major order
    home_goals, away_goals = np.unravel_index(int(np.argmax(grid)), grid.shape)

    cells = tuple(
        HeatmapCell(
            home_goals=h,
            away_goals=a,
            probability=float(grid[h, a]) * 100,
            intensity=float(grid[h, a]) / max_probability if max_probability > 0 else 0.0,
        )
        for h in range(max_score + 1)
        for a in range(max_score + 1)
    )

    return ScoreHeatmap(
        cells=cells,
        most_likely_score=(int(home_goals), int(away_goals)),
        max_probability=max_probability * 100,
    )


def form_to_points(form: Optional[str]) -> List[FormPoint]:
    """Per-game points from a form string, game 1 being the most recent."""
    if not form:
        return []
    names = {'W': 'Win', 'D': 'Draw'}
    return [
        FormPoint(game=index + 1, result=names.get(letter, 'Loss'),
                  points=FORM_POINTS.get(letter, 0), letter=letter)
        for index, letter in enumerate(form)
    ]


def calculate_form_trend(form: Optional[str]) -> FormTrend:
    """
    Least-squares slope of per-game points against the game number.

    Games are numbered in string order, so game 1 is the most recent.
    Positive slope is labelled Improving, negative Declining, values within
    the threshold Stable.
    """
    points = form_to_points(form)
    if len(points) < 2:
        slope = 0.0
    else:
        x = np.array([point.game for point in points], dtype=float)
        y = np.array([point.points for point in points], dtype=float)
        slope = float(np.polyfit(x, y, 1)[0])

    if slope > TREND_THRESHOLD:
        label = 'Improving'
    elif slope < -TREND_THRESHOLD:
        label = 'Declining'
    else:
        label = 'Stable'

    return FormTrend(points=tuple(points), slope=slope, label=label)
