"""
Football Match Prediction System - Tactical Simulation Engine
=============================================================
Poisson scoring model with human-in-the-loop modifiers.

Turns season statistics for two teams into:
- Attack / defense strength ratings relative to the league average
- Expected goals for both sides
- Win / draw / loss probabilities and the most likely exact scores
- Fair decimal odds, a confidence level, radar data and plain-language insights

Modifiers (injuries, home fortress, motivation, weather, tactics) are resolved
by the adjustments package and applied as multipliers on the strengths.
The whole pipeline is deterministic: identical inputs give identical outputs.

References:
- Maher (1982) "Modelling association football scores"
- Dixon & Coles (1997) "Modelling Association Football Scores"

Author: Football Analytics System
Version: 3.0 - Simulation
"""

import logging
import math
from dataclasses import dataclass, field, asdict, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from adjustments.modifier_resolver import SimulationModifiers
from odds_utils import probability_to_decimal, round_half_up
from visual_data import RadarMetric, calculate_form_points, generate_radar_data

logger = logging.getLogger(__name__)

# Constants
DEFAULT_LEAGUE_AVERAGE = 1.5  # Goals per team per game when standings are unavailable
MAX_GOALS = 10                # Scoreline grid is 0..MAX_GOALS for each side
TOP_SCORES = 5


class InvalidInputError(ValueError):
    """Raised when a prediction is requested without team statistics."""


class ConfidenceLevel(Enum):
    """Prediction confidence based on the largest outcome probability."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass
class TeamStatistics:
    """Season statistics for one team, as produced by the standings adapter."""
    name: Optional[str] = None
    goals_scored: float = 0
    goals_conceded: float = 0
    matches_played: int = 1
    form: Optional[str] = None  # e.g. "WWDLW", most recent first
    won: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'TeamStatistics':
        """
        Build statistics from a JSON payload.

        Accepts both snake_case keys and the camelCase keys used by the
        football-data.org standings table. Missing numbers default to 0.
        """
        def pick(*keys, default=None):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return default

        return cls(
            name=pick('name', 'shortName'),
            goals_scored=pick('goals_scored', 'goalsScored', 'goalsFor', default=0),
            goals_conceded=pick('goals_conceded', 'goalsConceded', 'goalsAgainst', default=0),
            matches_played=pick('matches_played', 'matchesPlayed', 'playedGames', default=1),
            form=pick('form'),
            won=pick('won'),
        )


@dataclass(frozen=True)
class FairOdds:
    home: float
    draw: float
    away: float


@dataclass(frozen=True)
class Strengths:
    home_attack: float
    away_attack: float
    home_defense: float
    away_defense: float


@dataclass(frozen=True)
class ScoreProbability:
    home_goals: int
    away_goals: int
    probability: float


@dataclass(frozen=True)
class MatchProbabilities:
    """Unrounded outcome percentages plus the top scorelines (raw probabilities)."""
    home_win: float
    draw: float
    away_win: float
    score_matrix: Tuple[ScoreProbability, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PredictionResult:
    """Complete, immutable output of one prediction run."""
    home_win: float
    draw: float
    away_win: float
    fair_odds: FairOdds
    expected_goals: Dict[str, float]
    strengths: Strengths
    likely_scores: Tuple[ScoreProbability, ...]
    insights: Tuple[str, ...]
    confidence: ConfidenceLevel
    radar_data: Tuple[RadarMetric, ...]

    def to_dict(self) -> Dict:
        """Serialise to plain JSON-compatible types."""
        return {
            "home_win": self.home_win,
            "draw": self.draw,
            "away_win": self.away_win,
            "fair_odds": asdict(self.fair_odds),
            "expected_goals": dict(self.expected_goals),
            "strengths": asdict(self.strengths),
            "likely_scores": [asdict(score) for score in self.likely_scores],
            "insights": list(self.insights),
            "confidence": self.confidence.value,
            "radar_data": [asdict(metric) for metric in self.radar_data],
        }


def factorial(n: int) -> int:
    """Iterative factorial used by the Poisson mass function."""
    if n in (0, 1):
        return 1
    result = 1
    for i in range(2, n + 1):
        result *= i
    return result


def poisson_probability(k: int, lambda_: float) -> float:
    """
    Calculate Poisson probability P(X = k).

    Args:
        k: Number of goals
        lambda_: Expected value (xG)

    Returns:
        Probability of exactly k goals. A side with no positive expectation
        is certain to score 0.
    """
    if lambda_ <= 0:
        return 1.0 if k == 0 else 0.0
    return (lambda_ ** k * math.exp(-lambda_)) / factorial(k)


def calculate_attack_strength(goals_scored: float, matches_played: int,
                              league_average: float = DEFAULT_LEAGUE_AVERAGE,
                              modifier: float = 1.0) -> float:
    """
    Attack strength relative to the league average (1.0 = average).

    Args:
        goals_scored: Goals scored this season
        matches_played: Matches played this season
        league_average: League goals per team per game
        modifier: Attack multiplier from the simulation modifiers

    Returns:
        Attack strength index
    """
    if matches_played == 0:
        return 1.0
    goals_per_game = goals_scored / matches_played
    return (goals_per_game / league_average) * modifier


def calculate_defense_strength(goals_conceded: float, matches_played: int,
                               league_average: float = DEFAULT_LEAGUE_AVERAGE,
                               modifier: float = 1.0) -> float:
    """
    Defense strength relative to the league average.

    Lower is better: the value is goals conceded per game over the league
    average, so 0.8 means the team concedes 20% less than a typical side.
    """
    if matches_played == 0:
        return 1.0
    conceded_per_game = goals_conceded / matches_played
    return (conceded_per_game / league_average) * modifier


def calculate_expected_goals(attack_strength: float, defense_strength: float,
                             league_average: float = DEFAULT_LEAGUE_AVERAGE) -> float:
    """Expected goals for a side: own attack x opponent defense x league average."""
    return attack_strength * defense_strength * league_average


def calculate_match_probabilities(xg_home: float, xg_away: float,
                                  max_goals: int = MAX_GOALS,
                                  top_n: int = TOP_SCORES) -> MatchProbabilities:
    """
    Build the scoreline grid and aggregate it into outcome percentages.

    Every cell (h, a) with h, a in 0..max_goals gets P(h) * P(a). Cells are
    bucketed into home win / draw / away win and the buckets are normalised
    by their total so the three percentages sum to 100.

    Args:
        xg_home: Expected goals for home team
        xg_away: Expected goals for away team
        max_goals: Maximum goals per side in the grid
        top_n: Number of most likely scorelines to keep

    Returns:
        MatchProbabilities with percentages and the top scorelines
    """
    home_win = 0.0
    draw = 0.0
    away_win = 0.0
    cells: List[ScoreProbability] = []

    for home_goals in range(max_goals + 1):
        prob_home = poisson_probability(home_goals, xg_home)
        for away_goals in range(max_goals + 1):
            probability = prob_home * poisson_probability(away_goals, xg_away)
            cells.append(ScoreProbability(home_goals, away_goals, probability))

            if home_goals > away_goals:
                home_win += probability
            elif home_goals == away_goals:
                draw += probability
            else:
                away_win += probability

    # sorted() is stable, ties keep grid order
    top_scores = tuple(sorted(cells, key=lambda cell: cell.probability, reverse=True)[:top_n])

    total = home_win + draw + away_win
    # Only reachable when exp(-xG) underflows for absurdly large xG
    if total <= 0:
        logger.warning(f"Empty score distribution for xG ({xg_home:.2f}, {xg_away:.2f}); "
                       f"returning 0/0/0")
        return MatchProbabilities(0.0, 0.0, 0.0, top_scores)

    return MatchProbabilities(
        home_win=home_win / total * 100,
        draw=draw / total * 100,
        away_win=away_win / total * 100,
        score_matrix=top_scores,
    )


def calculate_confidence(home_win: float, draw: float, away_win: float) -> ConfidenceLevel:
    """
    Confidence from the largest outcome probability.

    Not to be confused with the gap-based meter in
    decision_engine.confidence_meter.
    """
    max_probability = max(home_win, draw, away_win)
    if max_probability >= 55:
        return ConfidenceLevel.HIGH
    if max_probability >= 40:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def _relative_difference(first: float, second: float) -> Optional[float]:
    smaller = min(first, second)
    if smaller <= 0:
        return None
    return (first - second) / smaller * 100


def generate_insights(home_stats: TeamStatistics, away_stats: TeamStatistics,
                      home_attack: float, away_attack: float,
                      home_defense: float, away_defense: float,
                      xg_home: float, xg_away: float,
                      probabilities: MatchProbabilities,
                      modifiers: Optional[SimulationModifiers] = None) -> List[str]:
    """
    Generate natural-language explanations of a prediction.

    Each rule is evaluated independently, so several insights can appear
    together. The headline is always first.

    Returns:
        Ordered list of insight sentences
    """
    insights = []
    home_name = home_stats.name or 'Home Team'
    away_name = away_stats.name or 'Away Team'

    home_favoured = probabilities.home_win > probabilities.away_win
    winner = home_name if home_favoured else away_name
    loser = away_name if home_favoured else home_name
    winner_prob = max(probabilities.home_win, probabilities.away_win)
    winner_attack = home_attack if home_favoured else away_attack

    insights.append(
        f"Although {loser} has competitive stats, "
        f"{winner}'s superior Attack Rating ({winner_attack:.2f}) gives them a "
        f"{winner_prob:.1f}% edge in this simulation."
    )

    attack_difference = _relative_difference(home_attack, away_attack)
    if attack_difference is not None and abs(attack_difference) > 20:
        stronger = home_name if attack_difference > 0 else away_name
        insights.append(f"{stronger} possesses a {abs(round_half_up(attack_difference))}% "
                        f"stronger offensive threat.")

    # Lower defense strength is better: a positive difference means the
    # away side concedes more, so the home side is tighter
    defense_difference = _relative_difference(away_defense, home_defense)
    if defense_difference is not None and abs(defense_difference) > 20:
        tighter = home_name if defense_difference > 0 else away_name
        insights.append(f"{tighter} maintains a {abs(round_half_up(defense_difference))}% "
                        f"tighter defensive line.")

    if xg_home > xg_away * 1.5:
        insights.append(f"{home_name} projected to dominate possession with "
                        f"{xg_home:.1f} xG vs {xg_away:.1f} xG.")
    elif xg_away > xg_home * 1.5:
        insights.append(f"{away_name} expected to control the tempo with "
                        f"{xg_away:.1f} xG vs {xg_home:.1f} xG.")
    else:
        insights.append(f"Evenly matched encounter: {xg_home:.1f} vs {xg_away:.1f} expected goals.")

    if home_stats.form and away_stats.form:
        home_points = calculate_form_points(home_stats.form)
        away_points = calculate_form_points(away_stats.form)

        if home_points > away_points + 3:
            insights.append(f"{home_name} riding a wave of momentum with superior recent form "
                            f"({home_points}pts vs {away_points}pts).")
        elif away_points > home_points + 3:
            insights.append(f"{away_name} brings exceptional recent form into this fixture "
                            f"({away_points}pts vs {home_points}pts).")

    if modifiers is not None:
        if modifiers.home.attack_multiplier < 1.0:
            insights.append(f"[NOTE] Simulation accounts for {home_name}'s weakened attack "
                            f"(key player absence impact).")
        if modifiers.away.attack_multiplier < 1.0:
            insights.append(f"[NOTE] Simulation accounts for {away_name}'s weakened attack "
                            f"(key player absence impact).")
        if modifiers.home.defense_multiplier < 1.0:
            insights.append(f"[HOME] Home fortress advantage activated - {home_name}'s defense "
                            f"amplified by crowd support.")

    return insights


def predict_match(home_stats: TeamStatistics, away_stats: TeamStatistics,
                  league_average: Optional[float] = DEFAULT_LEAGUE_AVERAGE,
                  modifiers: Optional[SimulationModifiers] = None) -> PredictionResult:
    """
    Main prediction function.

    Args:
        home_stats: Home team statistics
        away_stats: Away team statistics
        league_average: League goals per team per game (1.5 if missing or not positive)
        modifiers: Resolved simulation modifiers (neutral if None)

    Returns:
        PredictionResult with probabilities, odds, insights and chart data

    Raises:
        InvalidInputError: If either team's statistics are missing
    """
    if home_stats is None or away_stats is None:
        raise InvalidInputError('Missing team statistics. Cannot generate prediction.')

    safe_league_average = league_average if league_average and league_average > 0 \
        else DEFAULT_LEAGUE_AVERAGE
    mods = modifiers or SimulationModifiers.neutral()

    # Never divide by zero matches
    home_played = max(1, home_stats.matches_played or 1)
    away_played = max(1, away_stats.matches_played or 1)
    home_stats = replace(home_stats,
                         goals_scored=home_stats.goals_scored or 0,
                         goals_conceded=home_stats.goals_conceded or 0,
                         matches_played=home_played)
    away_stats = replace(away_stats,
                         goals_scored=away_stats.goals_scored or 0,
                         goals_conceded=away_stats.goals_conceded or 0,
                         matches_played=away_played)

    home_attack = calculate_attack_strength(home_stats.goals_scored, home_played,
                                            safe_league_average, mods.home.attack_multiplier)
    home_defense = calculate_defense_strength(home_stats.goals_conceded, home_played,
                                              safe_league_average, mods.home.defense_multiplier)
    away_attack = calculate_attack_strength(away_stats.goals_scored, away_played,
                                            safe_league_average, mods.away.attack_multiplier)
    away_defense = calculate_defense_strength(away_stats.goals_conceded, away_played,
                                              safe_league_average, mods.away.defense_multiplier)

    xg_home = calculate_expected_goals(home_attack, away_defense, safe_league_average)
    xg_away = calculate_expected_goals(away_attack, home_defense, safe_league_average)

    probabilities = calculate_match_probabilities(xg_home, xg_away)

    insights = generate_insights(
        home_stats, away_stats,
        home_attack, away_attack,
        home_defense, away_defense,
        xg_home, xg_away,
        probabilities,
        mods,
    )

    fair_odds = FairOdds(
        home=probability_to_decimal(probabilities.home_win),
        draw=probability_to_decimal(probabilities.draw),
        away=probability_to_decimal(probabilities.away_win),
    )

    logger.debug(f"Prediction {home_stats.name} vs {away_stats.name}: "
                 f"xG ({xg_home:.2f}, {xg_away:.2f}) -> "
                 f"{probabilities.home_win:.1f}/{probabilities.draw:.1f}/{probabilities.away_win:.1f}")

    return PredictionResult(
        home_win=round_half_up(probabilities.home_win, 1),
        draw=round_half_up(probabilities.draw, 1),
        away_win=round_half_up(probabilities.away_win, 1),
        fair_odds=fair_odds,
        expected_goals={
            "home": round_half_up(xg_home, 2),
            "away": round_half_up(xg_away, 2),
        },
        strengths=Strengths(
            home_attack=round_half_up(home_attack, 2),
            away_attack=round_half_up(away_attack, 2),
            home_defense=round_half_up(home_defense, 2),
            away_defense=round_half_up(away_defense, 2),
        ),
        likely_scores=tuple(
            ScoreProbability(score.home_goals, score.away_goals,
                             round_half_up(score.probability * 100, 1))
            for score in probabilities.score_matrix
        ),
        insights=tuple(insights),
        confidence=calculate_confidence(probabilities.home_win, probabilities.draw,
                                        probabilities.away_win),
        radar_data=tuple(generate_radar_data(home_stats, away_stats, home_attack, away_attack)),
    )


predict = predict_match


def format_prediction(result: PredictionResult, home_name: str, away_name: str) -> str:
    """
    Format prediction results for display.

    Args:
        result: Prediction result
        home_name: Home team name
        away_name: Away team name

    Returns:
        Formatted string for display
    """
    output = f"\n{'='*60}\n"
    output += f"MATCH PREDICTION: {home_name} vs {away_name}\n"
    output += f"{'='*60}\n\n"

    output += "OUTCOME PROBABILITIES (fair odds):\n"
    output += f"  {home_name} win: {result.home_win:.1f}% ({result.fair_odds.home:.2f})\n"
    output += f"  Draw: {result.draw:.1f}% ({result.fair_odds.draw:.2f})\n"
    output += f"  {away_name} win: {result.away_win:.1f}% ({result.fair_odds.away:.2f})\n\n"

    output += "EXPECTED GOALS (xG):\n"
    output += f"  {home_name}: {result.expected_goals['home']:.2f}\n"
    output += f"  {away_name}: {result.expected_goals['away']:.2f}\n\n"

    output += "MOST LIKELY SCORES:\n"
    for score in result.likely_scores:
        output += f"  {score.home_goals}–{score.away_goals}: {score.probability:.1f}%\n"
    output += "\n"

    output += "INSIGHTS:\n"
    for insight in result.insights:
        output += f"  • {insight}\n"
    output += f"\n  Prediction Confidence: {result.confidence.value}\n"

    return output


# ============================================================
# EXAMPLE USAGE
# ============================================================

if __name__ == "__main__":
    from adjustments import SimulationParameters, resolve_modifiers

    arsenal = TeamStatistics(name="Arsenal", goals_scored=40, goals_conceded=18,
                             matches_played=20, form="WWDWW", won=14)
    chelsea = TeamStatistics(name="Chelsea", goals_scored=30, goals_conceded=22,
                             matches_played=20, form="LDWLW", won=9)

    result = predict_match(arsenal, chelsea, league_average=1.5)
    print(format_prediction(result, "Arsenal", "Chelsea"))

    print("\n" + "="*60)
    print("EXAMPLE 2: Arsenal star striker missing")
    print("="*60 + "\n")

    modifiers = resolve_modifiers(SimulationParameters(home_key_player_missing=True))
    result2 = predict_match(arsenal, chelsea, league_average=1.5, modifiers=modifiers)
    print(format_prediction(result2, "Arsenal", "Chelsea"))
