"""
Property Tests for the Prediction Pipeline
===========================================
Invariants that must hold for any valid team record, checked with hypothesis.
"""

from hypothesis import assume, given, settings
from hypothesis import strategies as st
import pytest

from adjustments import SideModifiers, SimulationModifiers, SimulationParameters, resolve_modifiers
from decision_engine import calculate_confidence_meter
from football_predictor import TeamStatistics, predict_match


teams = st.builds(
    TeamStatistics,
    name=st.sampled_from(['Arsenal', 'Chelsea', 'Leeds', None]),
    goals_scored=st.integers(min_value=0, max_value=100),
    goals_conceded=st.integers(min_value=0, max_value=100),
    matches_played=st.integers(min_value=10, max_value=38),
    form=st.none() | st.text(alphabet='WDL', min_size=1, max_size=5),
    won=st.none() | st.integers(min_value=0, max_value=10),
)

league_averages = st.floats(min_value=0.8, max_value=2.0)

multipliers = st.floats(min_value=0.5, max_value=1.5)


def home_modifiers(attack):
    return SimulationModifiers(home=SideModifiers(attack_multiplier=attack), away=SideModifiers())


@given(teams, teams, league_averages)
@settings(max_examples=200, deadline=None)
def test_probabilities_bounded_and_normalised(home, away, league_average):
    result = predict_match(home, away, league_average)

    for probability in (result.home_win, result.draw, result.away_win):
        assert 0 <= probability <= 100

    # Holds for teams that never score too: their side is a certain 0
    total = result.home_win + result.draw + result.away_win
    assert total == pytest.approx(100, abs=0.1 + 1e-9)

    assert len(result.likely_scores) <= 5
    for first, second in zip(result.likely_scores, result.likely_scores[1:]):
        assert first.probability >= second.probability


@given(teams, teams)
@settings(max_examples=100, deadline=None)
def test_fair_odds_invert_probabilities(home, away):
    result = predict_match(home, away)

    for probability, odds in ((result.home_win, result.fair_odds.home),
                              (result.draw, result.fair_odds.draw),
                              (result.away_win, result.fair_odds.away)):
        assume(probability >= 1)
        assert odds == pytest.approx(100 / probability, rel=0.05 / probability + 0.006)


@given(teams, teams, multipliers, st.floats(min_value=0.01, max_value=0.5))
@settings(max_examples=100, deadline=None)
def test_more_home_attack_never_hurts_home(home, away, attack, increase):
    weaker = predict_match(home, away, 1.5, home_modifiers(attack))
    stronger = predict_match(home, away, 1.5, home_modifiers(attack + increase))

    assert stronger.home_win >= weaker.home_win
    assert stronger.away_win <= weaker.away_win


@given(teams, teams, league_averages)
@settings(max_examples=100, deadline=None)
def test_swapping_teams_mirrors_outcome(home, away, league_average):
    forward = predict_match(home, away, league_average)
    reverse = predict_match(away, home, league_average)

    assert forward.home_win == pytest.approx(reverse.away_win, abs=0.1)
    assert forward.away_win == pytest.approx(reverse.home_win, abs=0.1)
    assert forward.draw == pytest.approx(reverse.draw, abs=0.1)


@given(teams, teams)
@settings(max_examples=50, deadline=None)
def test_prediction_is_idempotent(home, away):
    assert predict_match(home, away) == predict_match(home, away)


@given(st.floats(min_value=-20, max_value=20))
def test_weather_attack_floor(weather):
    modifiers = resolve_modifiers(SimulationParameters(weather_impact=weather))

    assert modifiers.home.attack_multiplier >= 0.8
    assert modifiers.away.attack_multiplier >= 0.8


@given(st.floats(min_value=0, max_value=100), st.floats(min_value=0, max_value=100),
       st.floats(min_value=0, max_value=100))
def test_confidence_meter_bounded(home_win, draw, away_win):
    meter = calculate_confidence_meter(home_win, draw, away_win)

    assert 0 <= meter.value <= 100
    assert meter.gap >= 0
