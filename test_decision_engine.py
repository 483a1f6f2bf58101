"""
Unit Tests for Verdicts and the Confidence Meter
=================================================
"""

from types import SimpleNamespace

import pytest

from decision_engine import VerdictType, calculate_confidence_meter, calculate_verdict
from football_predictor import ConfidenceLevel, TeamStatistics, calculate_confidence, predict_match


def make_prediction(home_win, draw, away_win, xg_home, xg_away):
    return SimpleNamespace(home_win=home_win, draw=draw, away_win=away_win,
                           expected_goals={'home': xg_home, 'away': xg_away})


# ============================================================
# VERDICT
# ============================================================

def test_dominant_home_win():
    verdict = calculate_verdict(make_prediction(65.0, 20.0, 15.0, 2.1, 0.4), 'Arsenal', 'Chelsea')

    assert verdict.kind is VerdictType.DOMINANT
    assert verdict.headline == 'DOMINANT ARSENAL WIN'
    assert verdict.subtext == '65.0% chance • Clean sheet likely'


def test_dominant_away_win():
    verdict = calculate_verdict(make_prediction(15.0, 20.0, 65.0, 0.3, 2.2), 'Arsenal', 'Chelsea')

    assert verdict.headline == 'DOMINANT CHELSEA WIN'


def test_goalfest():
    verdict = calculate_verdict(make_prediction(45.0, 20.0, 35.0, 2.0, 1.8), 'Arsenal', 'Chelsea')

    assert verdict.kind is VerdictType.GOALFEST
    assert verdict.headline == 'GOAL FEST INCOMING'
    assert verdict.subtext == '3.8 goals expected • Both teams to score'


def test_deadlock():
    verdict = calculate_verdict(make_prediction(30.0, 38.0, 32.0, 1.0, 1.0), 'Arsenal', 'Chelsea')

    assert verdict.kind is VerdictType.DEADLOCK
    assert verdict.subtext == '38.0% chance of draw • Evenly matched'


def test_tightly_contested():
    verdict = calculate_verdict(make_prediction(45.0, 30.0, 25.0, 1.5, 1.2), 'Arsenal', 'Chelsea')

    assert verdict.kind is VerdictType.TIGHT
    assert verdict.headline == 'TIGHTLY CONTESTED'
    assert verdict.subtext == 'Too close to call • Arsenal slight edge'


def test_tight_tie_goes_to_away_side():
    verdict = calculate_verdict(make_prediction(35.0, 30.0, 35.0, 1.2, 1.2))

    assert verdict.subtext == 'Too close to call • Away Team slight edge'


def test_clear_favourite():
    verdict = calculate_verdict(make_prediction(58.0, 25.0, 17.0, 1.8, 0.9), 'Arsenal', 'Chelsea')

    assert verdict.kind is VerdictType.CLEAR
    assert verdict.headline == 'ARSENAL FAVORED'
    assert verdict.subtext == '58.0% win probability • 1.8 xG'


def test_verdict_priority_dominant_before_goalfest():
    """A lopsided high-scoring match is still dominant."""
    verdict = calculate_verdict(make_prediction(80.0, 12.0, 8.0, 3.6, 0.4), 'Arsenal', 'Chelsea')

    assert verdict.kind is VerdictType.DOMINANT


def test_verdict_from_real_prediction():
    home = TeamStatistics(name='Arsenal', goals_scored=40, goals_conceded=18, matches_played=20)
    away = TeamStatistics(name='Chelsea', goals_scored=30, goals_conceded=22, matches_played=20)

    data = calculate_verdict(predict_match(home, away), home.name, away.name).to_dict()

    assert data['type'] in {kind.value for kind in VerdictType}
    assert data['headline']


# ============================================================
# CONFIDENCE METER
# ============================================================

@pytest.mark.parametrize("probabilities, value, level", [
    ((62.0, 24.0, 14.0), 76.0, 'VERY HIGH'),
    ((55.0, 30.0, 15.0), 50.0, 'HIGH'),
    ((46.0, 30.0, 24.0), 32.0, 'MEDIUM'),
    ((40.0, 35.0, 25.0), 10.0, 'LOW'),
    ((95.0, 4.0, 1.0), 100, 'VERY HIGH'),
])
def test_confidence_meter(probabilities, value, level):
    meter = calculate_confidence_meter(*probabilities)

    assert meter.value == pytest.approx(value)
    assert meter.level == level


def test_meter_gap_uses_draw_when_second():
    meter = calculate_confidence_meter(20.0, 45.0, 35.0)

    assert meter.gap == pytest.approx(10.0)
    assert meter.to_dict()['description'] == 'Uncertain outcome'


def test_meter_and_absolute_confidence_disagree():
    """The gauge and the prediction confidence measure different things."""
    probabilities = (56.0, 40.0, 4.0)

    assert calculate_confidence(*probabilities) is ConfidenceLevel.HIGH
    assert calculate_confidence_meter(*probabilities).level == 'MEDIUM'
