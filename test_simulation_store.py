"""
Unit Tests for the Simulation Store
====================================
Per-match get / update / toggle / reset semantics.
"""

import pytest

from adjustments import SimulationParameters, SimulationStore, TacticalStyle


@pytest.fixture
def store():
    return SimulationStore()


def test_unknown_match_returns_defaults(store):
    """Reading never creates a record."""
    assert store.get('match-1') == SimulationParameters()
    assert 'match-1' not in store
    assert len(store) == 0


def test_toggle_flips_and_persists(store):
    assert store.toggle('match-1', 'home_fortress').home_fortress is True
    assert store.get('match-1').home_fortress is True

    assert store.toggle('match-1', 'home_fortress').home_fortress is False
    assert 'match-1' in store


def test_toggle_accepts_camel_case(store):
    store.toggle(42, 'awayKeyPlayerMissing')

    assert store.get(42).away_key_player_missing is True


def test_toggle_rejects_sliders_and_unknown_names(store):
    with pytest.raises(ValueError):
        store.toggle('match-1', 'form_weight')
    with pytest.raises(ValueError):
        store.toggle('match-1', 'offside_trap')


def test_update_merges_fields(store):
    """Later updates keep earlier changes."""
    store.update('match-1', {'home_motivation': 130})
    store.update('match-1', {'weatherImpact': -10, 'homeTacticalStyle': 'defensive'})

    params = store.get('match-1')
    assert params.home_motivation == 130
    assert params.weather_impact == -10
    assert params.home_tactical_style is TacticalStyle.DEFENSIVE


def test_update_rejects_unknown_parameter(store):
    with pytest.raises(ValueError):
        store.update('match-1', {'pressing': 'high'})
    assert 'match-1' not in store


def test_set_parameter(store):
    assert store.set_parameter('match-1', 'formWeight', 70).form_weight == 70


def test_reset_restores_defaults(store):
    store.toggle('match-1', 'home_key_player_missing')
    store.reset('match-1')

    assert 'match-1' not in store
    assert store.get('match-1') == SimulationParameters()
    store.reset('never-touched')


def test_matches_are_independent(store):
    store.toggle('a', 'home_fortress')
    store.set_parameter('b', 'away_motivation', 60)

    assert store.get('a').away_motivation == 100
    assert store.get('b').home_fortress is False
    assert sorted(store.match_ids()) == ['a', 'b']


def test_modifiers_follow_stored_parameters(store):
    store.toggle('match-1', 'home_key_player_missing')

    assert store.modifiers('match-1').home.attack_multiplier == pytest.approx(0.7)
    assert store.modifiers('other').home.attack_multiplier == 1.0


def test_rejected_update_leaves_record_unchanged(store):
    """A bad slider value is refused before anything is stored."""
    store.update('match-1', {'home_motivation': 130})

    with pytest.raises(ValueError):
        store.update('match-1', {'home_motivation': 'high', 'home_fortress': True})

    assert store.get('match-1') == SimulationParameters(home_motivation=130)
    assert store.modifiers('match-1').home.attack_multiplier == pytest.approx(1.3)


def test_rejected_update_creates_no_record(store):
    with pytest.raises(ValueError):
        store.set_parameter('match-1', 'weatherImpact', 45)

    assert 'match-1' not in store
