"""
Integration Tests for the Flask API
====================================
Runs the endpoints through Flask's test client.
"""

import uuid

import pytest

from adjustments import DEFAULT_RULES_FILE
from app import app, load_config


ARSENAL = {'name': 'Arsenal', 'goals_scored': 40, 'goals_conceded': 18,
           'matches_played': 20, 'form': 'WWDWW', 'won': 14}
CHELSEA = {'name': 'Chelsea', 'goalsFor': 30, 'goalsAgainst': 22,
           'playedGames': 20, 'form': 'LDWLW', 'won': 9}


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def match_id():
    return f"test-{uuid.uuid4().hex}"


def test_predict(client):
    response = client.post('/predict', json={'home_team': ARSENAL, 'away_team': CHELSEA})
    data = response.get_json()

    assert response.status_code == 200
    assert data['success'] is True
    prediction = data['prediction']
    total = prediction['home_win'] + prediction['draw'] + prediction['away_win']
    assert total == pytest.approx(100, abs=0.1)
    assert prediction['strengths']['home_attack'] == 1.33
    assert data['verdict']['type'] in {'dominant', 'goalfest', 'deadlock', 'tight', 'clear'}
    assert 0 <= data['confidence_meter']['value'] <= 100
    assert len(data['score_heatmap']['cells']) == 25
    assert [row['label'] for row in data['stat_battle']] == ['ATTACK', 'DEFENSE', 'FORM', 'WIN %']
    assert data['active_modifiers'] == []
    assert data['form_trend'] == {'home': {'label': 'Stable', 'slope': 0.0},
                                  'away': {'label': 'Improving', 'slope': 0.5}}


def test_predict_missing_team(client):
    response = client.post('/predict', json={'home_team': ARSENAL})

    assert response.status_code == 400
    assert response.get_json() == {'success': False,
                                   'error': 'Missing team statistics. Cannot generate prediction.'}


def test_predict_with_inline_simulation(client):
    response = client.post('/predict', json={
        'home_team': ARSENAL,
        'away_team': CHELSEA,
        'simulation': {'homeFortress': True},
    })
    data = response.get_json()

    assert data['simulation']['home_fortress'] is True
    assert any(insight.startswith('[HOME]') for insight in data['prediction']['insights'])


def test_predict_uses_stored_simulation(client, match_id):
    client.post(f'/simulation/{match_id}/toggle/homeKeyPlayerMissing')

    response = client.post('/predict', json={
        'home_team': ARSENAL, 'away_team': CHELSEA, 'match_id': match_id})
    data = response.get_json()

    assert data['match_id'] == match_id
    assert data['prediction']['strengths']['home_attack'] == 0.93
    assert data['active_modifiers'][0]['impact'] == '-30% Attack'


def test_simulation_defaults(client, match_id):
    data = client.get(f'/simulation/{match_id}').get_json()

    assert data['simulation']['home_motivation'] == 100
    assert data['simulation']['home_tactical_style'] == 'balanced'
    assert data['modifiers']['home']['attack_multiplier'] == 1.0


def test_simulation_toggle(client, match_id):
    data = client.post(f'/simulation/{match_id}/toggle/home_fortress').get_json()

    assert data['simulation']['home_fortress'] is True
    assert data['modifiers']['home']['defense_multiplier'] == pytest.approx(0.85)


def test_simulation_toggle_rejects_slider(client, match_id):
    response = client.post(f'/simulation/{match_id}/toggle/formWeight')

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_simulation_patch(client, match_id):
    response = client.patch(f'/simulation/{match_id}',
                            json={'homeMotivation': 120, 'awayTacticalStyle': 'defensive'})
    data = response.get_json()

    assert data['simulation']['home_motivation'] == 120
    assert data['simulation']['away_tactical_style'] == 'defensive'
    assert data['modifiers']['home']['attack_multiplier'] == pytest.approx(1.2)


def test_simulation_patch_unknown_parameter(client, match_id):
    response = client.patch(f'/simulation/{match_id}', json={'pressing': 'high'})

    assert response.status_code == 400


def test_simulation_patch_bad_value_keeps_settings(client, match_id):
    client.patch(f'/simulation/{match_id}', json={'homeMotivation': 120})

    response = client.patch(f'/simulation/{match_id}', json={'home_motivation': 'high'})

    assert response.status_code == 400
    assert response.get_json()['success'] is False

    follow_up = client.get(f'/simulation/{match_id}')
    assert follow_up.status_code == 200
    assert follow_up.get_json()['simulation']['home_motivation'] == 120


def test_simulation_patch_requires_object(client, match_id):
    response = client.patch(f'/simulation/{match_id}', json=['homeFortress'])

    assert response.status_code == 400


def test_predict_rejects_bad_inline_simulation(client):
    response = client.post('/predict', json={
        'home_team': ARSENAL, 'away_team': CHELSEA, 'simulation': {'weatherImpact': 'storm'}})

    assert response.status_code == 400


def test_simulation_reset(client, match_id):
    client.post(f'/simulation/{match_id}/toggle/home_fortress')

    data = client.delete(f'/simulation/{match_id}').get_json()

    assert data['simulation']['home_fortress'] is False


def test_value(client):
    data = client.post('/value', json={'bookie_odds': 2.6, 'model_odds': 2.5}).get_json()

    assert data['has_value'] is True
    assert data['edge'] == pytest.approx(1.54)
    assert data['expected_value'] == pytest.approx(4.4)


def test_value_rejects_text(client):
    response = client.post('/value', json={'bookie_odds': 'evens', 'model_odds': 2.5})

    assert response.status_code == 400


def test_load_config_defaults(tmp_path):
    config = load_config(str(tmp_path / 'missing.json'))

    assert config['default_league_average'] == 1.5
    assert config['log_level'] == 'INFO'
    assert config['rules_file'] == str(DEFAULT_RULES_FILE)


def test_load_config_overrides(tmp_path):
    config_file = tmp_path / 'promatch_config.json'
    config_file.write_text('{"default_league_average": 1.4}')

    assert load_config(str(config_file))['default_league_average'] == 1.4
