"""
Flask Web Application for Football Match Prediction
====================================================
JSON API over the Poisson prediction engine and the tactical simulation store.

Endpoints:
- POST   /predict                                 run a prediction (optionally with a match's simulation)
- GET    /simulation/<match_id>                   current simulation controls
- PATCH  /simulation/<match_id>                   merge control updates
- POST   /simulation/<match_id>/toggle/<param>    flip a toggle
- DELETE /simulation/<match_id>                   reset to defaults
- POST   /value                                   compare bookmaker odds with fair odds
"""

import json
import logging
import os
from dataclasses import asdict

from flask import Flask, jsonify, request

from adjustments import DEFAULT_RULES_FILE, ModifierResolver, SimulationParameters, SimulationStore
from decision_engine import calculate_confidence_meter, calculate_verdict
from football_predictor import DEFAULT_LEAGUE_AVERAGE, InvalidInputError, TeamStatistics, predict_match
from odds_utils import calculate_expected_value, decimal_to_probability, detect_value
from visual_data import calculate_form_trend, generate_score_heatmap, generate_stat_battle

CONFIG_FILE = 'promatch_config.json'


def load_config(config_path: str = CONFIG_FILE) -> dict:
    """Load application configuration, falling back to defaults."""
    config = {
        'default_league_average': DEFAULT_LEAGUE_AVERAGE,
        'rules_file': str(DEFAULT_RULES_FILE),
        'log_level': 'INFO',
    }
    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config.update(json.load(f))
    return config


config = load_config()

logging.basicConfig(
    level=getattr(logging, str(config['log_level']).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
simulation_store = SimulationStore(ModifierResolver(config['rules_file']))


def _error(message: str, status: int = 400):
    return jsonify({"success": False, "error": message}), status


@app.route('/predict', methods=['POST'])
def predict():
    """Handle prediction requests."""
    data = request.get_json(silent=True) or {}

    try:
        home_data = data.get('home_team')
        away_data = data.get('away_team')
        home_stats = TeamStatistics.from_dict(home_data) if home_data is not None else None
        away_stats = TeamStatistics.from_dict(away_data) if away_data is not None else None

        league_average = data.get('league_average', config['default_league_average'])

        # A match ID pulls the stored controls; an inline simulation overrides them
        match_id = data.get('match_id')
        if data.get('simulation') is not None:
            parameters = SimulationParameters.from_dict(data['simulation'])
        elif match_id is not None:
            parameters = simulation_store.get(match_id)
        else:
            parameters = SimulationParameters()
        modifiers = simulation_store.resolver.resolve(parameters)

        result = predict_match(home_stats, away_stats, league_average, modifiers)
    except (InvalidInputError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Prediction request rejected: {e}")
        return _error(str(e))

    verdict = calculate_verdict(result, home_stats.name, away_stats.name)
    meter = calculate_confidence_meter(result.home_win, result.draw, result.away_win)
    heatmap = generate_score_heatmap(result.expected_goals['home'], result.expected_goals['away'])

    logger.info(f"Predicted {home_stats.name} vs {away_stats.name}: "
                f"{result.home_win}/{result.draw}/{result.away_win} ({result.confidence.value})")

    return jsonify({
        "success": True,
        "match_id": match_id,
        "prediction": result.to_dict(),
        "verdict": verdict.to_dict(),
        "confidence_meter": meter.to_dict(),
        "simulation": parameters.to_dict(),
        "active_modifiers": [asdict(m) for m in simulation_store.resolver.active_modifiers(parameters)],
        "stat_battle": [asdict(row) for row in generate_stat_battle(result, home_stats.form,
                                                                     away_stats.form)],
        "score_heatmap": {
            "cells": [asdict(cell) for cell in heatmap.cells],
            "most_likely_score": list(heatmap.most_likely_score),
            "max_probability": heatmap.max_probability,
        },
        "form_trend": {
            side: {"label": trend.label, "slope": round(trend.slope, 2)}
            for side, trend in (("home", calculate_form_trend(home_stats.form)),
                                ("away", calculate_form_trend(away_stats.form)))
        },
    })


def _simulation_response(match_id):
    parameters = simulation_store.get(match_id)
    return jsonify({
        "success": True,
        "match_id": match_id,
        "simulation": parameters.to_dict(),
        "modifiers": simulation_store.resolver.resolve(parameters).to_dict(),
        "active_modifiers": [asdict(m) for m in simulation_store.resolver.active_modifiers(parameters)],
    })


@app.route('/simulation/<match_id>', methods=['GET'])
def get_simulation(match_id):
    """Return the current simulation controls for a match."""
    return _simulation_response(match_id)


@app.route('/simulation/<match_id>', methods=['PATCH'])
def update_simulation(match_id):
    """Merge control updates into a match's simulation."""
    updates = request.get_json(silent=True) or {}
    if not isinstance(updates, dict):
        return _error("Simulation updates must be a JSON object")
    try:
        simulation_store.update(match_id, updates)
    except (ValueError, TypeError) as e:
        return _error(str(e))
    return _simulation_response(match_id)


@app.route('/simulation/<match_id>/toggle/<parameter>', methods=['POST'])
def toggle_simulation(match_id, parameter):
    """Flip a boolean control."""
    try:
        simulation_store.toggle(match_id, parameter)
    except ValueError as e:
        return _error(str(e))
    return _simulation_response(match_id)


@app.route('/simulation/<match_id>', methods=['DELETE'])
def reset_simulation(match_id):
    """Reset a match's simulation to defaults."""
    simulation_store.reset(match_id)
    return _simulation_response(match_id)


@app.route('/value', methods=['POST'])
def value():
    """Compare a bookmaker price with the model's fair price."""
    data = request.get_json(silent=True) or {}
    try:
        bookie_odds = float(data.get('bookie_odds') or 0)
        model_odds = float(data.get('model_odds') or 0)
        stake = float(data.get('stake', 10))
    except (TypeError, ValueError):
        return _error('Odds and stake must be numbers')

    signal = detect_value(bookie_odds, model_odds)
    return jsonify({
        "success": True,
        "has_value": signal.has_value,
        "edge": signal.edge,
        "expected_value": calculate_expected_value(stake, bookie_odds,
                                                   decimal_to_probability(model_odds)),
    })


if __name__ == '__main__':
    app.run(debug=True, port=5000)
