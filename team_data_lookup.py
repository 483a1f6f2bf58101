"""
Team Data Lookup Module
=======================
Turns football-data.org (v4) standings into prediction inputs.

This module:
- Fetches competition standings over HTTP (API key via X-Auth-Token)
- Extracts a team's season statistics in TeamStatistics format
- Computes the league average goals per team per game

Author: Football Analytics System
Version: 2.0
"""

import logging
import os
from typing import Dict, List, Optional

import pandas as pd
import requests

from football_predictor import DEFAULT_LEAGUE_AVERAGE, TeamStatistics

logger = logging.getLogger(__name__)

API_BASE_URL = 'https://api.football-data.org/v4'

COMPETITIONS = {
    'WORLD_CUP': {'code': 'WC', 'name': 'FIFA World Cup', 'tier': 'TIER_ONE'},
    'CHAMPIONS_LEAGUE': {'code': 'CL', 'name': 'UEFA Champions League', 'tier': 'TIER_ONE'},
    'PREMIER_LEAGUE': {'code': 'PL', 'name': 'Premier League', 'tier': 'TIER_ONE'},
    'LA_LIGA': {'code': 'PD', 'name': 'La Liga', 'tier': 'TIER_ONE'},
    'BUNDESLIGA': {'code': 'BL1', 'name': 'Bundesliga', 'tier': 'TIER_TWO'},
    'EREDIVISIE': {'code': 'DED', 'name': 'Eredivisie', 'tier': 'TIER_TWO'},
    'SERIE_A': {'code': 'SA', 'name': 'Serie A', 'tier': 'TIER_TWO'},
    'LIGUE_1': {'code': 'FL1', 'name': 'Ligue 1', 'tier': 'TIER_TWO'},
}

_FORM_RESULTS = {'W': 'win', 'D': 'draw', 'L': 'loss'}


def _league_table(standings: Optional[List[Dict]]) -> Optional[List[Dict]]:
    """The first (total) table of a standings payload, if present."""
    if not standings or not standings[0].get('table'):
        return None
    return standings[0]['table']


def _normalize_form(form: Optional[str]) -> Optional[str]:
    """The v4 API separates results with commas ("W,W,D"); keep letters only."""
    if not form:
        return None
    return form.replace(',', '') or None


def extract_team_stats(standings: Optional[List[Dict]], team_id: int) -> Optional[TeamStatistics]:
    """
    Extract a team's season statistics from standings.

    Args:
        standings: The "standings" list of a football-data.org response
        team_id: Team ID to look up

    Returns:
        TeamStatistics or None if the team is not in the table
    """
    table = _league_table(standings)
    if table is None:
        return None

    entry = next((row for row in table if row.get('team', {}).get('id') == team_id), None)
    if entry is None:
        logger.warning(f"Team {team_id} not found in standings")
        return None

    return TeamStatistics(
        name=entry['team'].get('shortName') or entry['team'].get('name'),
        goals_scored=entry.get('goalsFor', 0),
        goals_conceded=entry.get('goalsAgainst', 0),
        matches_played=entry.get('playedGames', 0),
        form=_normalize_form(entry.get('form')),
        won=entry.get('won'),
    )


def calculate_league_average(standings: Optional[List[Dict]]) -> float:
    """
    Average goals per team per game across the league table.

    Args:
        standings: The "standings" list of a football-data.org response

    Returns:
        Total goals for / total games played, 1.5 if unavailable
    """
    table = _league_table(standings)
    if table is None:
        return DEFAULT_LEAGUE_AVERAGE

    df = pd.DataFrame(table, columns=['goalsFor', 'playedGames']).fillna(0)
    total_matches = df['playedGames'].sum()
    if total_matches == 0:
        return DEFAULT_LEAGUE_AVERAGE

    return float(df['goalsFor'].sum() / total_matches)


def parse_form(form: Optional[str]) -> List[str]:
    """Parse a form string such as "WWDLW" into result names."""
    if not form:
        return []
    return [_FORM_RESULTS[result] for result in form if result in _FORM_RESULTS]  # skips separators


class FootballDataClient:
    """Thin HTTP client for the football-data.org v4 API."""

    def __init__(self, api_key: Optional[str] = None, base_url: str = API_BASE_URL,
                 timeout: float = 10.0, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            api_key: API token (falls back to FOOTBALL_DATA_API_KEY)
            base_url: API root URL
            timeout: Request timeout in seconds
            session: Optional requests session to reuse
        """
        self.api_key = api_key or os.environ.get('FOOTBALL_DATA_API_KEY')
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[Dict] = None) -> Dict:
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['X-Auth-Token'] = self.api_key

        url = f"{self.base_url}{path}"
        response = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.HTTPError:
            logger.error(f"Request to {url} failed with HTTP {response.status_code}")
            raise
        return response.json()

    def get_standings(self, competition_code: str) -> List[Dict]:
        """Fetch the standings list for a competition."""
        data = self._get(f"/competitions/{competition_code}/standings")
        return data.get('standings', [])

    def get_matches(self, competition_code: str, status: str = 'SCHEDULED') -> List[Dict]:
        """Fetch matches for a competition, scheduled ones by default."""
        data = self._get(f"/competitions/{competition_code}/matches", params={'status': status})
        return data.get('matches', [])

    def get_match_prediction_data(self, home_team_id: int, away_team_id: int,
                                  competition_code: str) -> Dict:
        """
        Everything the prediction engine needs for one fixture.

        Returns:
            Dictionary with home_stats, away_stats and league_average
        """
        standings = self.get_standings(competition_code)
        return {
            'home_stats': extract_team_stats(standings, home_team_id),
            'away_stats': extract_team_stats(standings, away_team_id),
            'league_average': calculate_league_average(standings),
        }
