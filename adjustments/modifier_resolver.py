"""
Simulation Modifier Resolver
============================

Translates the user-facing simulation controls (toggles and sliders) into
the multipliers applied to attack and defense strengths.

Rules (multiplicative):
- Key player missing: attack x0.7 for that side
- Home fortress: home defense x0.85 (lower defense strength = tighter defense)
- Motivation (0-200, 100 neutral): attack x motivation/100
- Weather (-20..+20): attack x max(0.8, 1 + w/100), home factor damped
  by 0.9. A weather value of 0 skips the rule entirely: neutral weather
  never damps the home attack to 0.9, and default controls resolve to
  exactly 1.0 on both sides.
- Tactical style: defensive 0.85 / balanced 1.0 / attacking 1.15 on both

Form weight is carried through as a 0-1 fraction for display only; it does
not enter the Poisson model.
"""

import copy
import json
import logging
from dataclasses import dataclass, asdict, fields
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# Shipped next to this module, so it resolves regardless of the working directory
DEFAULT_RULES_FILE = Path(__file__).parent / 'rules.json'


DEFAULT_RULES = {
    'key_player_missing': 0.7,
    'home_fortress': 0.85,
    'weather_home_damping': 0.9,
    'weather_floor': 0.8,
    'default_form_weight': 40,
    'tactical_styles': {
        'defensive': {'attack': 0.85, 'defense': 0.85},
        'balanced': {'attack': 1.0, 'defense': 1.0},
        'attacking': {'attack': 1.15, 'defense': 1.15},
    },
}

# camelCase names used by the browser front-end
_CAMEL_CASE_KEYS = {
    'homeKeyPlayerMissing': 'home_key_player_missing',
    'awayKeyPlayerMissing': 'away_key_player_missing',
    'homeFortress': 'home_fortress',
    'formWeight': 'form_weight',
    'homeMotivation': 'home_motivation',
    'awayMotivation': 'away_motivation',
    'weatherImpact': 'weather_impact',
    'homeTacticalStyle': 'home_tactical_style',
    'awayTacticalStyle': 'away_tactical_style',
}


class TacticalStyle(Enum):
    DEFENSIVE = 'defensive'
    BALANCED = 'balanced'
    ATTACKING = 'attacking'

    @classmethod
    def parse(cls, value) -> 'TacticalStyle':
        """Parse a style name, falling back to BALANCED for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.debug(f"Unknown tactical style {value!r}, using balanced")
            return cls.BALANCED


_TOGGLES = ('home_key_player_missing', 'away_key_player_missing', 'home_fortress')

_SLIDER_RANGES = {
    'form_weight': (0, 100),
    'home_motivation': (0, 200),
    'away_motivation': (0, 200),
    'weather_impact': (-20, 20),
}


def normalize_parameter_name(name: str) -> str:
    """Map a camelCase control name to its snake_case field name."""
    return _CAMEL_CASE_KEYS.get(name, name)


@dataclass(frozen=True)
class SimulationParameters:
    """Raw simulation controls for one match, as set in the tactical panel."""
    home_key_player_missing: bool = False
    away_key_player_missing: bool = False
    home_fortress: bool = False
    form_weight: float = 40         # 0-100
    home_motivation: float = 100    # 0-200, 100 = neutral
    away_motivation: float = 100
    weather_impact: float = 0       # -20..+20
    home_tactical_style: TacticalStyle = TacticalStyle.BALANCED
    away_tactical_style: TacticalStyle = TacticalStyle.BALANCED

    def __post_init__(self):
        """
        Coerce and validate every control.

        Raises:
            ValueError: If a toggle is not a bool or a slider is not a number
                within its range
        """
        for name in _TOGGLES:
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false, got {getattr(self, name)!r}")

        # Frozen dataclass: coerce in place
        for name, (low, high) in _SLIDER_RANGES.items():
            value = getattr(self, name)
            if isinstance(value, bool):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not isinstance(value, (int, float)):
                try:
                    value = float(value)
                except (TypeError, ValueError):
                    raise ValueError(f"{name} must be a number, got {value!r}") from None
            if not low <= value <= high:
                raise ValueError(f"{name} must be between {low} and {high}, got {value!r}")
            object.__setattr__(self, name, value)

        for name in ('home_tactical_style', 'away_tactical_style'):
            object.__setattr__(self, name, TacticalStyle.parse(getattr(self, name)))

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'SimulationParameters':
        """
        Build parameters from a JSON payload.

        Accepts snake_case or camelCase keys; unknown keys are ignored.
        """
        if not data:
            return cls()
        known = set(cls.field_names())
        values = {}
        for key, value in data.items():
            name = normalize_parameter_name(key)
            if name in known:
                values[name] = value
        return cls(**values)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['home_tactical_style'] = self.home_tactical_style.value
        data['away_tactical_style'] = self.away_tactical_style.value
        return data


@dataclass(frozen=True)
class SideModifiers:
    attack_multiplier: float = 1.0
    defense_multiplier: float = 1.0
    form_weight: float = 0.4


@dataclass(frozen=True)
class SimulationModifiers:
    """Resolved multipliers for both sides."""
    home: SideModifiers
    away: SideModifiers

    @classmethod
    def neutral(cls) -> 'SimulationModifiers':
        return cls(home=SideModifiers(), away=SideModifiers())

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ActiveModifier:
    """One entry in the "active modifiers" summary of the tactical panel."""
    kind: str    # 'positive', 'negative' or 'neutral'
    team: str    # 'home', 'away' or 'both'
    text: str
    impact: str


def _merge_rules(base: Dict, overrides: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_rules(merged[key], value)
        else:
            merged[key] = value
    return merged


class ModifierResolver:
    """
    Resolves SimulationParameters into SimulationModifiers.

    Rule constants come from a JSON file (under the "modifiers" key)
    layered over DEFAULT_RULES.
    """

    def __init__(self, rules_file: Optional[Union[str, Path]] = DEFAULT_RULES_FILE):
        """
        Initialize the resolver.

        Args:
            rules_file: Path to rules configuration (the packaged rules.json by
                default; None for the built-in DEFAULT_RULES only)
        """
        self.rules = copy.deepcopy(DEFAULT_RULES)

        if rules_file:
            rules_path = Path(rules_file)
            if rules_path.exists():
                with open(rules_path, 'r') as f:
                    config = json.load(f)
                self.rules = _merge_rules(self.rules, config.get('modifiers', {}))
                logger.info(f"Loaded modifier rules from {rules_path}")
            else:
                logger.warning(f"Rules file {rules_path} not found, using default modifier rules")

    def tactical_multipliers(self, style: TacticalStyle) -> Dict[str, float]:
        styles = self.rules['tactical_styles']
        return styles.get(style.value, styles['balanced'])

    def resolve(self, params: SimulationParameters) -> SimulationModifiers:
        """
        Apply every rule to neutral multipliers.

        Args:
            params: Raw simulation controls

        Returns:
            SimulationModifiers for home and away
        """
        rules = self.rules
        form_weight = params.form_weight / 100

        home_attack = 1.0
        home_defense = 1.0
        away_attack = 1.0
        away_defense = 1.0

        if params.home_key_player_missing:
            home_attack *= rules['key_player_missing']
        if params.away_key_player_missing:
            away_attack *= rules['key_player_missing']

        if params.home_fortress:
            home_defense *= rules['home_fortress']

        home_attack *= params.home_motivation / 100
        away_attack *= params.away_motivation / 100

        # Neutral weather leaves both sides untouched; otherwise the home
        # side is less exposed to it
        if params.weather_impact:
            weather_factor = 1 + params.weather_impact / 100
            home_attack *= max(rules['weather_floor'],
                               weather_factor * rules['weather_home_damping'])
            away_attack *= max(rules['weather_floor'], weather_factor)

        home_tactics = self.tactical_multipliers(params.home_tactical_style)
        away_tactics = self.tactical_multipliers(params.away_tactical_style)
        home_attack *= home_tactics['attack']
        home_defense *= home_tactics['defense']
        away_attack *= away_tactics['attack']
        away_defense *= away_tactics['defense']

        return SimulationModifiers(
            home=SideModifiers(home_attack, home_defense, form_weight),
            away=SideModifiers(away_attack, away_defense, form_weight),
        )

    def active_modifiers(self, params: SimulationParameters) -> List[ActiveModifier]:
        """
        Human-readable summary of the controls that differ from neutral.

        Args:
            params: Raw simulation controls

        Returns:
            List of ActiveModifier entries in display order
        """
        active = []
        attack_loss = round((1 - self.rules['key_player_missing']) * 100)
        fortress_gain = round((1 - self.rules['home_fortress']) * 100)

        if params.home_key_player_missing:
            active.append(ActiveModifier('negative', 'home', 'Key Player Missing',
                                         f"-{attack_loss}% Attack"))
        if params.away_key_player_missing:
            active.append(ActiveModifier('negative', 'away', 'Key Player Missing',
                                         f"-{attack_loss}% Attack"))

        if params.home_fortress:
            active.append(ActiveModifier('positive', 'home', 'Home Fortress',
                                         f"+{fortress_gain}% Defense"))

        if params.form_weight != self.rules['default_form_weight']:
            active.append(ActiveModifier('neutral', 'both', 'Form Weight Adjusted',
                                         f"{params.form_weight:g}%"))

        if params.home_motivation != 100:
            kind = 'positive' if params.home_motivation > 100 else 'negative'
            active.append(ActiveModifier(kind, 'home', 'Motivation', f"{params.home_motivation:g}%"))
        if params.away_motivation != 100:
            kind = 'positive' if params.away_motivation > 100 else 'negative'
            active.append(ActiveModifier(kind, 'away', 'Motivation', f"{params.away_motivation:g}%"))

        return active


_default_resolver = ModifierResolver()


def resolve_modifiers(params: Optional[SimulationParameters] = None) -> SimulationModifiers:
    """Resolve parameters with the built-in rules. Pure function."""
    return _default_resolver.resolve(params or SimulationParameters())


def get_active_modifiers(params: SimulationParameters) -> List[ActiveModifier]:
    """Active-modifier summary with the built-in rules."""
    return _default_resolver.active_modifiers(params)
