"""
Simulation Store
================

Holds the simulation controls for each match, keyed by match ID.

A match has no record until it is first changed; reading an unknown match
returns the default parameters. Reset deletes the record. Writes are
last-writer-wins.
"""

import logging
import threading
from dataclasses import fields, replace
from typing import Dict, Hashable, List, Optional

from .modifier_resolver import (
    ModifierResolver,
    SimulationModifiers,
    SimulationParameters,
    normalize_parameter_name,
)

logger = logging.getLogger(__name__)

_BOOLEAN_PARAMETERS = {f.name for f in fields(SimulationParameters) if f.type in (bool, 'bool')}


class SimulationStore:
    """
    Per-match simulation parameters with get / merge / toggle / reset.

    Owned by whatever holds UI state (the Flask app creates one); there is
    no module-level instance.
    """

    def __init__(self, resolver: Optional[ModifierResolver] = None):
        """
        Initialize an empty store.

        Args:
            resolver: Resolver used by modifiers() (built-in rules if None)
        """
        self.resolver = resolver or ModifierResolver()
        self._simulations: Dict[Hashable, SimulationParameters] = {}
        self._lock = threading.Lock()

    def __contains__(self, match_id) -> bool:
        return match_id in self._simulations

    def __len__(self) -> int:
        return len(self._simulations)

    def match_ids(self) -> List[Hashable]:
        return list(self._simulations)

    def get(self, match_id) -> SimulationParameters:
        """Current parameters for a match, or defaults if none are stored."""
        return self._simulations.get(match_id) or SimulationParameters()

    def _check_parameter(self, parameter: str) -> str:
        name = normalize_parameter_name(parameter)
        if name not in SimulationParameters.field_names():
            raise ValueError(f"Unknown simulation parameter: {parameter}")
        return name

    def update(self, match_id, updates: Dict) -> SimulationParameters:
        """
        Merge a partial update into the stored parameters.

        Args:
            match_id: Match identifier
            updates: Field values to change (snake_case or camelCase keys)

        Returns:
            The new parameters for the match

        Raises:
            ValueError: If an update names an unknown parameter or carries an
                invalid value; the stored parameters are left unchanged
        """
        changes = {self._check_parameter(key): value for key, value in updates.items()}
        with self._lock:
            current = self._simulations.get(match_id) or SimulationParameters()
            updated = replace(current, **changes)
            self._simulations[match_id] = updated
        logger.debug(f"Simulation {match_id} updated: {changes}")
        return updated

    def set_parameter(self, match_id, parameter: str, value) -> SimulationParameters:
        """Set a single parameter (slider or style) for a match."""
        return self.update(match_id, {parameter: value})

    def toggle(self, match_id, parameter: str) -> SimulationParameters:
        """
        Flip a boolean parameter for a match.

        Raises:
            ValueError: If the parameter is unknown or not a toggle
        """
        name = self._check_parameter(parameter)
        if name not in _BOOLEAN_PARAMETERS:
            raise ValueError(f"Simulation parameter {parameter} is not a toggle")

        with self._lock:
            current = self._simulations.get(match_id) or SimulationParameters()
            updated = replace(current, **{name: not getattr(current, name)})
            self._simulations[match_id] = updated
        logger.debug(f"Simulation {match_id} toggled {name} -> {getattr(updated, name)}")
        return updated

    def reset(self, match_id) -> None:
        """Remove the record for a match; later reads return defaults."""
        with self._lock:
            self._simulations.pop(match_id, None)
        logger.debug(f"Simulation {match_id} reset to defaults")

    def modifiers(self, match_id) -> SimulationModifiers:
        """Resolved modifiers for the current parameters of a match."""
        return self.resolver.resolve(self.get(match_id))
