"""
Adjustments Module
==================

Human-in-the-loop simulation modifiers and the per-match store that holds them.
"""

from .modifier_resolver import (
    DEFAULT_RULES_FILE,
    ActiveModifier,
    ModifierResolver,
    SideModifiers,
    SimulationModifiers,
    SimulationParameters,
    TacticalStyle,
    get_active_modifiers,
    resolve_modifiers,
)
from .simulation_store import SimulationStore

__all__ = [
    'DEFAULT_RULES_FILE',
    'ActiveModifier',
    'ModifierResolver',
    'SideModifiers',
    'SimulationModifiers',
    'SimulationParameters',
    'SimulationStore',
    'TacticalStyle',
    'get_active_modifiers',
    'resolve_modifiers',
]
