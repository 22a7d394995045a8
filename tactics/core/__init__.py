"""Core data models and the combat grid."""

from tactics.core.enums import (
    ActionType, Domain, EncounterOutcome, EncounterPhase, Faction, StatusType, TileType,
)
from tactics.core.effects import StatusEffect, StatusEngine
from tactics.core.models import Armor, Combatant, GridPosition, Weapon
from tactics.core.grid import CombatGrid

__all__ = [
    "ActionType",
    "Armor",
    "CombatGrid",
    "Combatant",
    "Domain",
    "EncounterOutcome",
    "EncounterPhase",
    "Faction",
    "GridPosition",
    "StatusEffect",
    "StatusEngine",
    "StatusType",
    "TileType",
    "Weapon",
]
