"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class TileType(IntEnum):
    """Terrain of a single grid cell."""

    EMPTY = 0
    OBSTACLE = 1      # Impassable, blocks line of sight
    DIFFICULT = 2     # Costs 2 movement points
    HAZARD = 3        # Walkable; hazard effects are resolved elsewhere


@unique
class StatusType(IntEnum):
    """Timed conditions a combatant can carry."""

    STUNNED = 0
    PRONE = 1
    BLEEDING = 2
    POISONED = 3
    BURNING = 4
    FROZEN = 5
    SLOWED = 6
    HASTED = 7
    INVISIBLE = 8
    SILENCED = 9
    CHARMED = 10
    PANICKED = 11
    EXHAUSTED = 12


@unique
class Faction(IntEnum):
    """Which side of the encounter a combatant fights on."""

    ALLY = 0
    ENEMY = 1

    @property
    def opponent(self) -> Faction:
        return Faction.ENEMY if self is Faction.ALLY else Faction.ALLY


@unique
class ActionType(IntEnum):
    """Types of actions a driver can propose on its turn."""

    MOVE = 0
    ATTACK = 1
    END_TURN = 2


@unique
class EncounterPhase(IntEnum):
    """Lifecycle of a single encounter."""

    IDLE = 0
    ROLLING_INITIATIVE = 1
    AWAITING_ACTION = 2
    ENDED = 3


@unique
class EncounterOutcome(IntEnum):
    """How an encounter finished."""

    UNDECIDED = 0
    VICTORY = 1       # Allies standing, enemies wiped out
    DEFEAT = 2        # Allies wiped out
    DRAW = 3          # Both sides wiped out
    NO_CONTEST = 4    # Could not start: a side had no living member


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    INITIATIVE = 0
    TIE_BREAK = 1
    TO_HIT = 2
    DAMAGE = 3
