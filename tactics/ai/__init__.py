"""AI layer: pathfinding and the turn driver."""

from tactics.ai.pathfinding import Pathfinder
from tactics.ai.brain import CombatBrain

__all__ = ["CombatBrain", "Pathfinder"]
