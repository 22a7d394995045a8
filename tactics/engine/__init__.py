"""Encounter state machine, initiative and the auto-play runner."""

from tactics.engine.encounter import EncounterCoordinator
from tactics.engine.runner import EncounterRunner, RunSummary, TurnDriver

__all__ = ["EncounterCoordinator", "EncounterRunner", "RunSummary", "TurnDriver"]
