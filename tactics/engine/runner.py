"""EncounterRunner — plays an encounter to the end with turn drivers.

The coordinator only waits; the runner is the loop that hands the current
actor to the driver registered for its faction, one turn at a time.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tactics.core.enums import EncounterOutcome, Faction

if TYPE_CHECKING:
    from tactics.actions.base import ActionProposal
    from tactics.core.models import Combatant
    from tactics.engine.encounter import EncounterCoordinator
    from tactics.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)


class TurnDriver(ABC):
    """Anything that can play a combatant's turn: AI, scripted or player-backed."""

    @abstractmethod
    def take_turn(
        self, encounter: EncounterCoordinator, actor: Combatant,
    ) -> list[tuple[ActionProposal, bool]]:
        """Act for *actor* and return each proposal with its result."""


@dataclass(frozen=True, slots=True)
class RunSummary:
    outcome: EncounterOutcome
    rounds: int
    turns: int


class EncounterRunner:
    """Drives a started encounter until it ends or the round cap is hit."""

    def __init__(
        self,
        encounter: EncounterCoordinator,
        drivers: dict[Faction, TurnDriver],
        recorder: ReplayRecorder | None = None,
        max_rounds: int | None = None,
    ) -> None:
        self._encounter = encounter
        self._drivers = drivers
        self._recorder = recorder
        self._max_rounds = max_rounds if max_rounds is not None else encounter.config.max_rounds

    def step(self) -> bool:
        """Play one turn.  Returns False once the encounter is over."""
        enc = self._encounter
        if not enc.is_combat_active:
            return False
        if enc.round_number > self._max_rounds:
            logger.warning("Round cap %d reached; calling the encounter off", self._max_rounds)
            enc.end_combat()
            return False

        actor = enc.current_actor
        if actor is None:
            return False
        round_number = enc.round_number
        turns_before = enc.turns_taken

        driver = self._drivers.get(actor.faction)
        if driver is None:
            logger.debug("No driver for %s; passing the turn", actor.faction.name)
            enc.end_turn()
            return enc.is_combat_active

        for proposal, ok in driver.take_turn(enc, actor):
            if self._recorder is not None:
                self._recorder.record_action(round_number, actor, proposal, ok, enc)

        if enc.current_actor is actor and enc.turns_taken == turns_before:
            logger.debug("%s's driver left the turn open; ending it", actor.name)
            enc.end_turn()
        return enc.is_combat_active

    def run(self) -> RunSummary:
        while self.step():
            pass
        enc = self._encounter
        summary = RunSummary(outcome=enc.outcome, rounds=enc.round_number, turns=enc.turns_taken)
        logger.info(
            "Encounter finished: %s after %d rounds (%d turns)",
            summary.outcome.name, summary.rounds, summary.turns,
        )
        return summary
