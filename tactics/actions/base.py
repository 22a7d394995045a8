"""Base action proposal — the currency between drivers and the encounter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tactics.core.enums import ActionType


@dataclass(frozen=True, slots=True)
class ActionProposal:
    """An intent produced by an AI or player driver.

    The EncounterCoordinator validates and applies (or rejects) each proposal.
    ``target`` is a GridPosition for MOVE, a combatant id for ATTACK and
    unused for END_TURN.
    """

    actor_id: int
    verb: ActionType
    target: Any = None
    reason: str = ""

    def __repr__(self) -> str:
        return f"Proposal(actor={self.actor_id}, {self.verb.name}, target={self.target}, reason={self.reason!r})"
