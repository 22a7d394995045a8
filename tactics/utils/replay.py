"""Replay serialization — records every action for deterministic replay."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tactics.actions.base import ActionProposal
    from tactics.core.models import Combatant
    from tactics.engine.encounter import EncounterCoordinator

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates action records and flushes them to a JSON replay file."""

    __slots__ = ("_path", "_actions", "_seed")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._actions: list[dict[str, Any]] = []

    @property
    def actions(self) -> list[dict[str, Any]]:
        return list(self._actions)

    def record_action(
        self,
        round_number: int,
        actor: Combatant,
        proposal: ActionProposal,
        ok: bool,
        encounter: EncounterCoordinator,
    ) -> None:
        target = proposal.target
        combatants = [
            {
                "id": c.id,
                "name": c.name,
                "pos": [c.position.x, c.position.y],
                "hp": c.hp,
                "statuses": [f"{e.status_type.name}:{e.remaining_duration}" for e in c.statuses],
            }
            for c in encounter.turn_order
        ]
        self._actions.append(
            {
                "round": round_number,
                "actor": actor.id,
                "verb": proposal.verb.name,
                "target": [target.x, target.y] if hasattr(target, "x") else target,
                "ok": ok,
                "reason": proposal.reason,
                "combatants": combatants,
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": "1.0",
            "seed": self._seed,
            "total_actions": len(self._actions),
            "actions": self._actions,
        }

    def flush(self) -> None:
        """Write accumulated data to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d actions)", self._path, len(self._actions))
