"""CombatBrain — the AI driver for a combatant's turn.

Each turn follows the same short plan:
  1. Pick the nearest living opponent (ties go to the lowest id).
  2. If it can already be attacked, attack and end the turn.
  3. Otherwise walk the cheapest path toward it, stopping at the first cell
     within range and line of sight (or where the budget runs out).
  4. Attack if now possible, then end the turn.

Every step is an ``ActionProposal`` executed through the encounter, so the
same validation applies to AI and player actions alike.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tactics.actions.base import ActionProposal
from tactics.core.enums import ActionType
from tactics.engine.runner import TurnDriver

if TYPE_CHECKING:
    from tactics.core.models import Combatant, GridPosition
    from tactics.engine.encounter import EncounterCoordinator

logger = logging.getLogger(__name__)


class CombatBrain(TurnDriver):
    """Stateless turn planner; safe to share between both sides."""

    def choose_target(self, encounter: EncounterCoordinator, actor: Combatant) -> Combatant | None:
        opponents = encounter.opponents_of(actor)
        if not opponents:
            return None
        return min(opponents, key=lambda o: (actor.position.chebyshev(o.position), o.id))

    def can_strike(self, encounter: EncounterCoordinator, actor: Combatant, target: Combatant) -> bool:
        return self._can_strike_from(encounter, actor, actor.position, target)

    def _can_strike_from(
        self,
        encounter: EncounterCoordinator,
        actor: Combatant,
        origin: GridPosition,
        target: Combatant,
    ) -> bool:
        resolver = encounter.resolver
        if origin.chebyshev(target.position) > resolver.attack_range(actor):
            return False
        if actor.is_ranged:
            return not resolver.evaluate_cover(encounter.grid, origin, target.position).blocked
        return True

    def approach_cell(
        self,
        encounter: EncounterCoordinator,
        actor: Combatant,
        target: Combatant,
    ) -> GridPosition | None:
        """Furthest affordable cell along the path to *target*, stopping once in reach."""
        path = encounter.get_path(actor, target.position.x, target.position.y)
        if path is None or len(path) < 2:
            return None
        grid = encounter.grid
        budget = actor.remaining_movement
        best = None
        for cell in path[1:]:
            if cell == target.position:
                break
            budget -= grid.movement_cost(cell)
            if budget < 0:
                break
            best = cell
            if self._can_strike_from(encounter, actor, cell, target):
                break
        return best

    def plan(self, encounter: EncounterCoordinator, actor: Combatant, has_moved: bool, has_attacked: bool) -> ActionProposal:
        """Next proposal for *actor* given what it already did this turn."""
        end = ActionProposal(actor.id, ActionType.END_TURN, reason="done")
        if has_attacked:
            return end
        target = self.choose_target(encounter, actor)
        if target is None:
            return ActionProposal(actor.id, ActionType.END_TURN, reason="no target")
        if self.can_strike(encounter, actor, target):
            return ActionProposal(actor.id, ActionType.ATTACK, target.id, reason="in reach")
        if not has_moved:
            cell = self.approach_cell(encounter, actor, target)
            if cell is not None:
                return ActionProposal(actor.id, ActionType.MOVE, cell, reason=f"closing on {target.name}")
        return ActionProposal(actor.id, ActionType.END_TURN, reason="out of reach")

    def take_turn(self, encounter: EncounterCoordinator, actor: Combatant) -> list[tuple[ActionProposal, bool]]:
        """Play *actor*'s whole turn.  Returns each proposal with its result."""
        taken: list[tuple[ActionProposal, bool]] = []
        has_moved = False
        has_attacked = False
        while encounter.current_actor is actor:
            proposal = self.plan(encounter, actor, has_moved, has_attacked)
            logger.debug("%s -> %r", actor.name, proposal)
            ok = encounter.execute(proposal)
            taken.append((proposal, ok))
            if proposal.verb == ActionType.END_TURN:
                break
            if proposal.verb == ActionType.MOVE:
                has_moved = True
            elif proposal.verb == ActionType.ATTACK:
                has_attacked = True
        return taken
