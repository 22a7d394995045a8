"""EncounterCoordinator — the turn-based combat state machine.

Lifecycle:
  IDLE -> ROLLING_INITIATIVE -> AWAITING_ACTION (turn loop) -> ENDED

The coordinator never drives itself: after ``begin_turn`` it parks in
AWAITING_ACTION and waits for the next external call (``move_character``,
``perform_attack``, ``end_turn``) from whichever driver owns the current
actor.  Everything mutable about the fight (grid occupancy, turn order,
each combatant's position, movement, statuses and reaction flag) belongs to
the live encounter and is discarded when it ends.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from tactics.actions.combat import AttackResolver, AttackResult
from tactics.ai.pathfinding import Pathfinder
from tactics.config import CombatConfig
from tactics.core.enums import ActionType, EncounterOutcome, EncounterPhase, Faction
from tactics.core.grid import CombatGrid
from tactics.core.models import GridPosition
from tactics.engine.initiative import roll_initiative
from tactics.systems.rng import EncounterRNG

if TYPE_CHECKING:
    from tactics.actions.base import ActionProposal
    from tactics.core.models import Combatant

logger = logging.getLogger(__name__)

Narrator = Callable[[str], None]


class EncounterCoordinator:
    """Owns one encounter at a time: grid, rosters, turn order and round.

    Collaborators are injected: *grid_factory* builds the battlefield on
    each ``start_combat``, *rng* is the single random source for the whole
    encounter, and *narrator* (optional) receives every narrated line.
    """

    def __init__(
        self,
        config: CombatConfig | None = None,
        rng: EncounterRNG | None = None,
        grid_factory: Callable[[], CombatGrid] | None = None,
        narrator: Narrator | None = None,
    ) -> None:
        self._config = config or CombatConfig()
        self._rng = rng or EncounterRNG(self._config.seed)
        self._grid_factory = grid_factory or self._default_grid
        self._narrator = narrator
        self._resolver = AttackResolver(self._config, self._rng)

        self._grid: CombatGrid | None = None
        self._pathfinder: Pathfinder | None = None
        self._allies: list[Combatant] = []
        self._enemies: list[Combatant] = []
        self._turn_order: list[Combatant] = []
        self._turn_index = 0
        self._acting: Combatant | None = None
        self._round = 0
        self._turns_taken = 0
        self._phase = EncounterPhase.IDLE
        self._outcome = EncounterOutcome.UNDECIDED
        self.last_attack: AttackResult | None = None

    def _default_grid(self) -> CombatGrid:
        return CombatGrid(self._config.grid_width, self._config.grid_height)

    # -- read-only state --

    @property
    def config(self) -> CombatConfig:
        return self._config

    @property
    def rng(self) -> EncounterRNG:
        return self._rng

    @property
    def resolver(self) -> AttackResolver:
        return self._resolver

    @property
    def grid(self) -> CombatGrid | None:
        return self._grid

    @property
    def allies(self) -> tuple[Combatant, ...]:
        return tuple(self._allies)

    @property
    def enemies(self) -> tuple[Combatant, ...]:
        return tuple(self._enemies)

    @property
    def turn_order(self) -> tuple[Combatant, ...]:
        return tuple(self._turn_order)

    @property
    def current_turn_index(self) -> int:
        return self._turn_index

    @property
    def round_number(self) -> int:
        return self._round

    @property
    def turns_taken(self) -> int:
        return self._turns_taken

    @property
    def phase(self) -> EncounterPhase:
        return self._phase

    @property
    def outcome(self) -> EncounterOutcome:
        return self._outcome

    @property
    def is_combat_active(self) -> bool:
        return self._phase in (EncounterPhase.ROLLING_INITIATIVE, EncounterPhase.AWAITING_ACTION)

    @property
    def current_actor(self) -> Combatant | None:
        """The combatant waiting for a driver to act, if any."""
        if self._phase != EncounterPhase.AWAITING_ACTION:
            return None
        return self._acting

    def participants(self) -> Iterator[Combatant]:
        yield from self._allies
        yield from self._enemies

    def find(self, combatant_id: int) -> Combatant | None:
        for c in self.participants():
            if c.id == combatant_id:
                return c
        return None

    def opponents_of(self, combatant: Combatant) -> list[Combatant]:
        side = self._enemies if combatant.faction == Faction.ALLY else self._allies
        return [c for c in side if c.alive]

    # -- narration --

    def _say(self, fmt: str, *args: object) -> None:
        message = fmt % args if args else fmt
        logger.info(message)
        if self._narrator is not None:
            self._narrator(message)

    # -- lifecycle --

    def start_combat(self, allies: Iterable[Combatant | None], enemies: Iterable[Combatant | None]) -> bool:
        """Set up and open a new encounter.  Returns whether combat is running."""
        if self.is_combat_active:
            self._say("A new encounter replaces the one in progress.")
            self._end(EncounterOutcome.UNDECIDED)

        self._allies = [c for c in allies if c is not None and c.alive]
        self._enemies = [c for c in enemies if c is not None and c.alive]
        self._turn_order = []
        self._turn_index = 0
        self._round = 1
        self._turns_taken = 0
        self._outcome = EncounterOutcome.UNDECIDED
        self.last_attack = None

        if not self._allies or not self._enemies:
            self._say("Combat cannot start: each side needs at least one living combatant.")
            self._end(EncounterOutcome.NO_CONTEST)
            return False

        # The roster a combatant is listed in decides its side.
        for c in self._allies:
            c.faction = Faction.ALLY
        for c in self._enemies:
            c.faction = Faction.ENEMY

        self._grid = self._grid_factory()
        self._pathfinder = Pathfinder(self._grid)
        self._grid.clear_occupants()
        self._allies = self._place_side(self._allies, from_west=True)
        self._enemies = self._place_side(self._enemies, from_west=False)
        if not self._allies or not self._enemies:
            self._say("Combat cannot start: no room to deploy both sides.")
            self._end(EncounterOutcome.NO_CONTEST)
            return False

        for c in self.participants():
            c.reaction_used = False
            c.reset_movement()

        self.roll_initiative()
        if not self._turn_order:
            self._say("No valid participants for combat.")
            self._end(EncounterOutcome.NO_CONTEST)
            return False

        self._turn_index = 0
        self.begin_turn()
        return self.is_combat_active

    def end_combat(self) -> None:
        """Abort the encounter without a winner."""
        if self.is_combat_active:
            self._say("The encounter is called off.")
            self._end(EncounterOutcome.UNDECIDED)

    def _spawn_cells(self, from_west: bool) -> Iterator[GridPosition]:
        """Cells of one side's half, column by column from its map edge."""
        grid = self._grid
        half = max(1, grid.width // 2)
        columns = range(half) if from_west else range(grid.width - 1, grid.width - 1 - half, -1)
        for x in columns:
            for y in range(grid.height):
                yield GridPosition(x, y)

    def _place_side(self, members: list[Combatant], from_west: bool) -> list[Combatant]:
        grid = self._grid
        cells = self._spawn_cells(from_west)
        placed: list[Combatant] = []
        for member in members:
            for cell in cells:
                if grid.try_occupy(cell, member):
                    member.position = cell
                    placed.append(member)
                    break
            else:
                logger.warning("No free spawn cell for %s; left out of the encounter", member.name)
        return placed

    def roll_initiative(self) -> list[Combatant]:
        """Roll initiative for every living participant and rebuild the turn order.

        With nobody to roll for, nothing changes.  During a live turn the
        acting combatant keeps its turn; the new order applies from the next.
        """
        if not any(c.alive for c in self.participants()):
            return []
        acting = self.current_actor
        if acting is None:
            self._phase = EncounterPhase.ROLLING_INITIATIVE
        entries = roll_initiative(self.participants(), self._rng)
        self._turn_order = [e.combatant for e in entries]
        self._turn_index = 0
        if acting is not None:
            self._turn_index = next(i for i, c in enumerate(self._turn_order) if c is acting)
        self._say("Turn order: %s", ", ".join(c.name for c in self._turn_order))
        return list(self._turn_order)

    def begin_turn(self) -> None:
        """Open the current combatant's turn, skipping anyone who cannot act."""
        while self.is_combat_active:
            self._purge_defeated()
            if self._check_battle_end():
                return
            self._turn_index = min(max(self._turn_index, 0), len(self._turn_order) - 1)
            actor = self._turn_order[self._turn_index]
            actor.reset_movement()
            self._say("--- Round %d, %s's turn ---", self._round, actor.name)

            if actor.statuses.begin_turn(actor):
                self._acting = actor
                self._phase = EncounterPhase.AWAITING_ACTION
                return

            self._say("%s cannot act and loses the turn.", actor.name)
            self._finish_turn(actor)

    def end_turn(self) -> bool:
        """Close the current actor's turn and open the next one."""
        actor = self.current_actor
        if actor is None:
            return False
        self._finish_turn(actor)
        self.begin_turn()
        return True

    def _finish_turn(self, actor: Combatant) -> None:
        self._acting = None
        self._turns_taken += 1
        if actor.alive:
            actor.statuses.end_turn(actor)
        self._purge_defeated()
        if self._check_battle_end():
            return
        self._advance_from(actor)

    def _advance_from(self, actor: Combatant) -> None:
        # A purged actor leaves the index already on its successor.
        if self._turn_index < len(self._turn_order) and self._turn_order[self._turn_index] is actor:
            self._turn_index += 1
        if self._turn_index >= len(self._turn_order):
            self._turn_index = 0
            self._round += 1
            for c in self._turn_order:
                c.reset_movement()
                c.reaction_used = False
            logger.debug("Round %d begins", self._round)

    def _purge_defeated(self) -> None:
        if all(c.alive for c in self.participants()):
            return
        removed_before = 0
        for i, c in enumerate(self._turn_order):
            if not c.alive and i < self._turn_index:
                removed_before += 1
        for c in self.participants():
            if not c.alive:
                if self._grid is not None:
                    self._grid.vacate(c.position, c)
                self._say("%s is defeated!", c.name)
        self._turn_order = [c for c in self._turn_order if c.alive]
        self._allies = [c for c in self._allies if c.alive]
        self._enemies = [c for c in self._enemies if c.alive]
        self._turn_index = max(0, self._turn_index - removed_before)

    def _check_battle_end(self) -> bool:
        allies_alive = any(c.alive for c in self._allies)
        enemies_alive = any(c.alive for c in self._enemies)
        if allies_alive and enemies_alive and self._turn_order:
            return False

        if not allies_alive and not enemies_alive:
            self._say("The battle ends with no victor.")
            outcome = EncounterOutcome.DRAW
        elif not enemies_alive:
            self._say("The allies are victorious!")
            outcome = EncounterOutcome.VICTORY
        elif not allies_alive:
            self._say("The allies have been defeated.")
            outcome = EncounterOutcome.DEFEAT
        else:
            outcome = EncounterOutcome.UNDECIDED
        self._end(outcome)
        return True

    def _end(self, outcome: EncounterOutcome) -> None:
        self._phase = EncounterPhase.ENDED
        self._outcome = outcome
        if self._grid is not None:
            self._grid.clear_occupants()
        self._allies = []
        self._enemies = []
        self._turn_order = []
        self._turn_index = 0
        self._acting = None
        logger.debug("Encounter ended: %s after %d rounds", outcome.name, self._round)

    # -- movement --

    def _participating(self, combatant: Combatant | None) -> bool:
        return (
            combatant is not None
            and self.is_combat_active
            and combatant.alive
            and any(c is combatant for c in self._turn_order)
        )

    def get_path(self, mover: Combatant, x: int, y: int) -> list[GridPosition] | None:
        if not self._participating(mover):
            return None
        return self._pathfinder.find_path(mover, mover.position, GridPosition(x, y))

    def can_move_to(self, mover: Combatant, x: int, y: int) -> bool:
        """Whether *mover* could reach (x, y) this turn with its remaining movement."""
        dest = GridPosition(x, y)
        path = self.get_path(mover, x, y)
        if path is None or not self._grid.can_occupy(dest, mover):
            return False
        return self._pathfinder.path_cost(path) <= mover.remaining_movement

    def reposition(self, combatant: Combatant, pos: GridPosition) -> bool:
        """Place *combatant* directly on *pos* (scenario setup; costs nothing, provokes nothing)."""
        if not self._participating(combatant):
            return False
        if not self._grid.try_transition_occupant(combatant.position, pos, combatant):
            return False
        combatant.position = pos
        return True

    def move_character(self, mover: Combatant, x: int, y: int) -> bool:
        """Walk *mover* toward (x, y), committing whatever progress it can afford.

        Returns True only if the exact destination was reached.
        """
        if not self._participating(mover):
            return False
        dest = GridPosition(x, y)
        if mover.position == dest:
            return True
        if not self._grid.is_passable(dest):
            self._say("%s cannot move to %s: not walkable.", mover.name, dest)
            return False
        if mover.remaining_movement <= 0:
            self._say("%s has no movement left.", mover.name)
            return False

        start = mover.position
        self._resolve_opportunity_attacks(mover)
        if not mover.alive:
            self._say("%s falls before taking a step.", mover.name)
            return False
        if not self.is_combat_active:
            return False

        path = self._pathfinder.find_path(mover, start, dest)
        if path is None:
            self._say("%s finds no path to %s.", mover.name, dest)
            return False

        grid = self._grid
        for step in path[1:]:
            cost = grid.movement_cost(step)
            if cost > mover.remaining_movement:
                break
            if not grid.try_transition_occupant(mover.position, step, mover):
                break
            mover.position = step
            mover.consume_movement(cost)

        reached = mover.position == dest
        if mover.position != start:
            self._say(
                "%s moves %s -> %s%s (%d movement left)",
                mover.name, start, mover.position,
                "" if reached else f", short of {dest}",
                mover.remaining_movement,
            )
        else:
            self._say("%s cannot make progress toward %s.", mover.name, dest)
        return reached

    def _resolve_opportunity_attacks(self, mover: Combatant) -> None:
        origin = mover.position
        for reactor in list(self._turn_order):
            if reactor.faction == mover.faction or not reactor.alive or reactor.reaction_used:
                continue
            if reactor.position.chebyshev(origin) > 1:
                continue
            reactor.reaction_used = True
            self._say("%s makes an opportunity attack against %s!", reactor.name, mover.name)
            self._attack(reactor, mover, check_range=False)
            if not mover.alive or not self.is_combat_active:
                return

    # -- attacks --

    def perform_attack(self, attacker: Combatant, defender: Combatant) -> bool:
        """Resolve one attack.  Returns True if it hit."""
        if not self._participating(attacker):
            return False
        if not self._participating(defender) or defender.faction == attacker.faction:
            self._say("%s has no valid target.", attacker.name)
            return False
        return self._attack(attacker, defender, check_range=True).hit

    def _attack(self, attacker: Combatant, defender: Combatant, check_range: bool) -> AttackResult:
        result = self._resolver.resolve(attacker, defender, self._grid, check_range=check_range)
        self.last_attack = result
        if not result.valid:
            self._say("%s cannot attack %s: %s.", attacker.name, defender.name, result.rejected)
            return result

        if result.hit:
            defender.take_damage(result.damage)
            self._say(
                "%s %s %s for %d damage (roll %d, %d vs AC %d)%s [HP: %d/%d]",
                attacker.name,
                "shoots" if result.ranged else "hits",
                defender.name, result.damage, result.roll, result.attack_total, result.target_ac,
                " CRITICAL!" if result.critical else "",
                defender.hp, defender.max_hp,
            )
        else:
            self._say(
                "%s misses %s (roll %d, %d vs AC %d)",
                attacker.name, defender.name, result.roll, result.attack_total, result.target_ac,
            )

        self._purge_defeated()
        if self._check_battle_end():
            return result

        acting = self._acting
        if acting is not None and not acting.alive:
            # Felled on its own turn (e.g. by a reaction): the turn passes on.
            self._acting = None
            self._turns_taken += 1
            self._advance_from(acting)
            self.begin_turn()
        return result

    # -- driver entry point --

    def execute(self, proposal: ActionProposal) -> bool:
        """Apply a driver's proposal for the current actor."""
        actor = self.current_actor
        if actor is None or actor.id != proposal.actor_id:
            logger.debug("Rejected %r: not the acting combatant", proposal)
            return False

        if proposal.verb == ActionType.MOVE:
            target = proposal.target
            return self.move_character(actor, target.x, target.y)
        if proposal.verb == ActionType.ATTACK:
            defender = self.find(proposal.target)
            if defender is None:
                self._say("%s has no valid target.", actor.name)
                return False
            return self.perform_attack(actor, defender)
        if proposal.verb == ActionType.END_TURN:
            return self.end_turn()
        return False
