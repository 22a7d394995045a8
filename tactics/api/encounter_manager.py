"""EncounterManager — owner of the single live encounter behind the API.

FastAPI runs sync routes on a thread pool, so every call that touches the
encounter goes through one lock.  The coordinator itself stays
single-threaded and unaware of HTTP.

Allies are driven by request; enemies are played by the ``CombatBrain``
between requests when ``auto_enemies`` is on.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from tactics.ai.brain import CombatBrain
from tactics.config import CombatConfig
from tactics.core.enums import Faction, StatusType, TileType
from tactics.core.grid import CombatGrid
from tactics.core.models import Armor, Combatant, GridPosition, Weapon
from tactics.core.roster import ARMORS, WEAPONS, build_combatant, sample_skirmish
from tactics.engine.encounter import EncounterCoordinator
from tactics.engine.runner import EncounterRunner
from tactics.systems.rng import EncounterRNG
from tactics.utils.event_log import EventLog

if TYPE_CHECKING:
    from tactics.api.schemas import CombatantSpec, StartRequest, TileSpec

logger = logging.getLogger(__name__)


class EncounterNotRunning(RuntimeError):
    """No live encounter to act on."""


class NotYourTurn(RuntimeError):
    """A player action named a combatant other than the current actor."""


def _enum_by_name(enum_cls, name: str):
    try:
        return enum_cls[name.strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown {enum_cls.__name__} {name!r}") from None


class EncounterManager:
    """Thread-safe facade over one ``EncounterCoordinator``."""

    def __init__(self, config: CombatConfig) -> None:
        self.config = config
        self._lock = threading.RLock()
        self._event_log = EventLog()
        self._brain = CombatBrain()
        self._encounter: EncounterCoordinator | None = None
        self._auto_enemies = True
        self._attacked_turn: tuple[int, int] | None = None

    # -- public properties --

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def encounter(self) -> EncounterCoordinator | None:
        return self._encounter

    # -- lifecycle --

    def start(self, request: StartRequest | None = None) -> EncounterCoordinator:
        """Open a fresh encounter, replacing any previous one."""
        with self._lock:
            seed = self.config.seed
            tiles: list[TileSpec] = []
            if request is not None:
                seed = request.seed if request.seed is not None else seed
                tiles = request.tiles
                self._auto_enemies = request.auto_enemies
            if request is None or not (request.allies or request.enemies):
                allies, enemies = sample_skirmish()
            else:
                allies = [self._build(spec, Faction.ALLY) for spec in request.allies]
                enemies = [self._build(spec, Faction.ENEMY) for spec in request.enemies]

            terrain = [(GridPosition(t.x, t.y), _enum_by_name(TileType, t.tile)) for t in tiles]

            def grid_factory() -> CombatGrid:
                grid = CombatGrid(self.config.grid_width, self.config.grid_height)
                for pos, tile in terrain:
                    if grid.in_bounds(pos):
                        grid.set_tile(pos, tile)
                return grid

            self._event_log.clear()
            self._attacked_turn = None
            encounter = EncounterCoordinator(
                config=self.config,
                rng=EncounterRNG(seed),
                grid_factory=grid_factory,
                narrator=self._narrate,
            )
            self._encounter = encounter
            encounter.start_combat(allies, enemies)
            self._play_ai_turns()
            logger.info("Encounter started with seed %d", seed)
            return encounter

    def _narrate(self, message: str) -> None:
        round_number = self._encounter.round_number if self._encounter else 0
        self._event_log.append(round_number, message)

    @staticmethod
    def _build(spec: CombatantSpec, faction: Faction) -> Combatant:
        weapon = spec.weapon
        if isinstance(weapon, str):
            if weapon.lower() not in WEAPONS:
                raise ValueError(f"Unknown weapon {weapon!r}")
            weapon = weapon.lower()
        elif weapon is not None:
            weapon = Weapon(**weapon.model_dump())
        armor = spec.armor
        if isinstance(armor, str):
            if armor.lower() not in ARMORS:
                raise ValueError(f"Unknown armor {armor!r}")
            armor = armor.lower()
        elif armor is not None:
            armor = Armor(**armor.model_dump())
        statuses = [
            (_enum_by_name(StatusType, s.status), s.duration, s.potency)
            for s in spec.statuses
        ]
        return build_combatant(
            spec.id, spec.name, faction, weapon, armor, statuses,
            strength=spec.strength,
            dexterity=spec.dexterity,
            max_hp=spec.max_hp,
            hp=spec.hp if spec.hp is not None else -1,
            base_movement=spec.base_movement,
            initiative_bonus=spec.initiative_bonus,
            skills=dict(spec.skills),
        )

    def _play_ai_turns(self) -> None:
        enc = self._encounter
        if enc is None or not self._auto_enemies:
            return
        runner = EncounterRunner(enc, {Faction.ENEMY: self._brain})
        while enc.is_combat_active and enc.current_actor is not None and enc.current_actor.faction == Faction.ENEMY:
            if not runner.step():
                break

    # -- player actions --

    def _live(self) -> EncounterCoordinator:
        enc = self._encounter
        if enc is None or not enc.is_combat_active:
            raise EncounterNotRunning("No encounter in progress.")
        return enc

    def _actor(self, enc: EncounterCoordinator, combatant_id: int) -> Combatant:
        combatant = enc.find(combatant_id)
        if combatant is None:
            raise KeyError(f"No combatant with id {combatant_id}")
        if enc.current_actor is not combatant:
            raise NotYourTurn(f"It is not {combatant.name}'s turn.")
        return combatant

    def _turn_key(self, enc: EncounterCoordinator) -> tuple[int, int]:
        return (enc.round_number, enc.turns_taken)

    def move(self, combatant_id: int, x: int, y: int) -> bool:
        with self._lock:
            enc = self._live()
            mover = self._actor(enc, combatant_id)
            reached = enc.move_character(mover, x, y)
            self._play_ai_turns()
            return reached

    def attack(self, attacker_id: int, defender_id: int) -> bool:
        with self._lock:
            enc = self._live()
            attacker = self._actor(enc, attacker_id)
            defender = enc.find(defender_id)
            if defender is None:
                raise KeyError(f"No combatant with id {defender_id}")
            turn_key = self._turn_key(enc)
            if self._attacked_turn == turn_key:
                raise NotYourTurn(f"{attacker.name} has already attacked this turn.")
            enc.last_attack = None
            hit = enc.perform_attack(attacker, defender)
            if enc.last_attack is not None and enc.last_attack.valid:
                self._attacked_turn = turn_key
            self._play_ai_turns()
            return hit

    def end_turn(self) -> bool:
        with self._lock:
            enc = self._live()
            ended = enc.end_turn()
            self._play_ai_turns()
            return ended

    def auto_turn(self) -> bool:
        """Let the AI play the current actor's turn, whichever side it is on."""
        with self._lock:
            enc = self._live()
            actor = enc.current_actor
            if actor is None:
                return False
            EncounterRunner(enc, {actor.faction: self._brain}).step()
            self._play_ai_turns()
            return True

    # -- read access --

    def get_grid(self) -> CombatGrid | None:
        enc = self._encounter
        return enc.grid if enc else None
