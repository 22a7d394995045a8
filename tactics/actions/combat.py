"""Attack resolution — range, cover/line-of-sight, to-hit and damage.

The resolver only computes; the EncounterCoordinator applies the damage and
handles the consequences (purging the defeated, ending the battle).

To-hit:   d20 + ability mod + weapon accuracy + skill rank  >=  target AC
          (unarmed: no accuracy, the "unarmed" skill rank)
          where AC = base + DEX mod + armor bonus + cover bonus.
          A natural critical roll always hits; a natural fumble always misses.
Damage:   weapon dice (doubled on a critical) + ability mod - damage reduction,
          floored at 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tactics.core.enums import Domain

if TYPE_CHECKING:
    from tactics.config import CombatConfig
    from tactics.core.grid import CombatGrid
    from tactics.core.models import Combatant, GridPosition
    from tactics.systems.rng import EncounterRNG

logger = logging.getLogger(__name__)

# Skill rank that applies when attacking without a weapon
UNARMED_SKILL = "unarmed"


@dataclass(frozen=True, slots=True)
class CoverResult:
    blocked: bool = False
    cover_bonus: int = 0


@dataclass(slots=True)
class AttackResult:
    """Outcome of one attack roll."""

    hit: bool = False
    roll: int = 0
    attack_total: int = 0
    target_ac: int = 0
    critical: bool = False
    damage: int = 0
    cover_bonus: int = 0
    ranged: bool = False
    rejected: str = ""          # Non-empty when the attack never happened

    @property
    def valid(self) -> bool:
        return not self.rejected


class AttackResolver:
    """Stateless handler for attack rolls; all randomness comes from *rng*."""

    def __init__(self, config: CombatConfig, rng: EncounterRNG) -> None:
        self._config = config
        self._rng = rng

    def attack_range(self, attacker: Combatant) -> int:
        weapon = attacker.weapon
        if weapon is not None and weapon.ranged:
            return weapon.range if weapon.range > 0 else self._config.default_ranged_range
        return self._config.melee_range

    def in_range(self, attacker: Combatant, defender: Combatant) -> bool:
        return attacker.position.chebyshev(defender.position) <= self.attack_range(attacker)

    def evaluate_cover(self, grid: CombatGrid, origin: GridPosition, target: GridPosition) -> CoverResult:
        """Trace the line from *origin* to *target* looking for obstacles.

        An obstacle near the target gives cover; one further out blocks the
        shot entirely.  Blocking wins over cover.
        """
        adjacency = self._config.cover_adjacency
        covered = False
        for cell in grid.trace_line(origin, target)[1:-1]:
            if not grid.is_obstacle(cell):
                continue
            if cell.chebyshev(target) > adjacency:
                return CoverResult(blocked=True)
            covered = True
        return CoverResult(cover_bonus=self._config.cover_ac_bonus if covered else 0)

    def armor_class(self, defender: Combatant, cover_bonus: int = 0) -> int:
        return self._config.base_armor_class + defender.dex_mod + defender.defense_bonus + cover_bonus

    def attack_bonus(self, attacker: Combatant) -> int:
        weapon = attacker.weapon
        if weapon is None:
            return attacker.attack_modifier + attacker.skill_bonus(UNARMED_SKILL)
        return attacker.attack_modifier + weapon.accuracy_bonus + attacker.skill_bonus(weapon.skill_name)

    def resolve(
        self,
        attacker: Combatant,
        defender: Combatant,
        grid: CombatGrid,
        check_range: bool = True,
    ) -> AttackResult:
        cfg = self._config
        ranged = attacker.is_ranged

        if check_range and not self.in_range(attacker, defender):
            return AttackResult(ranged=ranged, rejected="out of range")

        cover = CoverResult()
        if ranged:
            cover = self.evaluate_cover(grid, attacker.position, defender.position)
            if cover.blocked:
                return AttackResult(ranged=ranged, rejected="no line of sight")

        roll = self._rng.roll(Domain.TO_HIT, 20)
        bonus = self.attack_bonus(attacker)
        target_ac = self.armor_class(defender, cover.cover_bonus)
        critical = roll >= cfg.critical_roll
        if critical:
            hit = True
        elif roll <= cfg.fumble_roll:
            hit = False
        else:
            hit = roll + bonus >= target_ac

        result = AttackResult(
            hit=hit,
            roll=roll,
            attack_total=roll + bonus,
            target_ac=target_ac,
            critical=critical,
            cover_bonus=cover.cover_bonus,
            ranged=ranged,
        )
        if hit:
            result.damage = self.roll_damage(attacker, defender, critical)
        return result

    def roll_damage(self, attacker: Combatant, defender: Combatant, critical: bool) -> int:
        weapon = attacker.weapon
        if weapon is not None:
            low, high = weapon.min_damage, max(weapon.min_damage, weapon.max_damage)
        else:
            low, high = self._config.unarmed_min_damage, self._config.unarmed_max_damage
        dice = self._rng.next_int(Domain.DAMAGE, low, high)
        if critical:
            dice *= 2
        return max(0, dice + attacker.attack_modifier - defender.damage_reduction)
