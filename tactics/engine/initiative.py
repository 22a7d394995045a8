"""Initiative rolls and turn-order sorting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from tactics.core.enums import Domain

if TYPE_CHECKING:
    from tactics.core.models import Combatant
    from tactics.systems.rng import EncounterRNG

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InitiativeEntry:
    """One combatant's initiative result, discarded after sorting."""

    combatant: Combatant
    roll: int
    total: int
    dexterity: int
    tie_break: float

    @property
    def sort_key(self) -> tuple[int, int, float]:
        return (self.total, self.dexterity, self.tie_break)


def roll_entry(combatant: Combatant, rng: EncounterRNG) -> InitiativeEntry:
    roll = rng.roll(Domain.INITIATIVE, 20)
    total = roll + combatant.dex_mod + combatant.initiative_bonus
    entry = InitiativeEntry(
        combatant=combatant,
        roll=roll,
        total=total,
        dexterity=combatant.dexterity,
        tie_break=rng.next_float(Domain.TIE_BREAK),
    )
    logger.info(
        "Initiative for %s: roll %d + DEX %d + bonus %d = %d",
        combatant.name, roll, combatant.dex_mod, combatant.initiative_bonus, total,
    )
    return entry


def order_by_initiative(entries: Iterable[InitiativeEntry]) -> list[InitiativeEntry]:
    """Sort by (total, dexterity, tie-break), highest first."""
    return sorted(entries, key=lambda e: e.sort_key, reverse=True)


def roll_initiative(combatants: Iterable[Combatant], rng: EncounterRNG) -> list[InitiativeEntry]:
    """Roll for every living combatant and return entries in turn order."""
    entries = [roll_entry(c, rng) for c in combatants if c.alive]
    return order_by_initiative(entries)
