"""Combatant construction helpers and the stock sample skirmish."""

from __future__ import annotations

from typing import Any

from tactics.core.enums import Faction, StatusType
from tactics.core.models import Armor, Combatant, Weapon

# ---------------------------------------------------------------------------
# Stock equipment
# ---------------------------------------------------------------------------

WEAPONS: dict[str, Weapon] = {
    "dagger":     Weapon("dagger", min_damage=1, max_damage=4, accuracy_bonus=1),
    "shortsword": Weapon("shortsword", min_damage=1, max_damage=6),
    "longsword":  Weapon("longsword", min_damage=1, max_damage=8),
    "greataxe":   Weapon("greataxe", min_damage=1, max_damage=12, accuracy_bonus=-1),
    "shortbow":   Weapon("shortbow", min_damage=1, max_damage=6, range=6, ranged=True),
    "longbow":    Weapon("longbow", min_damage=1, max_damage=8, range=10, ranged=True),
    "sling":      Weapon("sling", min_damage=1, max_damage=4, range=0, ranged=True),
}

ARMORS: dict[str, Armor] = {
    "leather":   Armor("leather", defense_bonus=1),
    "chainmail": Armor("chainmail", defense_bonus=3, damage_reduction=1),
    "plate":     Armor("plate", defense_bonus=5, damage_reduction=2),
}


def build_combatant(
    combatant_id: int,
    name: str,
    faction: Faction = Faction.ALLY,
    weapon: str | Weapon | None = None,
    armor: str | Armor | None = None,
    statuses: list[tuple[StatusType, int, int]] | None = None,
    **stats: Any,
) -> Combatant:
    """Create a combatant, resolving stock equipment names.

    Unknown equipment names raise ``KeyError``.
    """
    if isinstance(weapon, str):
        weapon = WEAPONS[weapon]
    if isinstance(armor, str):
        armor = ARMORS[armor]
    combatant = Combatant(id=combatant_id, name=name, faction=faction, weapon=weapon, armor=armor, **stats)
    for status_type, duration, potency in statuses or ():
        combatant.apply_status(status_type, duration, potency)
    return combatant


def sample_skirmish() -> tuple[list[Combatant], list[Combatant]]:
    """A small mixed fight: a fighter and an archer against three goblins."""
    allies = [
        build_combatant(1, "Fighter", Faction.ALLY, "longsword", "chainmail",
                        strength=16, dexterity=12, max_hp=28, skills={"melee_weapons": 2}),
        build_combatant(2, "Archer", Faction.ALLY, "shortbow", "leather",
                        strength=10, dexterity=16, max_hp=20, skills={"archery": 2}),
    ]
    enemies = [
        build_combatant(10, "Goblin Boss", Faction.ENEMY, "shortsword", "leather",
                        strength=14, dexterity=12, max_hp=18, initiative_bonus=1),
        build_combatant(11, "Goblin", Faction.ENEMY, "dagger",
                        strength=10, dexterity=14, max_hp=9),
        build_combatant(12, "Goblin Slinger", Faction.ENEMY, "sling",
                        strength=8, dexterity=14, max_hp=8),
    ]
    return allies, enemies
