"""Core data models: GridPosition, Weapon, Armor, Combatant."""

from __future__ import annotations

from dataclasses import dataclass, field

from tactics.core.effects import StatusEngine
from tactics.core.enums import Faction, StatusType


@dataclass(frozen=True, slots=True)
class GridPosition:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: GridPosition) -> GridPosition:
        return GridPosition(self.x + other.x, self.y + other.y)

    def __sub__(self, other: GridPosition) -> GridPosition:
        return GridPosition(self.x - other.x, self.y - other.y)

    def offset(self, dx: int, dy: int) -> GridPosition:
        return GridPosition(self.x + dx, self.y + dy)

    def manhattan(self, other: GridPosition) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def chebyshev(self, other: GridPosition) -> int:
        """Distance in king moves; diagonal neighbours are 1 apart."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


def ability_modifier(score: int) -> int:
    """d20-style modifier: floor((score - 10) / 2)."""
    return (score - 10) // 2


@dataclass(frozen=True, slots=True)
class Weapon:
    """Combat-relevant stats of an equipped weapon."""

    name: str
    min_damage: int = 1
    max_damage: int = 3
    accuracy_bonus: int = 0
    range: int = 1              # Tiles; ranged weapons with range <= 0 use the configured default
    ranged: bool = False
    skill: str = ""             # Skill rank added to the attack roll

    @property
    def skill_name(self) -> str:
        if self.skill:
            return self.skill
        return "archery" if self.ranged else "melee_weapons"


@dataclass(frozen=True, slots=True)
class Armor:
    """Combat-relevant stats of equipped armor."""

    name: str
    defense_bonus: int = 0
    damage_reduction: int = 0


@dataclass(eq=False, slots=True)
class Combatant:
    """A participant in an encounter.

    The character sheet is owned by the caller; the encounter only mutates
    the combat-facing fields (health, position, movement, statuses and the
    reaction flag). Compared by identity.
    """

    id: int
    name: str
    faction: Faction = Faction.ALLY
    strength: int = 10
    dexterity: int = 10
    max_hp: int = 20
    hp: int = -1                # -1 = start at max_hp
    position: GridPosition = field(default_factory=GridPosition)
    base_movement: int = 5
    remaining_movement: int = 0
    weapon: Weapon | None = None
    armor: Armor | None = None
    initiative_bonus: int = 0
    skills: dict[str, int] = field(default_factory=dict)
    statuses: StatusEngine = field(default_factory=StatusEngine)
    reaction_used: bool = False

    def __post_init__(self) -> None:
        if self.max_hp <= 0:
            raise ValueError(f"max_hp must be positive, got {self.max_hp}")
        if self.hp < 0:
            self.hp = self.max_hp
        self.hp = min(self.hp, self.max_hp)
        self.skills = {k.lower(): v for k, v in self.skills.items()}

    # -- health --

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def take_damage(self, amount: int) -> bool:
        """Subtract *amount* HP (no mitigation). Returns True if this defeated the combatant."""
        if amount < 0:
            raise ValueError(f"Damage cannot be negative, got {amount}")
        was_alive = self.alive
        self.hp = max(self.hp - amount, 0)
        return was_alive and not self.alive

    # -- derived stats --

    @property
    def str_mod(self) -> int:
        return ability_modifier(self.strength)

    @property
    def dex_mod(self) -> int:
        return ability_modifier(self.dexterity)

    @property
    def is_ranged(self) -> bool:
        return self.weapon is not None and self.weapon.ranged

    @property
    def attack_modifier(self) -> int:
        """Ability modifier used for both to-hit and damage."""
        return self.dex_mod if self.is_ranged else self.str_mod

    @property
    def defense_bonus(self) -> int:
        return self.armor.defense_bonus if self.armor else 0

    @property
    def damage_reduction(self) -> int:
        return self.armor.damage_reduction if self.armor else 0

    def skill_bonus(self, name: str) -> int:
        return self.skills.get(name.lower(), 0)

    # -- movement --

    def reset_movement(self) -> None:
        self.remaining_movement = self.base_movement

    def consume_movement(self, cost: int) -> bool:
        if cost > self.remaining_movement:
            return False
        self.remaining_movement -= cost
        return True

    # -- statuses --

    def apply_status(self, status_type: StatusType, duration: int, potency: int = 0) -> bool:
        return self.statuses.apply(status_type, duration, potency)

    def remove_status(self, status_type: StatusType) -> None:
        self.statuses.remove(status_type)

    def has_status(self, status_type: StatusType) -> bool:
        return self.statuses.has(status_type)

    def __repr__(self) -> str:
        return f"Combatant({self.id}, {self.name!r}, {self.faction.name}, hp={self.hp}/{self.max_hp}, pos={self.position})"
