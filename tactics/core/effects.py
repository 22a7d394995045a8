"""Status effect system — timed conditions that gate or modify a turn.

Design:
  - Each combatant owns a ``StatusEngine`` holding at most one
    ``StatusEffect`` per ``StatusType``.
  - What a type *does* lives in the ``STATUS_BEHAVIORS`` registry, not in
    the engine.  Every ``StatusType`` must have an entry; the module refuses
    to import otherwise, so giving a reserved type behaviour is a registry
    edit rather than a hunt through turn code.
  - Begin-turn processing decides whether the combatant may act and how far
    it may move.  End-turn processing applies periodic damage (bypassing
    armor) and ticks durations down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator

from tactics.core.enums import StatusType

if TYPE_CHECKING:
    from tactics.core.models import Combatant

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StatusEffect:
    """A timed condition on a combatant."""

    status_type: StatusType
    remaining_duration: int
    potency: int = 0

    def __post_init__(self) -> None:
        if self.remaining_duration <= 0:
            raise ValueError(f"Status duration must be positive, got {self.remaining_duration}")
        if self.potency < 0:
            raise ValueError(f"Status potency cannot be negative, got {self.potency}")

    @property
    def expired(self) -> bool:
        return self.remaining_duration <= 0

    def tick(self) -> bool:
        """Decrement remaining duration.  Returns True once expired."""
        if self.remaining_duration > 0:
            self.remaining_duration -= 1
        return self.expired

    def __repr__(self) -> str:
        return f"{self.status_type.name}({self.remaining_duration}, p={self.potency})"


# ---------------------------------------------------------------------------
# Behaviour registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StatusBehavior:
    """What a status type does at the start and end of its holder's turn.

    The default instance is a no-op (tracked, but affects nothing).
    """

    prevents_action: bool = False
    removed_on_turn_start: bool = False
    halves_movement: bool = False
    movement_bonus: int = 0
    accumulates_potency: bool = False
    periodic_damage: Callable[[int], int] | None = None


_NO_EFFECT = StatusBehavior()

STATUS_BEHAVIORS: dict[StatusType, StatusBehavior] = {
    StatusType.STUNNED:   StatusBehavior(prevents_action=True),
    StatusType.FROZEN:    StatusBehavior(prevents_action=True),
    StatusType.PRONE:     StatusBehavior(removed_on_turn_start=True, halves_movement=True),
    StatusType.SLOWED:    StatusBehavior(halves_movement=True),
    StatusType.HASTED:    StatusBehavior(movement_bonus=2),
    StatusType.BLEEDING:  StatusBehavior(
        accumulates_potency=True,
        periodic_damage=lambda potency: max(1, potency) * 2,
    ),
    StatusType.POISONED:  StatusBehavior(periodic_damage=lambda potency: potency if potency > 0 else 2),
    StatusType.BURNING:   StatusBehavior(periodic_damage=lambda potency: potency if potency > 0 else 5),
    # Reserved for future behaviour gating
    StatusType.INVISIBLE: _NO_EFFECT,
    StatusType.SILENCED:  _NO_EFFECT,
    StatusType.CHARMED:   _NO_EFFECT,
    StatusType.PANICKED:  _NO_EFFECT,
    StatusType.EXHAUSTED: _NO_EFFECT,
}

_missing = set(StatusType) - set(STATUS_BEHAVIORS)
if _missing:
    raise RuntimeError(f"No StatusBehavior registered for {sorted(t.name for t in _missing)}")


def behavior_for(status_type: StatusType) -> StatusBehavior:
    return STATUS_BEHAVIORS[status_type]


# ---------------------------------------------------------------------------
# Per-combatant engine
# ---------------------------------------------------------------------------

class StatusEngine:
    """The active effects on one combatant, keyed by type."""

    __slots__ = ("_effects",)

    def __init__(self) -> None:
        self._effects: dict[StatusType, StatusEffect] = {}

    def __iter__(self) -> Iterator[StatusEffect]:
        return iter(list(self._effects.values()))

    def __len__(self) -> int:
        return len(self._effects)

    def __contains__(self, status_type: object) -> bool:
        return status_type in self._effects

    def has(self, status_type: StatusType) -> bool:
        return status_type in self._effects

    def get(self, status_type: StatusType) -> StatusEffect | None:
        return self._effects.get(status_type)

    def apply(self, status_type: StatusType, duration: int, potency: int = 0) -> bool:
        """Add or refresh an effect.  Returns False if the request was rejected."""
        if duration <= 0:
            logger.warning("Rejected %s with non-positive duration %d", status_type.name, duration)
            return False
        potency = max(0, potency)

        existing = self._effects.get(status_type)
        if existing is None:
            self._effects[status_type] = StatusEffect(status_type, duration, potency)
            return True

        existing.remaining_duration = max(existing.remaining_duration, duration)
        if behavior_for(status_type).accumulates_potency:
            existing.potency += max(1, potency)
        else:
            existing.potency = max(existing.potency, potency)
        return True

    def remove(self, status_type: StatusType) -> None:
        self._effects.pop(status_type, None)

    def clear(self) -> None:
        self._effects.clear()

    def begin_turn(self, combatant: Combatant) -> bool:
        """Compute this turn's movement allowance.  Returns whether *combatant* may act."""
        for effect in self:
            if behavior_for(effect.status_type).prevents_action:
                combatant.remaining_movement = 0
                logger.info("%s is %s and loses the turn", combatant.name, effect.status_type.name.lower())
                return False

        movement = combatant.base_movement
        halved = False
        bonus = 0
        for effect in self:
            behavior = behavior_for(effect.status_type)
            if behavior.removed_on_turn_start:
                self.remove(effect.status_type)
                logger.info("%s recovers from %s", combatant.name, effect.status_type.name.lower())
            if behavior.halves_movement:
                movement = max(1, movement // 2)
                halved = True
            bonus += behavior.movement_bonus

        combatant.remaining_movement = movement + bonus
        if halved or bonus:
            logger.debug("%s movement this turn: %d", combatant.name, combatant.remaining_movement)
        return True

    def end_turn(self, combatant: Combatant) -> int:
        """Apply periodic damage, then tick every duration down.  Returns damage dealt."""
        total = 0
        for effect in self:
            damage_fn = behavior_for(effect.status_type).periodic_damage
            if damage_fn is None or not combatant.alive:
                continue
            damage = damage_fn(effect.potency)
            combatant.take_damage(damage)
            total += damage
            logger.info(
                "%s takes %d %s damage [HP: %d/%d]",
                combatant.name, damage, effect.status_type.name.lower(),
                combatant.hp, combatant.max_hp,
            )

        for effect in self:
            if effect.tick():
                self.remove(effect.status_type)
        return total

    def __repr__(self) -> str:
        return f"StatusEngine({list(self._effects.values())})"
