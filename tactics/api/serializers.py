"""Convert engine objects into API schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tactics.api.schemas import (
    AttackSchema,
    CombatantSchema,
    EffectSchema,
    EncounterStateResponse,
)

if TYPE_CHECKING:
    from tactics.core.models import Combatant
    from tactics.engine.encounter import EncounterCoordinator


def serialize_combatant(c: Combatant, encounter: EncounterCoordinator) -> CombatantSchema:
    return CombatantSchema(
        id=c.id,
        name=c.name,
        faction=c.faction.name.lower(),
        x=c.position.x,
        y=c.position.y,
        hp=c.hp,
        max_hp=c.max_hp,
        base_movement=c.base_movement,
        remaining_movement=c.remaining_movement,
        armor_class=encounter.resolver.armor_class(c),
        reaction_used=c.reaction_used,
        weapon=c.weapon.name if c.weapon else None,
        armor=c.armor.name if c.armor else None,
        statuses=[
            EffectSchema(
                status=e.status_type.name.lower(),
                remaining_duration=e.remaining_duration,
                potency=e.potency,
            )
            for e in c.statuses
        ],
    )


def serialize_state(encounter: EncounterCoordinator | None) -> EncounterStateResponse:
    if encounter is None:
        return EncounterStateResponse(active=False, phase="IDLE", outcome="UNDECIDED", round=0, turns_taken=0)

    actor = encounter.current_actor
    last = encounter.last_attack
    return EncounterStateResponse(
        active=encounter.is_combat_active,
        phase=encounter.phase.name,
        outcome=encounter.outcome.name,
        round=encounter.round_number,
        turns_taken=encounter.turns_taken,
        current_actor_id=actor.id if actor else None,
        turn_order=[c.id for c in encounter.turn_order],
        combatants=[serialize_combatant(c, encounter) for c in encounter.turn_order],
        last_attack=(
            AttackSchema(
                hit=last.hit, roll=last.roll, attack_total=last.attack_total,
                target_ac=last.target_ac, critical=last.critical, damage=last.damage,
                cover_bonus=last.cover_bonus, rejected=last.rejected,
            )
            if last is not None else None
        ),
    )
