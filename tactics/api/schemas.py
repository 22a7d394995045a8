"""Pydantic request and response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Requests ---

class WeaponSpec(BaseModel):
    name: str = "weapon"
    min_damage: int = Field(1, ge=0)
    max_damage: int = Field(3, ge=0)
    accuracy_bonus: int = 0
    range: int = Field(1, ge=0)
    ranged: bool = False
    skill: str = ""


class ArmorSpec(BaseModel):
    name: str = "armor"
    defense_bonus: int = 0
    damage_reduction: int = Field(0, ge=0)


class StatusSpec(BaseModel):
    status: str = Field(description="StatusType name, e.g. 'stunned'")
    duration: int = Field(1, gt=0)
    potency: int = Field(0, ge=0)


class CombatantSpec(BaseModel):
    id: int
    name: str
    strength: int = 10
    dexterity: int = 10
    max_hp: int = Field(20, gt=0)
    hp: int | None = None
    base_movement: int = Field(5, ge=0)
    initiative_bonus: int = 0
    weapon: str | WeaponSpec | None = Field(None, description="Stock weapon name or a full weapon")
    armor: str | ArmorSpec | None = Field(None, description="Stock armor name or a full armor")
    skills: dict[str, int] = Field(default_factory=dict)
    statuses: list[StatusSpec] = Field(default_factory=list)


class TileSpec(BaseModel):
    x: int
    y: int
    tile: str = Field("obstacle", description="TileType name")


class StartRequest(BaseModel):
    allies: list[CombatantSpec] = Field(default_factory=list)
    enemies: list[CombatantSpec] = Field(default_factory=list)
    seed: int | None = Field(None, ge=-(2**63), le=2**63 - 1, description="Overrides the configured seed")
    tiles: list[TileSpec] = Field(default_factory=list)
    auto_enemies: bool = Field(True, description="Let the AI play enemy turns automatically")


class MoveRequest(BaseModel):
    combatant_id: int
    x: int
    y: int


class AttackRequest(BaseModel):
    attacker_id: int
    defender_id: int


# --- Encounter state ---

class EffectSchema(BaseModel):
    status: str
    remaining_duration: int
    potency: int


class CombatantSchema(BaseModel):
    id: int
    name: str
    faction: str
    x: int
    y: int
    hp: int
    max_hp: int
    base_movement: int
    remaining_movement: int
    armor_class: int
    reaction_used: bool
    weapon: str | None = None
    armor: str | None = None
    statuses: list[EffectSchema] = Field(default_factory=list)


class AttackSchema(BaseModel):
    hit: bool
    roll: int
    attack_total: int
    target_ac: int
    critical: bool
    damage: int
    cover_bonus: int
    rejected: str = ""


class EncounterStateResponse(BaseModel):
    active: bool
    phase: str
    outcome: str
    round: int
    turns_taken: int
    current_actor_id: int | None = None
    turn_order: list[int] = Field(default_factory=list)
    combatants: list[CombatantSchema] = Field(default_factory=list)
    last_attack: AttackSchema | None = None


class EventSchema(BaseModel):
    seq: int
    round: int
    message: str


class ActionResponse(BaseModel):
    status: str
    message: str
    success: bool = False
    state: EncounterStateResponse


# --- Map ---

class OccupantSchema(BaseModel):
    x: int
    y: int
    combatant_id: int


class MapResponse(BaseModel):
    width: int
    height: int
    tiles: list[list[int]] = Field(description="Rows of TileType values (0=Empty,1=Obstacle,2=Difficult,3=Hazard)")
    occupants: list[OccupantSchema] = Field(default_factory=list)


# --- Config ---

class CombatConfigResponse(BaseModel):
    seed: int
    grid_width: int
    grid_height: int
    melee_range: int
    default_ranged_range: int
    base_armor_class: int
    cover_ac_bonus: int
    cover_adjacency: int
    max_rounds: int
