"""GET /api/v1/config — expose combat configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tactics.api.dependencies import get_encounter_manager
from tactics.api.encounter_manager import EncounterManager
from tactics.api.schemas import CombatConfigResponse

router = APIRouter()


@router.get("/config", response_model=CombatConfigResponse)
def get_config(manager: EncounterManager = Depends(get_encounter_manager)) -> CombatConfigResponse:
    cfg = manager.config
    return CombatConfigResponse(
        seed=cfg.seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        melee_range=cfg.melee_range,
        default_ranged_range=cfg.default_ranged_range,
        base_armor_class=cfg.base_armor_class,
        cover_ac_bonus=cfg.cover_ac_bonus,
        cover_adjacency=cfg.cover_adjacency,
        max_rounds=cfg.max_rounds,
    )
