"""GET /api/v1/map — battlefield terrain and occupancy."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from tactics.api.dependencies import get_encounter_manager
from tactics.api.encounter_manager import EncounterManager
from tactics.api.schemas import MapResponse, OccupantSchema
from tactics.core.models import GridPosition

router = APIRouter()


@router.get("/map", response_model=MapResponse)
def get_map(manager: EncounterManager = Depends(get_encounter_manager)) -> MapResponse:
    grid = manager.get_grid()
    if grid is None:
        raise HTTPException(status_code=503, detail="No encounter has been started yet.")

    tiles = [
        [int(grid.get_tile(GridPosition(x, y))) for x in range(grid.width)]
        for y in range(grid.height)
    ]
    occupants = [OccupantSchema(x=pos.x, y=pos.y, combatant_id=who.id) for pos, who in grid.occupants()]
    return MapResponse(width=grid.width, height=grid.height, tiles=tiles, occupants=occupants)
