"""/api/v1/encounter — live encounter state and player actions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException, Query

from tactics.api.dependencies import get_encounter_manager
from tactics.api.encounter_manager import EncounterManager, EncounterNotRunning, NotYourTurn
from tactics.api.schemas import (
    ActionResponse,
    AttackRequest,
    EncounterStateResponse,
    EventSchema,
    MoveRequest,
    StartRequest,
)
from tactics.api.serializers import serialize_state

router = APIRouter(prefix="/encounter")


@contextmanager
def _http_errors() -> Iterator[None]:
    """Map manager exceptions onto HTTP status codes."""
    try:
        yield
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]) if exc.args else "Not found") from exc
    except (EncounterNotRunning, NotYourTurn) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _respond(manager: EncounterManager, success: bool, message: str) -> ActionResponse:
    return ActionResponse(
        status="ok" if success else "rejected",
        message=message,
        success=success,
        state=serialize_state(manager.encounter),
    )


@router.get("", response_model=EncounterStateResponse)
def get_encounter(manager: EncounterManager = Depends(get_encounter_manager)) -> EncounterStateResponse:
    return serialize_state(manager.encounter)


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since: int = Query(0, ge=0, description="Only return events with seq >= since"),
    manager: EncounterManager = Depends(get_encounter_manager),
) -> list[EventSchema]:
    return [
        EventSchema(seq=ev.seq, round=ev.round, message=ev.message)
        for ev in manager.event_log.since(since)
    ]


@router.post("/start", response_model=ActionResponse)
def start_encounter(
    body: StartRequest | None = None,
    manager: EncounterManager = Depends(get_encounter_manager),
) -> ActionResponse:
    with _http_errors():
        encounter = manager.start(body)
    if encounter.is_combat_active:
        return _respond(manager, True, "Encounter started.")
    return _respond(manager, False, f"Encounter ended immediately: {encounter.outcome.name}.")


@router.post("/move", response_model=ActionResponse)
def move(body: MoveRequest, manager: EncounterManager = Depends(get_encounter_manager)) -> ActionResponse:
    with _http_errors():
        reached = manager.move(body.combatant_id, body.x, body.y)
    return _respond(manager, reached, "Destination reached." if reached else "Destination not reached.")


@router.post("/attack", response_model=ActionResponse)
def attack(body: AttackRequest, manager: EncounterManager = Depends(get_encounter_manager)) -> ActionResponse:
    with _http_errors():
        hit = manager.attack(body.attacker_id, body.defender_id)
    return _respond(manager, hit, "Hit." if hit else "No hit.")


@router.post("/end-turn", response_model=ActionResponse)
def end_turn(manager: EncounterManager = Depends(get_encounter_manager)) -> ActionResponse:
    with _http_errors():
        ended = manager.end_turn()
    return _respond(manager, ended, "Turn ended." if ended else "No turn to end.")


@router.post("/auto-turn", response_model=ActionResponse)
def auto_turn(manager: EncounterManager = Depends(get_encounter_manager)) -> ActionResponse:
    with _http_errors():
        played = manager.auto_turn()
    return _respond(manager, played, "AI played the turn." if played else "No turn to play.")
