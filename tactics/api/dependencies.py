"""FastAPI dependency injection — provides the app's EncounterManager."""

from __future__ import annotations

from fastapi import Request

from tactics.api.encounter_manager import EncounterManager


def get_encounter_manager(request: Request) -> EncounterManager:
    manager = getattr(request.app.state, "encounter_manager", None)
    if manager is None:
        raise RuntimeError("EncounterManager not initialized — server not started correctly.")
    return manager
