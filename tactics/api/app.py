"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tactics import __version__
from tactics.api.encounter_manager import EncounterManager
from tactics.api.routes import api_router
from tactics.config import CombatConfig
from tactics.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: CombatConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = CombatConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        logger.info("API server started — waiting for an encounter.")
        yield
        manager: EncounterManager = app.state.encounter_manager
        if manager.encounter is not None:
            manager.encounter.end_combat()
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Grid Tactics Combat Engine",
        description=(
            "Deterministic turn-based grid combat.\n\n"
            "## API Groups\n\n"
            "- **Encounter** — Start an encounter, read its state and narration, act for the current combatant\n"
            "- **Map** — Battlefield terrain and occupancy\n"
            "- **Config** — Read-only combat configuration\n"
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Encounter", "description": "Encounter lifecycle and player actions: start, move, attack, end turn, AI auto-turn."},
            {"name": "Map", "description": "Tile layout and who stands where."},
            {"name": "Config", "description": "Read-only combat rules configuration."},
        ],
    )
    app.state.encounter_manager = EncounterManager(_config)

    # CORS: any origin, for local front-ends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
