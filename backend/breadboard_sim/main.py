"""Breadboard Simulator — HTTP service.

Responsibilities:
  1. Stateless breadboard simulation (one run per request)
  2. Component catalog: kinds, IC pinouts, footprints

Placement, replication and rendering stay with the clients; the
service only turns a component description into a SimulationResult.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from breadboard_sim import __version__
from breadboard_sim.config import get_settings
from breadboard_sim.routers import components, simulation


def create_app() -> FastAPI:
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    application = FastAPI(
        title=settings.app_name,
        version=__version__,
        description=(
            "Virtual breadboard simulation engine.\n\n"
            "Resolves nets, detects short circuits and evaluates LEDs, "
            "seven-segment displays and 7448/74138/74148 logic ICs."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Simulation (stateless) ───
    application.include_router(
        simulation.router, prefix="/api/simulation", tags=["Simulation"]
    )

    # ─── Component catalog ───
    application.include_router(
        components.router, prefix="/api/components", tags=["Components"]
    )

    return application


app = create_app()


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "breadboard-sim", "version": __version__}
