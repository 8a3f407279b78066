"""Simulation router — stateless breadboard simulation endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from breadboard_sim.config import Settings, get_settings
from breadboard_sim.schemas.simulation import SimulationResult
from breadboard_sim.simulation.engine import run_simulation

router = APIRouter()


@router.post("/run", response_model=SimulationResult)
async def run(
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """Simulate a breadboard description. Malformed input, including a
    body that is not JSON, is reported as a ParseError inside the result,
    not as an HTTP error."""
    description = await request.body()
    return run_simulation(
        description, max_iterations=settings.simulation_max_iterations
    )
