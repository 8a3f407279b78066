from breadboard_sim.simulation.engine import run_simulation, simulate
from breadboard_sim.simulation.parsing import (
    BreadboardParseError,
    parse_breadboard_state,
)

__all__ = [
    "run_simulation",
    "simulate",
    "BreadboardParseError",
    "parse_breadboard_state",
]
