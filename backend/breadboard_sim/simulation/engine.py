"""Breadboard Simulation Engine — build → resolve → check → evaluate → assemble.

Stateless: every call builds and discards its own graph, nets and
component states, so concurrent runs for different breadboards never
share anything.

Input:  raw description (JSON text, mapping, or BreadboardState)
Output: SimulationResult; failures are reported inside it, never raised
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from breadboard_sim.schemas.components import BreadboardState
from breadboard_sim.schemas.simulation import BreadboardErrorType, SimulationResult
from breadboard_sim.simulation.checks import (
    POST_EVALUATION_CHECKS,
    PRE_EVALUATION_CHECKS,
    detect_errors,
)
from breadboard_sim.simulation.evaluator import MAX_ITERATIONS, evaluate_components
from breadboard_sim.simulation.nets import resolve_nets
from breadboard_sim.simulation.parsing import (
    BreadboardParseError,
    parse_breadboard_state,
)
from breadboard_sim.simulation.results import assemble_result, error_result
from breadboard_sim.simulation.topology import build_graph

logger = logging.getLogger(__name__)


def simulate(
    state: BreadboardState,
    max_iterations: int = MAX_ITERATIONS,
) -> SimulationResult:
    """Run the full pipeline on an already-validated description."""
    graph = build_graph(state.components)
    nets = resolve_nets(graph)

    errors = detect_errors(nets, PRE_EVALUATION_CHECKS)
    outcome = evaluate_components(nets, state.components, max_iterations)
    errors.extend(detect_errors(nets, POST_EVALUATION_CHECKS))

    result = assemble_result(nets, outcome, errors)
    logger.info(
        "Simulation complete — %d components, %d nets, %d errors, %d iteration(s)",
        len(state.components),
        len(result.nets),
        len(result.errors),
        result.iterations,
    )
    for component_id, component_state in result.component_states.items():
        logger.debug("  %s: %s", component_id, component_state.model_dump_json())
    return result


def run_simulation(
    payload: str | bytes | Mapping[str, Any] | BreadboardState,
    max_iterations: int = MAX_ITERATIONS,
) -> SimulationResult:
    """Parse and simulate a breadboard description.

    Malformed input yields a result holding a single ParseError; any
    other failure yields a single SimulationError.
    """
    try:
        state = parse_breadboard_state(payload)
    except BreadboardParseError as e:
        logger.error("Breadboard parse error: %s", e)
        return error_result(
            BreadboardErrorType.PARSE_ERROR,
            e.description,
            suggestion="Send an object with a 'components' mapping",
        )

    try:
        return simulate(state, max_iterations)
    except Exception as e:
        logger.exception("Simulation failed")
        return error_result(
            BreadboardErrorType.SIMULATION_ERROR,
            f"Unexpected error: {type(e).__name__}: {e}",
        )
