"""Result Assembler — freezes one run's output into a SimulationResult."""

from __future__ import annotations

from breadboard_sim.schemas.simulation import (
    BreadboardError,
    BreadboardErrorType,
    ErrorSeverity,
    SimulationResult,
)
from breadboard_sim.simulation.evaluator import EvaluationOutcome
from breadboard_sim.simulation.nets import Net


def assemble_result(
    nets: list[Net],
    outcome: EvaluationOutcome,
    errors: list[BreadboardError],
) -> SimulationResult:
    return SimulationResult(
        component_states=dict(outcome.component_states),
        nets=tuple(net.to_info() for net in nets),
        errors=tuple(errors),
        iterations=outcome.iterations,
        converged=outcome.converged,
    )


def error_result(
    error_type: BreadboardErrorType,
    description: str,
    suggestion: str | None = None,
) -> SimulationResult:
    """An empty result carrying a single fatal error."""
    return SimulationResult(
        errors=(
            BreadboardError(
                type=error_type,
                severity=ErrorSeverity.ERROR,
                description=description,
                suggestion=suggestion,
            ),
        ),
    )
