"""Error Detector — net-level electrical checks.

Checks are non-fatal: they report problems, they never stop evaluation
or rewrite net states.

  1. Short circuit: a net touching both a PWR and a GND rail node
  2. Multiple drivers: a rail net overridden by an IC output
"""

from __future__ import annotations

import logging
from typing import Callable

from breadboard_sim.schemas.simulation import (
    BreadboardError,
    BreadboardErrorType,
    ErrorSeverity,
)
from breadboard_sim.simulation.nets import Net
from breadboard_sim.simulation.topology import is_rail_node

logger = logging.getLogger(__name__)

NetCheck = Callable[[list[Net]], list[BreadboardError]]


# ═══════════════════════════════════════════════════════════
# Check 1: Short Circuit
# ═══════════════════════════════════════════════════════════


def check_short_circuits(nets: list[Net]) -> list[BreadboardError]:
    """Flag every net that bridges a power rail and a ground rail."""
    errors: list[BreadboardError] = []

    for net in nets:
        if net.has_power_rail and net.has_ground_rail:
            logger.warning("Short circuit on net %d: %s", net.id, net.nodes)
            errors.append(
                BreadboardError(
                    type=BreadboardErrorType.SHORT_CIRCUIT,
                    severity=ErrorSeverity.ERROR,
                    description="Power rail connected to ground rail",
                    affected_nodes=tuple(net.nodes),
                    involved_components=tuple(net.source_components),
                    suggestion="Put a load or an open switch between PWR and GND",
                )
            )

    return errors


# ═══════════════════════════════════════════════════════════
# Check 2: Multiple Drivers
# ═══════════════════════════════════════════════════════════


def check_multiple_drivers(nets: list[Net]) -> list[BreadboardError]:
    """Flag rail nets whose level was overwritten by an IC output.

    Only meaningful after evaluation, once ICs have driven their pins.
    """
    errors: list[BreadboardError] = []

    for net in nets:
        if net.source_component is None:
            continue
        rail_nodes = [n for n in net.nodes if is_rail_node(n)]
        if not rail_nodes:
            continue
        errors.append(
            BreadboardError(
                type=BreadboardErrorType.MULTIPLE_DRIVERS,
                severity=ErrorSeverity.WARNING,
                description=(
                    f"Both a power rail and {net.source_component} "
                    f"are driving net {net.id}"
                ),
                affected_nodes=tuple(rail_nodes),
                involved_components=(net.source_component,),
                suggestion="Disconnect the IC output from the rail",
            )
        )

    return errors


# ═══════════════════════════════════════════════════════════
# Registries
# ═══════════════════════════════════════════════════════════

PRE_EVALUATION_CHECKS: list[NetCheck] = [check_short_circuits]
POST_EVALUATION_CHECKS: list[NetCheck] = [check_multiple_drivers]


def detect_errors(
    nets: list[Net],
    checks: list[NetCheck] | None = None,
) -> list[BreadboardError]:
    """Run the given (default: pre-evaluation) checks over all nets."""
    check_fns = checks if checks is not None else PRE_EVALUATION_CHECKS
    errors: list[BreadboardError] = []
    for check_fn in check_fns:
        errors.extend(check_fn(nets))
    return errors
