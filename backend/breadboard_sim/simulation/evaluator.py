"""Component Evaluator — fixed-point propagation over nets.

Each pass visits every non-wire component in declaration order.
Passive parts (resistors, switches, LEDs, displays) only read nets;
ICs may drive their output nets. Passes repeat until one produces no
net change, or the iteration cap is reached. There is no oscillation
detection: a circuit that never settles simply stops at the cap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from breadboard_sim.schemas.components import (
    ComponentRecord,
    DipSwitchRecord,
    ICRecord,
    LEDRecord,
    ResistorRecord,
    SevenSegmentRecord,
    WireRecord,
)
from breadboard_sim.schemas.simulation import (
    ComponentState,
    DipSwitchState,
    LEDState,
    PowerSource,
    ResistorState,
    SevenSegmentState,
)
from breadboard_sim.simulation.ics import evaluate_ic
from breadboard_sim.simulation.nets import Net, NetLookup

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10

SEGMENT_NODES = {
    "A": "node_a",
    "B": "node_b",
    "C": "node_c",
    "D": "node_d",
    "E": "node_e",
    "F": "node_f",
    "G": "node_g",
    "DP": "node_dp",
}


@dataclass
class EvaluationOutcome:
    component_states: dict[str, ComponentState] = field(default_factory=dict)
    iterations: int = 0
    converged: bool = True


# ─── Passive Components ───


def evaluate_resistor(record: ResistorRecord, nets: NetLookup) -> ResistorState:
    return ResistorState(
        pin1=record.pin1,
        pin2=record.pin2,
        pin1_connected=nets.is_connected(record.pin1),
        pin2_connected=nets.is_connected(record.pin2),
        pin1_state=nets.state_of(record.pin1),
        pin2_state=nets.state_of(record.pin2),
    )


def evaluate_dip_switch(
    record: DipSwitchRecord, nets: NetLookup, resistor_nodes: set[str]
) -> DipSwitchState:
    pin_nets = [nets.net_for(record.pin1), nets.net_for(record.pin2)]
    return DipSwitchState(
        is_on=record.is_on,
        pin1=record.pin1,
        pin2=record.pin2,
        pin1_state=nets.state_of(record.pin1),
        pin2_state=nets.state_of(record.pin2),
        is_grounded=any(net.has_ground_rail for net in pin_nets if net),
        pin1_has_resistor=record.pin1 in resistor_nodes,
        pin2_has_resistor=record.pin2 in resistor_nodes,
    )


def evaluate_led(record: LEDRecord, nets: NetLookup) -> LEDState:
    anode = nets.net_for(record.anode)
    cathode = nets.net_for(record.cathode)

    if anode is None or cathode is None:
        return LEDState(
            is_on=False,
            anode_state=anode.state if anode else None,
            cathode_state=cathode.state if cathode else None,
            error="Missing connection",
        )

    forward_biased = nets.is_high(record.anode) and nets.is_low(record.cathode)
    has_resistor = anode.has_resistor or cathode.has_resistor
    protected = has_resistor or anode.source == PowerSource.IC

    error = None
    if forward_biased and not protected:
        error = "LED requires a resistor"

    return LEDState(
        is_on=forward_biased and protected,
        anode_state=anode.state,
        cathode_state=cathode.state,
        grounded=nets.is_low(record.cathode),
        has_resistor=has_resistor,
        error=error,
    )


def evaluate_seven_segment(
    record: SevenSegmentRecord, nets: NetLookup
) -> SevenSegmentState:
    grounded = nets.is_low(record.node_gnd1) or nets.is_low(record.node_gnd2)
    segments = {
        segment: grounded and nets.is_high(getattr(record, attr))
        for segment, attr in SEGMENT_NODES.items()
    }
    return SevenSegmentState(segments=segments, grounded=grounded)


# ─── Fixed Point ───


def _resistor_pin_nodes(components: Mapping[str, ComponentRecord]) -> set[str]:
    nodes: set[str] = set()
    for record in components.values():
        if isinstance(record, ResistorRecord):
            nodes.update(n for n in (record.pin1, record.pin2) if n)
    return nodes


def _evaluate_component(
    component_id: str,
    record: ComponentRecord,
    nets: NetLookup,
    resistor_nodes: set[str],
) -> tuple[ComponentState, bool]:
    if isinstance(record, ICRecord):
        return evaluate_ic(component_id, record, nets)
    if isinstance(record, LEDRecord):
        return evaluate_led(record, nets), False
    if isinstance(record, SevenSegmentRecord):
        return evaluate_seven_segment(record, nets), False
    if isinstance(record, DipSwitchRecord):
        return evaluate_dip_switch(record, nets, resistor_nodes), False
    if isinstance(record, ResistorRecord):
        return evaluate_resistor(record, nets), False
    raise TypeError(f"{component_id}: unsupported record {type(record).__name__}")


def evaluate_components(
    nets: list[Net],
    components: Mapping[str, ComponentRecord],
    max_iterations: int = MAX_ITERATIONS,
) -> EvaluationOutcome:
    """Evaluate all components, letting ICs drive nets until quiescent.

    Mutates ``nets`` in place. The returned states are those computed
    in the last pass.
    """
    lookup = NetLookup(nets)
    resistor_nodes = _resistor_pin_nodes(components)
    outcome = EvaluationOutcome()

    changed = True
    while changed and outcome.iterations < max_iterations:
        changed = False
        outcome.iterations += 1

        for component_id, record in components.items():
            if isinstance(record, WireRecord):
                continue
            state, wrote = _evaluate_component(
                component_id, record, lookup, resistor_nodes
            )
            outcome.component_states[component_id] = state
            if wrote:
                changed = True

    outcome.converged = not changed
    if not outcome.converged:
        logger.warning(
            "Evaluation did not settle after %d iterations", outcome.iterations
        )
    else:
        logger.debug("Evaluation settled after %d iterations", outcome.iterations)

    return outcome
