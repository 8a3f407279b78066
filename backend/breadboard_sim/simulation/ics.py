"""Logic IC models — 7448, 74138, 74148.

Every IC needs Vcc on pin 16 (net HIGH) and ground on pin 8 (net LOW)
before it evaluates. An evaluator returns its state and whether it
changed any net; outputs only count as a change when the driven net's
state actually flips.

Pins are addressed by their wire-format keys ("pin7") so downstream
consumers see the physical package numbering.
"""

from __future__ import annotations

from typing import Callable

from breadboard_sim.schemas.components import ICRecord, ICType
from breadboard_sim.schemas.simulation import (
    ComponentState,
    IC7448State,
    IC74138State,
    IC74148State,
    ICInactiveState,
)
from breadboard_sim.simulation.nets import NetLookup

PIN_VCC = "pin16"
PIN_GND = "pin8"

STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"
STATUS_UNSUPPORTED = "Unsupported IC type"
STATUS_DISABLED = "Disabled"
STATUS_UNINITIALIZED = "Uninitialized"


def _node(record: ICRecord, pin: str) -> str | None:
    return getattr(record, pin)


def _nodes(record: ICRecord, pins) -> list[str | None]:
    return [_node(record, pin) for pin in pins]


# ═══════════════════════════════════════════════════════════
# IC7448: BCD to 7-segment decoder
# ═══════════════════════════════════════════════════════════

IC7448_INPUT_PINS = {"A": "pin7", "B": "pin1", "C": "pin2", "D": "pin6"}
IC7448_LT_PIN = "pin3"
IC7448_BI_RBO_PIN = "pin5"
IC7448_RBI_PIN = "pin4"
IC7448_SEGMENT_PINS = {
    "a": "pin13",
    "b": "pin12",
    "c": "pin11",
    "d": "pin10",
    "e": "pin15",
    "f": "pin14",
    "g": "pin9",
}
SEGMENT_NAMES = tuple(IC7448_SEGMENT_PINS)

# Segments a–g lit for each BCD digit
SEGMENT_TABLE: tuple[tuple[bool, ...], ...] = tuple(
    tuple(bit == "1" for bit in row)
    for row in (
        "1111110",  # 0
        "0110000",  # 1
        "1101101",  # 2
        "1111001",  # 3
        "0110011",  # 4
        "1011011",  # 5
        "1011111",  # 6
        "1110000",  # 7
        "1111111",  # 8
        "1111011",  # 9
    )
)


def segment_pattern(value: int) -> dict[str, bool]:
    """Segments lit for a BCD value; anything above 9 is blank."""
    if 0 <= value < len(SEGMENT_TABLE):
        return dict(zip(SEGMENT_NAMES, SEGMENT_TABLE[value]))
    return {name: False for name in SEGMENT_NAMES}


def evaluate_ic7448(
    component_id: str, record: ICRecord, nets: NetLookup
) -> tuple[IC7448State, bool]:
    inputs = {
        name: nets.read_logic(_node(record, pin))
        for name, pin in IC7448_INPUT_PINS.items()
    }
    # Floating inputs read as 0 but are reported
    missing = tuple(
        name
        for name, pin in IC7448_INPUT_PINS.items()
        if nets.read_level(_node(record, pin)) is None
    )

    # Control inputs are active-LOW and read HIGH when floating
    lt = nets.read_logic(_node(record, IC7448_LT_PIN), default=True)
    bi_rbo = nets.read_logic(_node(record, IC7448_BI_RBO_PIN), default=True)
    rbi = nets.read_logic(_node(record, IC7448_RBI_PIN), default=True)

    value = (
        (8 if inputs["D"] else 0)
        + (4 if inputs["C"] else 0)
        + (2 if inputs["B"] else 0)
        + (1 if inputs["A"] else 0)
    )

    if not bi_rbo:
        segments = {name: False for name in SEGMENT_NAMES}
    elif not lt:
        segments = {name: True for name in SEGMENT_NAMES}
    elif value == 0 and not rbi:
        segments = {name: False for name in SEGMENT_NAMES}
    else:
        segments = segment_pattern(value)

    changed = False
    outputs: dict[str, bool] = {}
    for name, pin in IC7448_SEGMENT_PINS.items():
        level = not segments[name]
        outputs[name] = level
        if nets.drive(_node(record, pin), level, component_id):
            changed = True

    state = IC7448State(
        ic_type=ICType.IC7448.value,
        status=STATUS_ACTIVE,
        inputs=inputs,
        missing_inputs=missing,
        control={"LT": lt, "BI_RBO": bi_rbo, "RBI": rbi},
        value=value,
        segments=segments,
        outputs=outputs,
        input_has_conflict=nets.aliased(_nodes(record, IC7448_INPUT_PINS.values())),
        output_has_conflict=nets.aliased(
            _nodes(record, IC7448_SEGMENT_PINS.values())
        ),
    )
    return state, changed


# ═══════════════════════════════════════════════════════════
# IC74138: 3-to-8 line decoder
# ═══════════════════════════════════════════════════════════

IC74138_ADDRESS_PINS = {"A0": "pin1", "A1": "pin2", "A2": "pin3"}
IC74138_E1_PIN = "pin4"
IC74138_E2_PIN = "pin5"
IC74138_E3_PIN = "pin6"
IC74138_OUTPUT_PINS = {
    "O0": "pin15",
    "O1": "pin14",
    "O2": "pin13",
    "O3": "pin12",
    "O4": "pin11",
    "O5": "pin10",
    "O6": "pin9",
    "O7": "pin7",
}


def evaluate_ic74138(
    component_id: str, record: ICRecord, nets: NetLookup
) -> tuple[IC74138State, bool]:
    address = {
        name: nets.read_logic(_node(record, pin))
        for name, pin in IC74138_ADDRESS_PINS.items()
    }

    # E1/E2 are active-LOW and enabled when floating; E3 is active-HIGH
    # and disabled when floating.
    e1 = not nets.read_logic(_node(record, IC74138_E1_PIN), default=False)
    e2 = not nets.read_logic(_node(record, IC74138_E2_PIN), default=False)
    e3 = nets.read_logic(_node(record, IC74138_E3_PIN), default=False)
    enabled = e1 and e2 and e3

    index = (4 if address["A2"] else 0) + (2 if address["A1"] else 0) + (
        1 if address["A0"] else 0
    )
    outputs = {
        name: enabled and position == index
        for position, name in enumerate(IC74138_OUTPUT_PINS)
    }

    changed = False
    for name, pin in IC74138_OUTPUT_PINS.items():
        if nets.drive(_node(record, pin), outputs[name], component_id):
            changed = True

    state = IC74138State(
        ic_type=ICType.IC74138.value,
        status=STATUS_ACTIVE,
        address=address,
        enable={"E1": e1, "E2": e2, "E3": e3},
        enabled=enabled,
        selected=index if enabled else None,
        outputs=outputs,
        input_has_conflict=nets.aliased(
            _nodes(record, IC74138_ADDRESS_PINS.values())
        ),
        output_has_conflict=nets.aliased(
            _nodes(record, IC74138_OUTPUT_PINS.values())
        ),
    )
    return state, changed


# ═══════════════════════════════════════════════════════════
# IC74148: 8-to-3 priority encoder
# ═══════════════════════════════════════════════════════════

IC74148_EI_PIN = "pin5"
IC74148_INPUT_PINS = {
    "I0": "pin10",
    "I1": "pin11",
    "I2": "pin12",
    "I3": "pin13",
    "I4": "pin1",
    "I5": "pin2",
    "I6": "pin3",
    "I7": "pin4",
}
IC74148_OUTPUT_PINS = {
    "A2": "pin6",
    "A1": "pin7",
    "A0": "pin9",
    "GS": "pin14",
    "EO": "pin15",
}


def encode_priority(highest: int) -> dict[str, bool]:
    """Output line levels (True = HIGH) for a winning input index."""
    return {
        "A2": not highest & 4,
        "A1": not highest & 2,
        "A0": not highest & 1,
        "GS": False,
        "EO": True,
    }


def evaluate_ic74148(
    component_id: str, record: ICRecord, nets: NetLookup
) -> tuple[IC74148State, bool]:
    input_conflict = nets.aliased(_nodes(record, IC74148_INPUT_PINS.values()))
    output_conflict = nets.aliased(_nodes(record, IC74148_OUTPUT_PINS.values()))

    enable_in = nets.is_low(_node(record, IC74148_EI_PIN))
    if not enable_in:
        state = IC74148State(
            ic_type=ICType.IC74148.value,
            status=STATUS_DISABLED,
            error="Disabled — EI not active",
            enable_in=False,
            input_has_conflict=input_conflict,
            output_has_conflict=output_conflict,
        )
        return state, False

    # Active-LOW inputs; an undetermined input counts as inactive
    inputs = {
        name: not nets.read_logic(_node(record, pin), default=True)
        for name, pin in IC74148_INPUT_PINS.items()
    }

    highest = -1
    for position, name in reversed(list(enumerate(IC74148_INPUT_PINS))):
        if inputs[name]:
            highest = position
            break

    if highest < 0:
        state = IC74148State(
            ic_type=ICType.IC74148.value,
            status=STATUS_UNINITIALIZED,
            enable_in=True,
            inputs=inputs,
            input_has_conflict=input_conflict,
            output_has_conflict=output_conflict,
        )
        return state, False

    outputs = encode_priority(highest)
    changed = False
    for name, pin in IC74148_OUTPUT_PINS.items():
        if nets.drive(_node(record, pin), outputs[name], component_id):
            changed = True

    state = IC74148State(
        ic_type=ICType.IC74148.value,
        status=STATUS_ACTIVE,
        enable_in=True,
        inputs=inputs,
        highest_priority=highest,
        outputs=outputs,
        input_has_conflict=input_conflict,
        output_has_conflict=output_conflict,
    )
    return state, changed


# ═══════════════════════════════════════════════════════════
# Dispatch
# ═══════════════════════════════════════════════════════════

ICEvaluator = Callable[[str, ICRecord, NetLookup], tuple[ComponentState, bool]]

IC_EVALUATORS: dict[str, ICEvaluator] = {
    ICType.IC7448.value: evaluate_ic7448,
    ICType.IC74138.value: evaluate_ic74138,
    ICType.IC74148.value: evaluate_ic74148,
}

# Pin → function, per supported part
IC_PINOUTS: dict[str, dict[str, str]] = {
    ICType.IC7448.value: {
        **{pin: name for name, pin in IC7448_INPUT_PINS.items()},
        IC7448_LT_PIN: "LT",
        IC7448_BI_RBO_PIN: "BI/RBO",
        IC7448_RBI_PIN: "RBI",
        **{pin: name for name, pin in IC7448_SEGMENT_PINS.items()},
        PIN_GND: "GND",
        PIN_VCC: "VCC",
    },
    ICType.IC74138.value: {
        **{pin: name for name, pin in IC74138_ADDRESS_PINS.items()},
        IC74138_E1_PIN: "E1",
        IC74138_E2_PIN: "E2",
        IC74138_E3_PIN: "E3",
        **{pin: name for name, pin in IC74138_OUTPUT_PINS.items()},
        PIN_GND: "GND",
        PIN_VCC: "VCC",
    },
    ICType.IC74148.value: {
        **{pin: name for name, pin in IC74148_INPUT_PINS.items()},
        IC74148_EI_PIN: "EI",
        **{pin: name for name, pin in IC74148_OUTPUT_PINS.items()},
        PIN_GND: "GND",
        PIN_VCC: "VCC",
    },
}


def evaluate_ic(
    component_id: str, record: ICRecord, nets: NetLookup
) -> tuple[ComponentState, bool]:
    """Check power, then dispatch on the IC part number."""
    has_vcc = nets.is_high(_node(record, PIN_VCC))
    has_gnd = nets.is_low(_node(record, PIN_GND))

    if not has_vcc or not has_gnd:
        state = ICInactiveState(
            ic_type=record.ic_type,
            status=STATUS_INACTIVE,
            has_vcc=has_vcc,
            has_gnd=has_gnd,
            error="Missing power connections",
        )
        return state, False

    evaluator = IC_EVALUATORS.get(record.ic_type or "")
    if evaluator is None:
        state = ICInactiveState(
            ic_type=record.ic_type,
            status=STATUS_UNSUPPORTED,
            error=f"{STATUS_UNSUPPORTED}: {record.ic_type!r}",
        )
        return state, False

    return evaluator(component_id, record, nets)
