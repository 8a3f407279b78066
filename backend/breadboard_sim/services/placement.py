"""Placement service — per-breadboard component layout and id allocation.

A BreadboardLayout is owned by the caller (one per student board). It
allocates component ids, derives multi-pin footprints from a single
anchor node, tracks which nodes are occupied, and produces the
description the simulation engine consumes.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from breadboard_sim.schemas.components import (
    BreadboardState,
    ComponentRecord,
    DipSwitchRecord,
    ICRecord,
    LEDRecord,
    ResistorRecord,
    SevenSegmentRecord,
    WireRecord,
)
from breadboard_sim.simulation.topology import node_offset

logger = logging.getLogger(__name__)

# Pin → (row offset, column offset) from the anchor node
DIP_SWITCH_FOOTPRINT = {"pin1": (0, 0), "pin2": (0, 1)}

SEVEN_SEGMENT_FOOTPRINT = {
    "node_b": (0, 0),
    "node_a": (1, 0),
    "node_gnd1": (2, 0),
    "node_f": (3, 0),
    "node_g": (4, 0),
    "node_dp": (0, 5),
    "node_c": (1, 5),
    "node_gnd2": (2, 5),
    "node_d": (3, 5),
    "node_e": (4, 5),
}

# Anchored on pin 9; straddles the centre gap like a DIP-16 package
IC_FOOTPRINT = {
    **{f"pin{9 + i}": (i, 0) for i in range(8)},
    **{f"pin{1 + i}": (7 - i, 1) for i in range(8)},
}

FOOTPRINTS: dict[str, dict[str, tuple[int, int]]] = {
    "dipSwitch": DIP_SWITCH_FOOTPRINT,
    "sevenSegment": SEVEN_SEGMENT_FOOTPRINT,
    "ic": IC_FOOTPRINT,
}


def resolve_footprint(kind: str, anchor: str) -> dict[str, str]:
    """Map each pin of a footprint to a node key.

    Raises:
        KeyError: unknown footprint kind.
        ValueError: any pin would fall off the board.
    """
    footprint = FOOTPRINTS[kind]
    placed: dict[str, str] = {}
    off_board: list[str] = []
    for pin, (row_offset, column_offset) in footprint.items():
        node = node_offset(anchor, row_offset, column_offset)
        if node is None:
            off_board.append(pin)
        else:
            placed[pin] = node
    if off_board:
        raise ValueError(
            f"{kind} at {anchor} does not fit on the board "
            f"(pins off board: {', '.join(off_board)})"
        )
    return placed


class BreadboardLayout:
    """Placed components of one breadboard, in placement order."""

    def __init__(self) -> None:
        self._components: dict[str, ComponentRecord] = {}
        self._counters: dict[str, int] = defaultdict(int)

    # ─── Id Allocation ───

    def _next_id(self, prefix: str) -> str:
        self._counters[prefix] += 1
        return f"{prefix}{self._counters[prefix]}"

    def _place(self, prefix: str, record: ComponentRecord) -> str:
        component_id = self._next_id(prefix)
        self._components[component_id] = record
        logger.debug("Placed %s: %s", component_id, record.pins())
        return component_id

    # ─── Placement ───

    def add_wire(self, start_node: str, end_node: str, color: str | None = None) -> str:
        return self._place(
            "wire", WireRecord(start_node=start_node, end_node=end_node, color=color)
        )

    def add_led(self, anode: str, cathode: str, color: str | None = None) -> str:
        return self._place("led", LEDRecord(anode=anode, cathode=cathode, color=color))

    def add_resistor(self, pin1: str, pin2: str) -> str:
        return self._place("resistor", ResistorRecord(pin1=pin1, pin2=pin2))

    def add_dip_switch(self, pin1: str, is_on: bool = False) -> str:
        pins = resolve_footprint("dipSwitch", pin1)
        return self._place("dipSwitch", DipSwitchRecord(**pins, is_on=is_on))

    def add_seven_segment(self, node_b: str) -> str:
        pins = resolve_footprint("sevenSegment", node_b)
        return self._place("sevenSegment", SevenSegmentRecord(**pins))

    def add_ic(self, pin9: str, ic_type: str) -> str:
        pins = resolve_footprint("ic", pin9)
        return self._place("ic", ICRecord(ic_type=ic_type, **pins))

    # ─── Mutation ───

    def set_switch(self, component_id: str, is_on: bool) -> None:
        record = self._components.get(component_id)
        if not isinstance(record, DipSwitchRecord):
            raise KeyError(f"No DIP switch with id {component_id!r}")
        self._components[component_id] = record.model_copy(update={"is_on": is_on})

    def toggle_switch(self, component_id: str) -> bool:
        record = self._components.get(component_id)
        if not isinstance(record, DipSwitchRecord):
            raise KeyError(f"No DIP switch with id {component_id!r}")
        self.set_switch(component_id, not record.is_on)
        return not record.is_on

    def remove(self, component_id: str) -> ComponentRecord:
        return self._components.pop(component_id)

    def remove_component_with_node(self, node: str) -> list[str]:
        """Remove every component touching ``node``; returns removed ids."""
        removed = [
            component_id
            for component_id, record in self._components.items()
            if node in record.pins().values()
        ]
        for component_id in removed:
            del self._components[component_id]
        if removed:
            logger.info("Removed %s from node %s", ", ".join(removed), node)
        return removed

    # ─── Queries ───

    @property
    def components(self) -> dict[str, ComponentRecord]:
        return dict(self._components)

    def occupied_nodes(self) -> set[str]:
        occupied: set[str] = set()
        for record in self._components.values():
            occupied.update(record.pins().values())
        return occupied

    def is_occupied(self, node: str) -> bool:
        return node in self.occupied_nodes()

    def to_state(self) -> BreadboardState:
        return BreadboardState(components=dict(self._components))

    def to_payload(self) -> dict[str, Any]:
        """Wire-format description, as sent to the simulation endpoint."""
        return {
            "components": {
                component_id: record.model_dump(by_alias=True, exclude_none=True)
                for component_id, record in self._components.items()
            }
        }

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._components
