"""Topology Builder — breadboard adjacency graph.

Geometry:
  - Two power rails, rows 1–30 (left) and 31–60 (right), each row with
    a PWR and a GND node ("12PWR", "12GND"). Rail nodes are not bussed.
  - Two 30-row node matrices, columns A–E and F–J ("5C", "17H").
    Each half-row is one internal bus: A–E are chained, F–J are chained,
    and the E/F centre gap is never bridged.

Placed wires, closed DIP switches and resistors become edges. Every
other component only observes nets.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Mapping

from breadboard_sim.schemas.components import (
    ComponentRecord,
    DipSwitchRecord,
    ResistorRecord,
    WireRecord,
)

logger = logging.getLogger(__name__)

RAIL_ROWS = 30
RAIL_SIDES = 2
MATRIX_ROWS = 30
LEFT_COLUMNS = "ABCDE"
RIGHT_COLUMNS = "FGHIJ"
COLUMNS = LEFT_COLUMNS + RIGHT_COLUMNS

POWER_TAG = "PWR"
GROUND_TAG = "GND"

_MATRIX_NODE = re.compile(r"^(\d+)([A-J])$")
_RAIL_NODE = re.compile(r"^(\d+)(PWR|GND)$")
_OFFSET_NODE = re.compile(r"(\d+)([A-Za-z])")


# ─── Node Keys ───


def is_power_node(node: str) -> bool:
    return POWER_TAG in node


def is_ground_node(node: str) -> bool:
    return GROUND_TAG in node


def is_rail_node(node: str) -> bool:
    return is_power_node(node) or is_ground_node(node)


def is_valid_node(node: str | None) -> bool:
    """True for keys that name a physical contact on the breadboard."""
    if not node:
        return False
    match = _MATRIX_NODE.match(node)
    if match:
        return 1 <= int(match.group(1)) <= MATRIX_ROWS
    match = _RAIL_NODE.match(node)
    if match:
        return 1 <= int(match.group(1)) <= RAIL_ROWS * RAIL_SIDES
    return False


def node_offset(node: str, row_offset: int, column_offset: int) -> str | None:
    """Shift a matrix node key by whole rows and columns.

    Returns None when the key is malformed or the result falls off the
    board.
    """
    match = _OFFSET_NODE.search(node or "")
    if match is None:
        logger.warning("Invalid node key for offset calculation: %r", node)
        return None

    row = int(match.group(1)) + row_offset
    column = chr(ord(match.group(2).upper()) + column_offset)

    if 1 <= row <= MATRIX_ROWS and COLUMNS[0] <= column <= COLUMNS[-1]:
        return f"{row}{column}"

    logger.warning("Offset node out of range: %s%s", row, column)
    return None


# ─── Graph ───


class BreadboardGraph:
    """Undirected adjacency with a side-table of resistor-marked nodes.

    Node and neighbour order follow insertion order, which fixes the
    order in which nets are discovered.
    """

    def __init__(self) -> None:
        self._adjacency: dict[str, list[str]] = {}
        self._resistors: dict[str, list[str]] = {}

    def add_node(self, node: str) -> None:
        if node not in self._adjacency:
            self._adjacency[node] = []

    def add_edge(self, node1: str, node2: str) -> None:
        self.add_node(node1)
        self.add_node(node2)
        if node1 == node2:
            return
        if node2 not in self._adjacency[node1]:
            self._adjacency[node1].append(node2)
        if node1 not in self._adjacency[node2]:
            self._adjacency[node2].append(node1)

    def mark_resistor(self, node: str, component_id: str) -> None:
        marked = self._resistors.setdefault(node, [])
        if component_id not in marked:
            marked.append(component_id)

    def neighbors(self, node: str) -> list[str]:
        return self._adjacency.get(node, [])

    def resistors_at(self, node: str) -> list[str]:
        return self._resistors.get(node, [])

    def has_edge(self, node1: str, node2: str) -> bool:
        return node2 in self._adjacency.get(node1, ())

    def nodes(self) -> Iterator[str]:
        return iter(self._adjacency)

    def __contains__(self, node: object) -> bool:
        return node in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)


def _add_breadboard_nodes(graph: BreadboardGraph) -> None:
    for row in range(1, RAIL_ROWS * RAIL_SIDES + 1):
        graph.add_node(f"{row}{POWER_TAG}")
        graph.add_node(f"{row}{GROUND_TAG}")

    for columns in (LEFT_COLUMNS, RIGHT_COLUMNS):
        for row in range(1, MATRIX_ROWS + 1):
            for column in columns:
                graph.add_node(f"{row}{column}")


def _connect_breadboard_rows(graph: BreadboardGraph) -> None:
    for columns in (LEFT_COLUMNS, RIGHT_COLUMNS):
        for row in range(1, MATRIX_ROWS + 1):
            for left, right in zip(columns, columns[1:]):
                graph.add_edge(f"{row}{left}", f"{row}{right}")


def _connect_pair(
    graph: BreadboardGraph,
    component_id: str,
    node1: str | None,
    node2: str | None,
) -> bool:
    """Add an edge between two component pins. False if skipped."""
    if not node1 or not node2:
        logger.warning(
            "%s: missing pin (%r, %r), edge skipped", component_id, node1, node2
        )
        return False
    invalid = [n for n in (node1, node2) if not is_valid_node(n)]
    if invalid:
        logger.warning(
            "%s: unknown node(s) %s, edge skipped", component_id, ", ".join(invalid)
        )
        return False
    graph.add_edge(node1, node2)
    return True


def _register_pins(
    graph: BreadboardGraph, component_id: str, record: ComponentRecord
) -> None:
    for pin, node in record.pins().items():
        if is_valid_node(node):
            graph.add_node(node)
        else:
            logger.warning(
                "%s: pin %s names unknown node %r, left unconnected",
                component_id,
                pin,
                node,
            )


def _connect_components(
    graph: BreadboardGraph, components: Mapping[str, ComponentRecord]
) -> None:
    for component_id, record in components.items():
        if isinstance(record, WireRecord):
            _connect_pair(graph, component_id, record.start_node, record.end_node)

        elif isinstance(record, DipSwitchRecord):
            _register_pins(graph, component_id, record)
            if record.is_on:
                _connect_pair(graph, component_id, record.pin1, record.pin2)
            else:
                logger.debug("%s is open, pins stay isolated", component_id)

        elif isinstance(record, ResistorRecord):
            if _connect_pair(graph, component_id, record.pin1, record.pin2):
                graph.mark_resistor(record.pin1, component_id)
                graph.mark_resistor(record.pin2, component_id)

        else:
            _register_pins(graph, component_id, record)


def build_graph(components: Mapping[str, ComponentRecord]) -> BreadboardGraph:
    """Build the fixed breadboard adjacency and fold in placed components."""
    graph = BreadboardGraph()
    _add_breadboard_nodes(graph)
    _connect_breadboard_rows(graph)
    _connect_components(graph, components)
    return graph
