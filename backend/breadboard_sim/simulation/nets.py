"""Net Resolver — connected components of the breadboard graph.

Nets are discovered with an iterative depth-first traversal so deep
chains of wires never hit the recursion limit. Ids follow discovery
order, which follows the graph's node insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from breadboard_sim.schemas.simulation import NetInfo, NodeState, PowerSource
from breadboard_sim.simulation.topology import (
    BreadboardGraph,
    is_ground_node,
    is_power_node,
)


@dataclass
class Net:
    id: int
    nodes: list[str] = field(default_factory=list)
    state: NodeState = NodeState.UNINITIALIZED
    source: PowerSource = PowerSource.NONE
    source_component: str | None = None
    source_components: list[str] = field(default_factory=list)

    @property
    def has_power_rail(self) -> bool:
        return any(is_power_node(n) for n in self.nodes)

    @property
    def has_ground_rail(self) -> bool:
        return any(is_ground_node(n) for n in self.nodes)

    @property
    def has_resistor(self) -> bool:
        return bool(self.source_components)

    def add_source_component(self, component_id: str) -> None:
        if component_id not in self.source_components:
            self.source_components.append(component_id)

    def to_info(self) -> NetInfo:
        return NetInfo(
            id=self.id,
            nodes=tuple(self.nodes),
            state=self.state,
            source=self.source,
            source_component=self.source_component,
            source_components=tuple(self.source_components),
        )


def _collect_connected(
    graph: BreadboardGraph, start: str, visited: set[str]
) -> list[str]:
    connected: list[str] = []
    stack = [start]
    visited.add(start)

    while stack:
        node = stack.pop()
        connected.append(node)
        for neighbor in graph.neighbors(node):
            if neighbor not in visited:
                visited.add(neighbor)
                stack.append(neighbor)

    return connected


def identify_nets(graph: BreadboardGraph) -> list[Net]:
    """Partition every registered node into exactly one net."""
    nets: list[Net] = []
    visited: set[str] = set()

    for node in graph.nodes():
        if node not in visited:
            nets.append(
                Net(id=len(nets), nodes=_collect_connected(graph, node, visited))
            )

    return nets


def assign_initial_states(nets: list[Net], graph: BreadboardGraph) -> None:
    """Classify each net from rail membership; PWR wins over GND."""
    for net in nets:
        if net.has_power_rail:
            net.state = NodeState.HIGH
            net.source = PowerSource.RAIL
        elif net.has_ground_rail:
            net.state = NodeState.LOW
            net.source = PowerSource.RAIL
        else:
            net.state = NodeState.UNINITIALIZED
            net.source = PowerSource.NONE

        for node in net.nodes:
            for resistor_id in graph.resistors_at(node):
                net.add_source_component(resistor_id)


def resolve_nets(graph: BreadboardGraph) -> list[Net]:
    nets = identify_nets(graph)
    assign_initial_states(nets, graph)
    return nets


class NetLookup:
    """Node → net access for one evaluation run.

    The node index is built once; net states are read and written
    through it while components are evaluated.
    """

    def __init__(self, nets: list[Net]):
        self.nets = nets
        self._index: dict[str, int] = {}
        for position, net in enumerate(nets):
            for node in net.nodes:
                self._index[node] = position

    def net_for(self, node: str | None) -> Net | None:
        if not node or node not in self._index:
            return None
        return self.nets[self._index[node]]

    def is_connected(self, node: str | None) -> bool:
        return self.net_for(node) is not None

    def state_of(self, node: str | None) -> NodeState | None:
        net = self.net_for(node)
        return net.state if net else None

    def is_high(self, node: str | None) -> bool:
        return self.state_of(node) == NodeState.HIGH

    def is_low(self, node: str | None) -> bool:
        return self.state_of(node) == NodeState.LOW

    def read_level(self, node: str | None) -> bool | None:
        """Logic level seen by an input pin, honouring pull-up resistors.

        A net tied to PWR through a resistor reads HIGH while it stays
        off ground, and LOW once a closed switch also ties it to ground.
        Anything else reads its raw state; None when undetermined.
        """
        net = self.net_for(node)
        if net is None:
            return None
        if net.has_power_rail and net.has_resistor:
            return not net.has_ground_rail
        if net.state == NodeState.HIGH:
            return True
        if net.state == NodeState.LOW:
            return False
        return None

    def read_logic(self, node: str | None, default: bool = False) -> bool:
        level = self.read_level(node)
        return default if level is None else level

    def aliased(self, nodes: list[str | None]) -> bool:
        """True if any two connected nodes share a net."""
        seen: set[int] = set()
        for node in nodes:
            net = self.net_for(node)
            if net is None:
                continue
            if net.id in seen:
                return True
            seen.add(net.id)
        return False

    def drive(self, node: str | None, high: bool, component_id: str) -> bool:
        """Write an output level onto a net. True if the state changed."""
        net = self.net_for(node)
        if net is None:
            return False
        new_state = NodeState.HIGH if high else NodeState.LOW
        if net.state == new_state:
            return False
        net.state = new_state
        net.source = PowerSource.IC
        net.source_component = component_id
        return True
