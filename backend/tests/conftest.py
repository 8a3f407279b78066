"""Shared fixtures: a small bench for wiring up breadboards in tests."""

import itertools

import pytest

from breadboard_sim.schemas.simulation import SimulationResult
from breadboard_sim.services.placement import BreadboardLayout
from breadboard_sim.simulation.engine import run_simulation


class Bench:
    """A breadboard layout plus helpers to tie nodes to the rails.

    Each tie uses a fresh rail row so tied nodes never share a net.
    """

    def __init__(self) -> None:
        self.layout = BreadboardLayout()
        self._rail_rows = itertools.count(20)

    def tie(self, node: str, high: bool) -> str:
        rail = f"{next(self._rail_rows)}{'PWR' if high else 'GND'}"
        return self.layout.add_wire(node, rail)

    def ic(self, ic_type: str, anchor: str = "10E", powered: bool = True):
        ic_id = self.layout.add_ic(anchor, ic_type)
        pins = self.layout.components[ic_id].pins()
        if powered:
            self.layout.add_wire(pins["pin16"], "1PWR")
            self.layout.add_wire(pins["pin8"], "1GND")
        return ic_id, pins

    def run(self, **kwargs) -> SimulationResult:
        return run_simulation(self.layout.to_state(), **kwargs)


@pytest.fixture
def bench() -> Bench:
    return Bench()
