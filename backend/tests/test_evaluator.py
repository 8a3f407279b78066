"""Unit tests for the Component Evaluator — passive parts and the fixed point."""

from breadboard_sim.schemas.components import ICRecord, LEDRecord, WireRecord
from breadboard_sim.schemas.simulation import (
    DipSwitchState,
    LEDState,
    NodeState,
    ResistorState,
    SevenSegmentState,
)
from breadboard_sim.simulation.evaluator import evaluate_components
from breadboard_sim.simulation.nets import resolve_nets
from breadboard_sim.simulation.topology import build_graph


# ─── Fixtures ───


def _powered_led(bench):
    """LED with its anode strip on PWR and its cathode strip on GND."""
    led_id = bench.layout.add_led("5A", "6A", color="red")
    bench.layout.add_wire("5B", "1PWR")
    bench.layout.add_wire("6B", "1GND")
    return led_id


# ═══════════════════════════════════════════════════════════
# LED
# ═══════════════════════════════════════════════════════════


class TestLED:
    def test_requires_resistor(self, bench):
        led_id = _powered_led(bench)
        state = bench.run().component_states[led_id]
        assert isinstance(state, LEDState)
        assert state.is_on is False
        assert state.error == "LED requires a resistor"
        assert state.anode_state == NodeState.HIGH
        assert state.cathode_state == NodeState.LOW
        assert state.grounded is True

    def test_resistor_on_anode_net(self, bench):
        led_id = _powered_led(bench)
        bench.layout.add_resistor("5C", "8C")
        state = bench.run().component_states[led_id]
        assert state.is_on is True
        assert state.has_resistor is True
        assert state.error is None

    def test_resistor_on_cathode_net(self, bench):
        led_id = _powered_led(bench)
        bench.layout.add_resistor("6C", "9C")
        assert bench.run().component_states[led_id].is_on is True

    def test_reverse_biased(self, bench):
        led_id = bench.layout.add_led("5A", "6A")
        bench.layout.add_wire("5B", "1GND")
        bench.layout.add_wire("6B", "1PWR")
        bench.layout.add_resistor("5C", "8C")
        state = bench.run().component_states[led_id]
        assert state.is_on is False
        assert state.error is None

    def test_floating_anode(self, bench):
        led_id = bench.layout.add_led("5A", "6A")
        bench.layout.add_wire("6B", "1GND")
        state = bench.run().component_states[led_id]
        assert state.is_on is False
        assert state.anode_state == NodeState.UNINITIALIZED
        assert state.error is None

    def test_missing_connection(self, bench):
        led_id = bench.layout.add_led("5A", "99Z")
        state = bench.run().component_states[led_id]
        assert state.is_on is False
        assert state.error == "Missing connection"
        assert state.cathode_state is None

    def test_ic_sourced_anode_needs_no_resistor(self, bench):
        _, pins = bench.ic("IC74138")
        bench.tie(pins["pin6"], high=True)
        # Address floats to 0, so O0 (pin15 at 16E) is driven HIGH
        led_id = bench.layout.add_led("16A", "25A")
        bench.tie("25B", high=False)
        state = bench.run().component_states[led_id]
        assert state.is_on is True
        assert state.has_resistor is False


# ═══════════════════════════════════════════════════════════
# Seven-Segment Display
# ═══════════════════════════════════════════════════════════


class TestSevenSegment:
    # Anchored at 3A: b=3A a=4A gnd1=5A f=6A g=7A, dp=3F c=4F gnd2=5F d=6F e=7F

    def test_segment_lit_when_grounded(self, bench):
        display = bench.layout.add_seven_segment("3A")
        bench.tie("4B", high=True)
        bench.tie("5B", high=False)
        state = bench.run().component_states[display]
        assert isinstance(state, SevenSegmentState)
        assert state.grounded is True
        assert state.segments["A"] is True
        assert [k for k, lit in state.segments.items() if lit] == ["A"]

    def test_ungrounded_display_is_dark(self, bench):
        display = bench.layout.add_seven_segment("3A")
        bench.tie("4B", high=True)
        state = bench.run().component_states[display]
        assert state.grounded is False
        assert not any(state.segments.values())

    def test_second_ground_pin(self, bench):
        display = bench.layout.add_seven_segment("3A")
        bench.tie("3G", high=True)  # dp
        bench.tie("5G", high=False)  # gnd2
        state = bench.run().component_states[display]
        assert state.grounded is True
        assert state.segments["DP"] is True

    def test_reports_all_segments(self, bench):
        display = bench.layout.add_seven_segment("3A")
        state = bench.run().component_states[display]
        assert list(state.segments) == ["A", "B", "C", "D", "E", "F", "G", "DP"]


# ═══════════════════════════════════════════════════════════
# DIP Switch and Resistor
# ═══════════════════════════════════════════════════════════


class TestDipSwitch:
    def test_diagnostics(self, bench):
        bench.layout.add_resistor("2PWR", "5E")
        switch = bench.layout.add_dip_switch("5E", is_on=False)
        bench.layout.add_wire("5J", "2GND")
        state = bench.run().component_states[switch]

        assert isinstance(state, DipSwitchState)
        assert state.is_on is False
        assert (state.pin1, state.pin2) == ("5E", "5F")
        assert state.pin1_state == NodeState.HIGH
        assert state.pin2_state == NodeState.LOW
        assert state.pin1_has_resistor is True
        assert state.pin2_has_resistor is False
        assert state.is_grounded is True

    def test_resistor_elsewhere_on_net_not_counted(self, bench):
        bench.layout.add_resistor("2PWR", "5A")
        switch = bench.layout.add_dip_switch("5E")
        state = bench.run().component_states[switch]
        assert state.pin1_has_resistor is False
        assert state.is_grounded is False


class TestResistor:
    def test_connected_pins(self, bench):
        resistor = bench.layout.add_resistor("2PWR", "7C")
        state = bench.run().component_states[resistor]
        assert isinstance(state, ResistorState)
        assert state.pin1_connected and state.pin2_connected
        assert state.pin1_state == state.pin2_state == NodeState.HIGH

    def test_unknown_pin(self, bench):
        resistor = bench.layout.add_resistor("7C", "99Z")
        state = bench.run().component_states[resistor]
        assert state.pin1_connected is True
        assert state.pin2_connected is False
        assert state.pin2_state is None


# ═══════════════════════════════════════════════════════════
# Fixed Point
# ═══════════════════════════════════════════════════════════


class TestEvaluateComponents:
    def _decoder(self):
        return {
            "ic1": ICRecord(
                ic_type="IC74138",
                pin16="17E",
                pin8="10F",
                pin6="12F",
                pin15="16E",
                pin14="15E",
            ),
            "wire1": WireRecord(start_node="17A", end_node="1PWR"),
            "wire2": WireRecord(start_node="10J", end_node="1GND"),
            "wire3": WireRecord(start_node="12J", end_node="2PWR"),
        }

    def test_wires_have_no_state(self):
        components = self._decoder()
        nets = resolve_nets(build_graph(components))
        outcome = evaluate_components(nets, components)
        assert list(outcome.component_states) == ["ic1"]

    def test_settles_after_outputs_stop_changing(self):
        components = self._decoder()
        nets = resolve_nets(build_graph(components))
        outcome = evaluate_components(nets, components)
        assert outcome.iterations == 2
        assert outcome.converged is True

    def test_mutates_nets_in_place(self):
        components = self._decoder()
        nets = resolve_nets(build_graph(components))
        evaluate_components(nets, components)
        o0 = next(net for net in nets if "16E" in net.nodes)
        o1 = next(net for net in nets if "15E" in net.nodes)
        assert o0.state == NodeState.HIGH
        assert o0.source_component == "ic1"
        assert o1.state == NodeState.LOW

    def test_stops_at_cap(self):
        components = self._decoder()
        nets = resolve_nets(build_graph(components))
        outcome = evaluate_components(nets, components, max_iterations=1)
        assert outcome.iterations == 1
        assert outcome.converged is False

    def test_passive_board_settles_in_one_pass(self):
        components = {
            "led1": LEDRecord(anode="5A", cathode="6A"),
            "wire1": WireRecord(start_node="5B", end_node="1PWR"),
        }
        nets = resolve_nets(build_graph(components))
        outcome = evaluate_components(nets, components)
        assert outcome.iterations == 1
        assert outcome.converged is True
