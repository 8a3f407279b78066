"""Simulation output schemas — nets, per-component states, errors."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NodeState(str, Enum):
    LOW = "LOW"
    HIGH = "HIGH"
    UNINITIALIZED = "UNINITIALIZED"


class PowerSource(str, Enum):
    RAIL = "RAIL"
    IC = "IC"
    NONE = "NONE"


class ErrorSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class BreadboardErrorType(str, Enum):
    PARSE_ERROR = "ParseError"
    SHORT_CIRCUIT = "ShortCircuit"
    MULTIPLE_DRIVERS = "MultipleDrivers"
    SIMULATION_ERROR = "SimulationError"


class _ResultModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class BreadboardError(_ResultModel):
    type: BreadboardErrorType
    severity: ErrorSeverity = ErrorSeverity.ERROR
    description: str
    affected_nodes: tuple[str, ...] = ()
    involved_components: tuple[str, ...] = ()
    suggestion: str | None = None


class NetInfo(_ResultModel):
    id: int
    nodes: tuple[str, ...]
    state: NodeState
    source: PowerSource
    source_component: str | None = None
    source_components: tuple[str, ...] = ()


# ─── Component States ───


class ResistorState(_ResultModel):
    kind: Literal["resistor"] = "resistor"
    pin1: str | None = None
    pin2: str | None = None
    pin1_connected: bool = False
    pin2_connected: bool = False
    pin1_state: NodeState | None = None
    pin2_state: NodeState | None = None


class DipSwitchState(_ResultModel):
    kind: Literal["dipSwitch"] = "dipSwitch"
    is_on: bool
    pin1: str | None = None
    pin2: str | None = None
    pin1_state: NodeState | None = None
    pin2_state: NodeState | None = None
    is_grounded: bool = False
    pin1_has_resistor: bool = False
    pin2_has_resistor: bool = False


class LEDState(_ResultModel):
    kind: Literal["led"] = "led"
    is_on: bool
    anode_state: NodeState | None = None
    cathode_state: NodeState | None = None
    grounded: bool = False
    has_resistor: bool = False
    error: str | None = None


class SevenSegmentState(_ResultModel):
    kind: Literal["sevenSegment"] = "sevenSegment"
    segments: dict[str, bool]
    grounded: bool = False


class _ICState(_ResultModel):
    ic_type: str | None = None
    status: str
    has_vcc: bool = True
    has_gnd: bool = True
    error: str | None = None


class ICInactiveState(_ICState):
    """An IC that did not evaluate: unpowered or of an unknown part."""

    kind: Literal["icInactive"] = "icInactive"


class _ICLogicState(_ICState):
    input_has_conflict: bool = False
    output_has_conflict: bool = False


class IC7448State(_ICLogicState):
    kind: Literal["ic7448"] = "ic7448"
    inputs: dict[str, bool]
    missing_inputs: tuple[str, ...] = ()
    control: dict[str, bool]
    value: int
    segments: dict[str, bool]
    # Output line levels (True = HIGH), active-LOW
    outputs: dict[str, bool]


class IC74138State(_ICLogicState):
    kind: Literal["ic74138"] = "ic74138"
    address: dict[str, bool]
    enable: dict[str, bool]
    enabled: bool
    selected: int | None = None
    outputs: dict[str, bool]


class IC74148State(_ICLogicState):
    kind: Literal["ic74148"] = "ic74148"
    enable_in: bool
    inputs: dict[str, bool] = Field(default_factory=dict)
    highest_priority: int = -1
    # Output line levels (True = HIGH); empty when nothing was driven
    outputs: dict[str, bool] = Field(default_factory=dict)


ComponentState = Annotated[
    Union[
        ResistorState,
        DipSwitchState,
        LEDState,
        SevenSegmentState,
        ICInactiveState,
        IC7448State,
        IC74138State,
        IC74148State,
    ],
    Field(discriminator="kind"),
]


class SimulationResult(_ResultModel):
    component_states: dict[str, ComponentState] = Field(default_factory=dict)
    nets: tuple[NetInfo, ...] = ()
    errors: tuple[BreadboardError, ...] = ()
    iterations: int = 0
    converged: bool = True

    def errors_of_type(self, error_type: BreadboardErrorType) -> list[BreadboardError]:
        return [e for e in self.errors if e.type == error_type]

    def net_of(self, node: str) -> NetInfo | None:
        """Return the net a node belongs to, if any."""
        for net in self.nets:
            if node in net.nodes:
                return net
        return None
