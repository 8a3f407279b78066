"""Placed-component records — the simulator's input description.

The wire format is the camelCase JSON the placement layer emits:

    {"components": {"wire1": {"type": "wire", "startNode": "1PWR", ...}}}

Records are immutable; a switch is toggled by replacing its record.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ComponentType(str, Enum):
    WIRE = "wire"
    RESISTOR = "resistor"
    DIP_SWITCH = "dipSwitch"
    LED = "led"
    SEVEN_SEGMENT = "sevenSegment"
    IC = "ic"


class ICType(str, Enum):
    IC7448 = "IC7448"
    IC74138 = "IC74138"
    IC74148 = "IC74148"


# Fields that carry scalars rather than node keys
NON_PIN_FIELDS = frozenset({"type", "color", "is_on", "ic_type"})


class ComponentRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def pins(self) -> dict[str, str]:
        """Pin name (wire-format key) → node key, for every connected pin."""
        dumped = self.model_dump(by_alias=True, exclude=set(NON_PIN_FIELDS))
        return {pin: node for pin, node in dumped.items() if node}


class WireRecord(ComponentRecord):
    type: Literal["wire"] = "wire"
    start_node: str | None = None
    end_node: str | None = None
    color: str | None = None


class ResistorRecord(ComponentRecord):
    type: Literal["resistor"] = "resistor"
    pin1: str | None = Field(
        default=None, validation_alias=AliasChoices("pin1", "resistorPin1")
    )
    pin2: str | None = Field(
        default=None, validation_alias=AliasChoices("pin2", "resistorPin2")
    )


class DipSwitchRecord(ComponentRecord):
    type: Literal["dipSwitch"] = "dipSwitch"
    pin1: str | None = Field(
        default=None, validation_alias=AliasChoices("pin1", "inputPin")
    )
    pin2: str | None = Field(
        default=None, validation_alias=AliasChoices("pin2", "outputPin")
    )
    is_on: bool = False


class LEDRecord(ComponentRecord):
    type: Literal["led"] = "led"
    anode: str | None = None
    cathode: str | None = None
    color: str | None = None


class SevenSegmentRecord(ComponentRecord):
    type: Literal["sevenSegment"] = "sevenSegment"
    node_a: str | None = None
    node_b: str | None = None
    node_c: str | None = None
    node_d: str | None = None
    node_e: str | None = None
    node_f: str | None = None
    node_g: str | None = None
    node_dp: str | None = Field(default=None, alias="nodeDP")
    node_gnd1: str | None = None
    node_gnd2: str | None = None


class ICRecord(ComponentRecord):
    type: Literal["ic"] = "ic"
    ic_type: str | None = None
    pin1: str | None = None
    pin2: str | None = None
    pin3: str | None = None
    pin4: str | None = None
    pin5: str | None = None
    pin6: str | None = None
    pin7: str | None = None
    pin8: str | None = None
    pin9: str | None = None
    pin10: str | None = None
    pin11: str | None = None
    pin12: str | None = None
    pin13: str | None = None
    pin14: str | None = None
    pin15: str | None = None
    pin16: str | None = None


AnyComponent = Annotated[
    Union[
        WireRecord,
        ResistorRecord,
        DipSwitchRecord,
        LEDRecord,
        SevenSegmentRecord,
        ICRecord,
    ],
    Field(discriminator="type"),
]

COMPONENT_TYPES = frozenset(t.value for t in ComponentType)

# Id prefix → component type, for records that omit "type".
# Order matters: "ic" is the shortest prefix and is tried last.
_ID_PREFIXES: tuple[tuple[str, str], ...] = (
    ("wire", ComponentType.WIRE.value),
    ("resistor", ComponentType.RESISTOR.value),
    ("dipSwitch", ComponentType.DIP_SWITCH.value),
    ("led", ComponentType.LED.value),
    ("sevenSeg", ComponentType.SEVEN_SEGMENT.value),
    ("ic", ComponentType.IC.value),
)


def _infer_type(component_id: str) -> str | None:
    for prefix, component_type in _ID_PREFIXES:
        if component_id.startswith(prefix):
            return component_type
    return None


def _normalize_record(component_id: str, record: Any) -> Any:
    """Bring a legacy record into the tagged shape."""
    # Non-string ids and non-object records are left for validation to reject
    if not isinstance(component_id, str) or not isinstance(record, dict):
        return record

    normalized = dict(record)
    declared = normalized.get("type")

    if declared == "sevenSeg":
        normalized["type"] = ComponentType.SEVEN_SEGMENT.value
    elif declared is None:
        inferred = _infer_type(component_id)
        if inferred is not None:
            normalized["type"] = inferred
    elif (
        isinstance(declared, str)
        and declared not in COMPONENT_TYPES
        and component_id.startswith("ic")
    ):
        # Legacy IC shape stores the part name under "type"
        normalized.setdefault("icType", declared)
        normalized["type"] = ComponentType.IC.value

    return normalized


class BreadboardState(BaseModel):
    """Component id → placed component, in declaration order."""

    components: dict[str, AnyComponent] = Field(...)

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_records(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        components = data.get("components")
        if not isinstance(components, dict):
            return data
        return {
            **data,
            "components": {
                cid: _normalize_record(cid, record)
                for cid, record in components.items()
            },
        }
