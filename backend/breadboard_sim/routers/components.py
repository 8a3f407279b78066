"""Component catalog router — kinds, pin names, IC pinouts, footprints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from breadboard_sim.schemas.components import (
    NON_PIN_FIELDS,
    ComponentRecord,
    DipSwitchRecord,
    ICRecord,
    ICType,
    LEDRecord,
    ResistorRecord,
    SevenSegmentRecord,
    WireRecord,
)
from breadboard_sim.services.placement import FOOTPRINTS, resolve_footprint
from breadboard_sim.simulation.ics import IC_PINOUTS

router = APIRouter()

RECORD_TYPES: dict[str, type[ComponentRecord]] = {
    "wire": WireRecord,
    "resistor": ResistorRecord,
    "dipSwitch": DipSwitchRecord,
    "led": LEDRecord,
    "sevenSegment": SevenSegmentRecord,
    "ic": ICRecord,
}


def _wire_names(record_cls: type[ComponentRecord]) -> dict[str, str]:
    """Field name → wire-format key."""
    dumped = record_cls().model_dump(by_alias=True)
    return dict(zip(record_cls.model_fields, dumped))


@router.get("/")
async def list_component_kinds():
    """Return every placeable component kind with its pin names."""
    return {
        kind: {
            "pins": [
                key
                for field, key in _wire_names(record_cls).items()
                if field not in NON_PIN_FIELDS
            ]
        }
        for kind, record_cls in RECORD_TYPES.items()
    }


@router.get("/ics")
async def list_ic_pinouts():
    """Return the pin functions of every supported IC."""
    return IC_PINOUTS


@router.get("/footprints/{kind}")
async def get_footprint(
    kind: str,
    anchor: str = Query(..., description="Anchor node, e.g. 10E"),
    ic_type: ICType | None = Query(default=None, alias="icType"),
):
    """Resolve the node under every pin of a footprint placed at an anchor."""
    if kind not in FOOTPRINTS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown footprint kind {kind!r}",
        )
    try:
        placed = resolve_footprint(kind, anchor)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    names = _wire_names(RECORD_TYPES[kind])
    pins = {names[field]: node for field, node in placed.items()}

    if ic_type is not None and kind == "ic":
        functions = IC_PINOUTS[ic_type.value]
        return {"pins": pins, "functions": {pin: functions.get(pin) for pin in pins}}
    return {"pins": pins}
