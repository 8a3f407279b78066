"""Input parsing — raw description (JSON text or mapping) → BreadboardState."""

from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import ValidationError

from breadboard_sim.schemas.components import BreadboardState


class BreadboardParseError(Exception):
    """Raised when a breadboard description cannot be parsed."""

    def __init__(self, description: str, errors: str | None = None):
        self.description = description
        self.errors = errors
        super().__init__(description if errors is None else f"{description}: {errors}")


def parse_breadboard_state(
    payload: str | bytes | Mapping[str, Any] | BreadboardState,
) -> BreadboardState:
    """Validate a description of placed components."""
    if isinstance(payload, BreadboardState):
        return payload

    if isinstance(payload, (str, bytes, bytearray)):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise BreadboardParseError(f"Error parsing JSON: {e.msg}") from e
        except UnicodeDecodeError as e:
            raise BreadboardParseError(f"Error parsing JSON: {e.reason}") from e
    else:
        data = payload

    if not isinstance(data, Mapping) or "components" not in data:
        raise BreadboardParseError("Missing 'components' key in JSON")

    try:
        return BreadboardState.model_validate(dict(data))
    except ValidationError as e:
        raise BreadboardParseError(
            f"Invalid component description ({e.error_count()} error(s))",
            errors=str(e),
        ) from e
