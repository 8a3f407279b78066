from breadboard_sim.schemas.components import BreadboardState, ComponentRecord, ICType
from breadboard_sim.schemas.simulation import (
    BreadboardError,
    BreadboardErrorType,
    NetInfo,
    NodeState,
    PowerSource,
    SimulationResult,
)

__all__ = [
    "BreadboardState",
    "ComponentRecord",
    "ICType",
    "BreadboardError",
    "BreadboardErrorType",
    "NetInfo",
    "NodeState",
    "PowerSource",
    "SimulationResult",
]
