# ab_map/io/build_events.py

from dataclasses import dataclass, field
from typing import Any

from ab_map.make.hooks import WarnReason


# Base type for recorded build events
@dataclass
class BuildEvent:
    run_id: str
    name: str  # stable event name


@dataclass
class SplitSummary(BuildEvent):
    raw_roads: int
    roundabouts: int
    intersections: int
    roads: int


@dataclass
class GeometryWarning(BuildEvent):
    intersection: int
    l1: int | None
    l2: int | None
    reason: WarnReason
    detail: dict[str, Any] = field(default_factory=dict)
