# domain/entities/raw.py
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from ab_map.domain.entities.geography import Point


class IntersectionType(Enum):
    STOP_SIGN = "stop_sign"
    TRAFFIC_SIGNAL = "traffic_signal"
    BORDER = "border"


@dataclass(frozen=True)
class RawRoad:
    """One surveyed way, before splitting. Never mutated."""

    source_id: int
    points: tuple[Point, ...]
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if len(self.points) < 2:
            raise ValueError(f"way {self.source_id} has {len(self.points)} points, need >= 2")
        object.__setattr__(self, "points", tuple(self.points))
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def has_tag(self, key: str, value: str) -> bool:
        return self.tags.get(key) == value


@dataclass(frozen=True)
class RawIntersection:
    id: int
    point: Point
    elevation_m: float
    intersection_type: IntersectionType = IntersectionType.STOP_SIGN
    label: str | None = None


@dataclass(frozen=True)
class RoadSegment:
    """A piece of a way bounded by two intersections."""

    id: int
    source_id: int
    points: tuple[Point, ...]
    i1: int
    i2: int
    tags: Mapping[str, str] = field(default_factory=dict)


@dataclass
class RawMap:
    intersections: dict[int, RawIntersection] = field(default_factory=dict)
    roads: dict[int, RoadSegment] = field(default_factory=dict)
    # opaque pass-through
    buildings: Sequence[Any] = ()
    areas: Sequence[Any] = ()

    def intersection_at(self, pt: Point) -> RawIntersection | None:
        for i in self.intersections.values():
            if i.point == pt:
                return i
        return None

    def roads_touching(self, i_id: int) -> list[RoadSegment]:
        return [r for r in self.roads.values() if i_id in (r.i1, r.i2)]
