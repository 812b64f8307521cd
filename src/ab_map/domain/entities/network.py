# domain/entities/network.py
"""
Finalized map: roads with lanes assigned, intersections with boundary polygons
and angular road ordering, and the turn table filled in by the turn builders.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ab_map.domain.entities.geography import Line, Point, PolyLine
from ab_map.domain.entities.raw import IntersectionType


class DrivingSide(Enum):
    RIGHT = "right"
    LEFT = "left"

    @property
    def offset(self) -> int:
        """Step through angle-sorted roads to reach the neighbor sharing a corner."""
        return 1 if self is DrivingSide.RIGHT else -1

    def right_shift_line(self, line: Line, width: float) -> Line:
        return line.shift_right(width) if self is DrivingSide.RIGHT else line.shift_left(width)

    def right_shift(self, pl: PolyLine, width: float) -> PolyLine:
        return pl.shift_right(width) if self is DrivingSide.RIGHT else pl.shift_left(width)


class LaneType(Enum):
    DRIVING = "driving"
    PARKING = "parking"
    SIDEWALK = "sidewalk"
    SHOULDER = "shoulder"
    BIKING = "biking"
    BUS = "bus"

    @property
    def is_walkable(self) -> bool:
        return self in (LaneType.SIDEWALK, LaneType.SHOULDER)


class Direction(Enum):
    FWD = "fwd"
    BACK = "back"


class TurnType(Enum):
    SHARED_SIDEWALK_CORNER = "shared_sidewalk_corner"
    CROSSWALK = "crosswalk"


@dataclass(frozen=True)
class Lane:
    id: int
    parent: int
    lane_type: LaneType
    direction: Direction
    width: float
    center: PolyLine
    src_i: int
    dst_i: int

    def first_pt(self) -> Point:
        return self.center.first_pt()

    def last_pt(self) -> Point:
        return self.center.last_pt()

    def first_line(self) -> Line:
        return self.center.first_line()

    def last_line(self) -> Line:
        return self.center.last_line()

    def endpoint(self, i: int) -> Point:
        if self.src_i == i:
            return self.first_pt()
        if self.dst_i == i:
            return self.last_pt()
        raise ValueError(f"lane {self.id} doesn't touch intersection {i}")


@dataclass(frozen=True)
class Road:
    id: int
    src_i: int
    dst_i: int
    center: PolyLine
    lanes: tuple[int, ...] = ()  # left to right
    tags: dict[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Intersection:
    id: int
    point: Point
    polygon: tuple[Point, ...] = ()
    roads: tuple[int, ...] = ()  # sorted by incoming angle
    intersection_type: IntersectionType = IntersectionType.STOP_SIGN
    elevation_m: float = 0.0
    label: str | None = None


@dataclass(frozen=True, order=True)
class TurnID:
    parent: int
    src: int
    dst: int


@dataclass(frozen=True)
class Turn:
    id: TurnID
    turn_type: TurnType
    geom: PolyLine
    other_crosswalk_ids: frozenset[TurnID] = frozenset()

    @property
    def length(self) -> float:
        return self.geom.length


def turn_id(parent: int, src: int, dst: int) -> TurnID:
    return TurnID(parent, src, dst)


@dataclass
class Map:
    intersections: dict[int, Intersection] = field(default_factory=dict)
    roads: dict[int, Road] = field(default_factory=dict)
    lanes: dict[int, Lane] = field(default_factory=dict)
    turns: dict[TurnID, Turn] = field(default_factory=dict)
    buildings: Sequence[Any] = ()
    areas: Sequence[Any] = ()

    def get_i(self, i: int) -> Intersection:
        return self.intersections[i]

    def get_r(self, r: int) -> Road:
        return self.roads[r]

    def get_l(self, lane: int) -> Lane:
        return self.lanes[lane]

    def incoming_lanes(self, road: Road, i: int) -> list[Lane]:
        return [lane for lane in (self.lanes[lid] for lid in road.lanes) if lane.dst_i == i]

    def outgoing_lanes(self, road: Road, i: int) -> list[Lane]:
        return [lane for lane in (self.lanes[lid] for lid in road.lanes) if lane.src_i == i]

    def add_turns(self, turns: Iterable[Turn]) -> None:
        for t in turns:
            self.turns[t.id] = t


def sort_roads_by_incoming_angle(m: Map, i: int) -> tuple[int, ...]:
    """
    Order the roads touching `i` by the angle of their center line arriving at it.
    Meant for whatever stage fills in `Intersection.roads`.
    """

    def angle(r: Road) -> float:
        line = r.center.last_line() if r.dst_i == i else r.center.first_line().reversed()
        return line.angle_degs()

    touching = [r for r in m.roads.values() if i in (r.src_i, r.dst_i)]
    return tuple(r.id for r in sorted(touching, key=lambda r: (angle(r), r.id)))
