# make/split_ways.py
"""
Turn surveyed ways into a graph: intersections wherever ways end or share a
point, and road segments running between consecutive intersections.

Two phases: `take_census` builds an immutable snapshot of how often every
point is used, then `split_up_roads` materializes intersections and segments
from it without touching the input.
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ab_map.app.protocols import Elevation
from ab_map.config.models import RoundaboutModel
from ab_map.domain.entities.geography import Point
from ab_map.domain.entities.raw import RawIntersection, RawMap, RawRoad, RoadSegment
from ab_map.domain.errors import InvalidTopology
from ab_map.make.hooks import BuildHooks, NoopHooks
from ab_map.make.roundabouts import RemappedRoad, RoundaboutRemap, collapse_roundabouts


@dataclass(frozen=True)
class PointCensus:
    counts: Mapping[Point, int]
    endpoints: frozenset[Point]
    # roundabout points all live on in their center instead, unless one is the center
    collapsed: frozenset[Point]

    def is_intersection(self, pt: Point) -> bool:
        if pt in self.collapsed:
            return False
        return pt in self.endpoints or self.counts.get(pt, 0) >= 2

    def intersection_points(self) -> list[Point]:
        return sorted(pt for pt in self.counts if self.is_intersection(pt))


def take_census(remap: RoundaboutRemap) -> PointCensus:
    counts: Counter[Point] = Counter()
    endpoints: set[Point] = set()
    for r in remap.roads:
        last = len(r.points) - 1
        for idx, pt in enumerate(r.points):
            counts[pt] += 1
            # All start and endpoints of ways are also intersections.
            if idx == 0 or idx == last:
                endpoints.add(pt)
            elif remap.is_roundabout_pt(pt):
                if idx == 1 and r.added_to_start:
                    continue
                if idx == last - 1 and r.added_to_end:
                    continue
                raise InvalidTopology(r.source_id, idx, len(r.points))
    return PointCensus(
        counts=MappingProxyType(dict(counts)),
        endpoints=frozenset(endpoints),
        collapsed=frozenset(remap.centers) - frozenset(remap.centers.values()),
    )


def split_up_roads(
    roads: Sequence[RawRoad],
    buildings: Sequence[Any] = (),
    areas: Sequence[Any] = (),
    *,
    elevation: Elevation,
    roundabout: RoundaboutModel | None = None,
    hooks: BuildHooks | None = None,
) -> RawMap:
    hooks = hooks or NoopHooks()

    remap = collapse_roundabouts(roads, roundabout)
    hooks.split_start(roads=len(roads), roundabouts=remap.num_roundabouts)
    census = take_census(remap)

    intersections: dict[int, RawIntersection] = {}
    pt_to_intersection: dict[Point, int] = {}
    for idx, pt in enumerate(census.intersection_points()):
        intersections[idx] = RawIntersection(
            id=idx, point=pt, elevation_m=float(elevation(pt.x, pt.y))
        )
        pt_to_intersection[pt] = idx

    m = RawMap(
        intersections=intersections,
        roads=_split(remap.roads, pt_to_intersection),
        buildings=buildings,
        areas=areas,
    )
    hooks.split_end(intersections=len(m.intersections), roads=len(m.roads))
    return m


def _split(
    roads: Sequence[RemappedRoad], pt_to_intersection: Mapping[Point, int]
) -> dict[int, RoadSegment]:
    out: dict[int, RoadSegment] = {}
    for r in roads:
        pts = [r.points[0]]
        i1 = pt_to_intersection[r.points[0]]
        for pt in r.points[1:]:
            pts.append(pt)
            i2 = pt_to_intersection.get(pt)
            if i2 is None:
                continue
            rid = len(out)
            out[rid] = RoadSegment(
                id=rid,
                source_id=r.source_id,
                points=tuple(pts),
                i1=i1,
                i2=i2,
                tags=r.source.tags,
            )
            # Start a new road
            pts, i1 = [pt], i2
    return out
