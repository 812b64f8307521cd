# make/crosswalks.py
from collections.abc import Iterable

from ab_map.domain.entities.geography import Line, PolyLine
from ab_map.domain.entities.network import Lane, Map, Road, Turn, TurnType, turn_id
from ab_map.domain.errors import DegenerateGeometry
from ab_map.make.hooks import BuildHooks


def get_sidewalk(lanes: Iterable[Lane]) -> Lane | None:
    for lane in lanes:
        if lane.lane_type.is_walkable:
            return lane
    return None


def crosswalk_pair(i: int, src: int, dst: int, geom: PolyLine) -> list[Turn]:
    fwd, back = turn_id(i, src, dst), turn_id(i, dst, src)
    return [
        Turn(
            id=fwd,
            turn_type=TurnType.CROSSWALK,
            geom=geom,
            other_crosswalk_ids=frozenset({back}),
        ),
        Turn(
            id=back,
            turn_type=TurnType.CROSSWALK,
            geom=geom.reversed(),
            other_crosswalk_ids=frozenset({fwd}),
        ),
    ]


def crosswalk_geom(i: int, l1: Lane, l2: Lane) -> PolyLine:
    l1_pt, l2_pt = l1.endpoint(i), l2.endpoint(i)
    # both arriving (or both leaving) means the lanes face each other across the road
    direction = -1.0 if (l1.dst_i == i) == (l2.dst_i == i) else 1.0
    # Jut out a bit into the intersection, cross over, then jut back in. Assumes sidewalks are
    # the same width.
    line = Line.new(l1_pt, l2_pt).shift_either_direction(direction * l1.width / 2.0)
    return PolyLine.deduping_new([l1_pt, line.pt1, line.pt2, l2_pt])


def make_crosswalks(i: int, l1: Lane, l2: Lane, *, hooks: BuildHooks) -> list[Turn]:
    try:
        geom = crosswalk_geom(i, l1, l2)
    except DegenerateGeometry as exc:
        hooks.warn("degenerate_crosswalk", intersection=i, l1=l1.id, l2=l2.id, error=str(exc))
        return []
    return crosswalk_pair(i, l1.id, l2.id, geom)


def make_degenerate_crosswalks(
    m: Map, i: int, r1: Road, r2: Road, *, hooks: BuildHooks
) -> list[Turn]:
    """
    Only one physical crosswalk for an intersection joining just two roads, right in the
    middle between them.
    """
    sidewalks = (
        get_sidewalk(m.incoming_lanes(r1, i)),
        get_sidewalk(m.outgoing_lanes(r1, i)),
        get_sidewalk(m.incoming_lanes(r2, i)),
        get_sidewalk(m.outgoing_lanes(r2, i)),
    )
    if any(lane is None for lane in sidewalks):
        present = [lane.id for lane in sidewalks if lane is not None]
        if present:
            hooks.warn("missing_sidewalk", intersection=i, l1=present[0], l2=present[-1])
        return []
    l1_in, l1_out, l2_in, l2_out = sidewalks

    try:
        pt1 = Line.new(l1_in.last_pt(), l2_out.first_pt()).percent_along(0.5)
        pt2 = Line.new(l1_out.first_pt(), l2_in.last_pt()).percent_along(0.5)
        if pt1 == pt2:
            hooks.warn("degenerate_midpoints", intersection=i, l1=l1_in.id, l2=l1_out.id)
            return []
        geom = PolyLine.deduping_new([l1_in.last_pt(), pt1, pt2, l1_out.first_pt()])
    except DegenerateGeometry as exc:
        hooks.warn(
            "degenerate_crosswalk", intersection=i, l1=l1_in.id, l2=l1_out.id, error=str(exc)
        )
        return []
    return crosswalk_pair(i, l1_in.id, l1_out.id, geom)
