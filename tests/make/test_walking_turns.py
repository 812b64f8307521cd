# tests/make/test_walking_turns.py
from dataclasses import replace

import pytest
from map_fixtures import CENTER, reversed_twin, star_map

from ab_map.domain.entities.geography import Point, PolyLine
from ab_map.domain.entities.network import DrivingSide, TurnID, TurnType
from ab_map.make.hooks import NoopHooks
from ab_map.make.walking_turns import (
    make_all_walking_turns,
    make_walking_turns,
    neighbor_at_offset,
)


class TraceHooks(NoopHooks):
    def __init__(self):
        self.calls = []

    def turns_start(self, **kw):
        self.calls.append(("turns_start", kw))

    def turns_end(self, **kw):
        self.calls.append(("turns_end", kw))

    def warn(self, reason, **kw):
        self.calls.append(("warn", reason, kw))


def _ids(turns, turn_type=None):
    return {t.id for t in turns if turn_type is None or t.turn_type is turn_type}


# ---------- neighbor_at_offset ----------


def test_neighbor_at_offset_steps_up_for_right_hand_driving():
    assert neighbor_at_offset(DrivingSide.RIGHT, 0, 1, 4) == 1
    assert neighbor_at_offset(DrivingSide.RIGHT, 3, 1, 4) == 0  # wraps
    assert neighbor_at_offset(DrivingSide.RIGHT, 3, 3, 4) == 2


def test_neighbor_at_offset_steps_down_for_left_hand_driving():
    assert neighbor_at_offset(DrivingSide.LEFT, 0, 1, 4) == 3
    assert neighbor_at_offset(DrivingSide.LEFT, 2, 2, 4) == 0
    assert neighbor_at_offset(DrivingSide.LEFT, 1, 3, 3) == 1


def test_angular_order_from_sort_helper():
    m = star_map([90, 210, 330])
    # incoming headings: 30 (road 1), 150 (road 2), 270 (road 0)
    assert m.get_i(CENTER).roads == (1, 2, 0)


# ---------- degree 0 / 1 ----------


def test_no_roads_no_turns():
    m = star_map([0])
    lonely = replace(m.get_i(CENTER), roads=())
    assert make_walking_turns(m, lonely) == []


def test_dead_end_gets_one_corner_pair():
    m = star_map([0])
    turns = make_walking_turns(m, m.get_i(CENTER))

    assert _ids(turns) == {TurnID(CENTER, 0, 1), TurnID(CENTER, 1, 0)}
    assert all(t.turn_type is TurnType.SHARED_SIDEWALK_CORNER for t in turns)
    t = next(t for t in turns if t.id == TurnID(CENTER, 0, 1))
    assert t.geom.points == (Point(10.0, 3.0), Point(10.0, -3.0))
    assert reversed_twin(turns, t).geom == t.geom.reversed()


def test_dead_end_missing_one_side_gets_nothing():
    m = star_map([0], sidewalks=[(True, False)])
    assert make_walking_turns(m, m.get_i(CENTER)) == []


# ---------- degree 2 ----------


def test_degree_two_emits_exactly_one_crosswalk_pair():
    m = star_map([0, 180])
    turns = make_walking_turns(m, m.get_i(CENTER))

    # roads ordered (1, 0): lanes 2/3 belong to the west road
    crosswalks = [t for t in turns if t.turn_type is TurnType.CROSSWALK]
    assert _ids(crosswalks) == {TurnID(CENTER, 2, 3), TurnID(CENTER, 3, 2)}

    fwd = next(t for t in crosswalks if t.id == TurnID(CENTER, 2, 3))
    assert fwd.geom.points == (
        Point(-10.0, -3.0),
        Point(0.0, -3.0),
        Point(0.0, 3.0),
        Point(-10.0, 3.0),
    )
    assert fwd.other_crosswalk_ids == frozenset({TurnID(CENTER, 3, 2)})
    assert reversed_twin(turns, fwd).geom == fwd.geom.reversed()


def test_degree_two_corners_follow_each_side_of_the_road():
    m = star_map([0, 180])
    turns = make_walking_turns(m, m.get_i(CENTER))

    corners = _ids(turns, TurnType.SHARED_SIDEWALK_CORNER)
    assert corners == {
        TurnID(CENTER, 2, 1),
        TurnID(CENTER, 1, 2),
        TurnID(CENTER, 0, 3),
        TurnID(CENTER, 3, 0),
    }
    assert len(turns) == 6
    south = next(t for t in turns if t.id == TurnID(CENTER, 2, 1))
    assert south.geom.points == (Point(-10.0, -3.0), Point(10.0, -3.0))


def test_degree_two_missing_sidewalk_warns_and_skips_crosswalk():
    hooks = TraceHooks()
    m = star_map([0, 180], sidewalks=[(True, True), (True, False)])
    turns = make_walking_turns(m, m.get_i(CENTER), hooks=hooks)

    assert not _ids(turns, TurnType.CROSSWALK)
    warns = [c for c in hooks.calls if c[0] == "warn"]
    assert [w[1] for w in warns] == ["missing_sidewalk"]


def test_degree_two_without_any_sidewalks_is_silent():
    hooks = TraceHooks()
    m = star_map([0, 180], sidewalks=[(False, False), (False, False)])
    assert make_walking_turns(m, m.get_i(CENTER), hooks=hooks) == []
    assert not [c for c in hooks.calls if c[0] == "warn"]


def test_degree_two_coincident_midpoints_emit_no_crosswalk():
    m = star_map([0, 180])
    # Swap the west road's sidewalks over. With the east road's ending at (10, 3) and
    # starting at (10, -3), both midpoints land on the origin.
    m.lanes[2] = replace(m.lanes[2], center=PolyLine.new([Point(-50.0, 3.0), Point(-10.0, 3.0)]))
    m.lanes[3] = replace(m.lanes[3], center=PolyLine.new([Point(-10.0, -3.0), Point(-50.0, -3.0)]))
    hooks = TraceHooks()
    turns = make_walking_turns(m, m.get_i(CENTER), hooks=hooks)

    assert not _ids(turns, TurnType.CROSSWALK)
    assert "degenerate_midpoints" in [c[1] for c in hooks.calls if c[0] == "warn"]


# ---------- degree >= 3 ----------


def test_three_way_with_all_sidewalks():
    m = star_map([90, 210, 330])
    turns = make_walking_turns(m, m.get_i(CENTER))

    assert len(turns) == 12
    assert _ids(turns, TurnType.CROSSWALK) == {
        TurnID(CENTER, 2 * k + d, 2 * k + 1 - d) for k in range(3) for d in (0, 1)
    }
    # each incoming sidewalk rounds the corner onto the next road up the angular order
    assert _ids(turns, TurnType.SHARED_SIDEWALK_CORNER) == {
        TurnID(CENTER, 2, 5),
        TurnID(CENTER, 5, 2),
        TurnID(CENTER, 4, 1),
        TurnID(CENTER, 1, 4),
        TurnID(CENTER, 0, 3),
        TurnID(CENTER, 3, 0),
    }


def test_turn_pairs_are_reverse_siblings():
    m = star_map([90, 210, 330])
    turns = make_walking_turns(m, m.get_i(CENTER))

    for t in turns:
        twin = reversed_twin(turns, t)
        assert twin.turn_type is t.turn_type
        assert twin.geom == t.geom.reversed()
        if t.turn_type is TurnType.CROSSWALK:
            assert t.other_crosswalk_ids == frozenset({twin.id})
            assert t.id not in t.other_crosswalk_ids
        else:
            assert t.other_crosswalk_ids == frozenset()


def test_turn_geometry_connects_lane_endpoints():
    m = star_map([90, 210, 330])
    for t in make_walking_turns(m, m.get_i(CENTER)):
        src, dst = m.get_l(t.id.src), m.get_l(t.id.dst)
        assert t.geom.first_pt() == src.endpoint(CENTER)
        assert t.geom.last_pt() == dst.endpoint(CENTER)


def test_corner_skipped_when_sidewalks_already_meet():
    m = star_map([90, 210, 330])
    joined = m.lanes[2].last_pt()
    m.lanes[5] = replace(
        m.lanes[5], center=PolyLine.new([joined, m.lanes[5].last_pt()])
    )
    turns = make_walking_turns(m, m.get_i(CENTER))

    assert TurnID(CENTER, 2, 5) not in _ids(turns)
    assert len(turns) == 10


def test_neighbor_search_crosses_to_far_side_of_neighbor():
    # roads ordered (2, 3, 0, 1); the south road (3) only has its incoming sidewalk
    m = star_map([0, 90, 180, 270], sidewalks=[(True, True)] * 3 + [(True, False)])
    turns = make_walking_turns(m, m.get_i(CENTER))

    t = next(t for t in turns if t.id == TurnID(CENTER, 4, 6))
    assert t.turn_type is TurnType.CROSSWALK
    assert t.other_crosswalk_ids == frozenset({TurnID(CENTER, 6, 4)})


def test_neighbor_search_skips_a_road_without_sidewalks():
    m = star_map([0, 90, 180, 270], sidewalks=[(True, True)] * 3 + [(False, False)])
    turns = make_walking_turns(m, m.get_i(CENTER))

    # west road's incoming sidewalk crosses over to the east road
    assert m.get_i(CENTER).roads == (2, 3, 0, 1)
    t = next(t for t in turns if t.id == TurnID(CENTER, 4, 1))
    assert t.turn_type is TurnType.CROSSWALK


def test_neighbor_search_reaches_three_roads_away_when_four_or_more():
    m = star_map(
        [0, 90, 180, 270], sidewalks=[(False, False), (True, True), (True, True), (False, False)]
    )
    turns = make_walking_turns(m, m.get_i(CENTER))

    t = next(t for t in turns if t.id == TurnID(CENTER, 4, 3))
    assert t.turn_type is TurnType.CROSSWALK


def test_neighbor_search_gives_up_after_two_steps_on_three_way():
    m = star_map([90, 210, 330], sidewalks=[(False, False), (True, True), (False, False)])
    turns = make_walking_turns(m, m.get_i(CENTER))

    assert _ids(turns) == {TurnID(CENTER, 2, 3), TurnID(CENTER, 3, 2)}


# ---------- whole map ----------


def test_make_all_walking_turns_covers_every_intersection():
    hooks = TraceHooks()
    m = star_map([90, 210, 330])
    table = make_all_walking_turns(m, hooks=hooks)

    # 12 at the center plus a corner pair at each dead end
    assert len(table) == 18
    assert all(tid == t.id for tid, t in table.items())
    starts = [c[1]["intersection"] for c in hooks.calls if c[0] == "turns_start"]
    assert starts == [0, 1, 2, 3]
    ends = {c[1]["intersection"]: c[1]["turns"] for c in hooks.calls if c[0] == "turns_end"}
    assert ends == {0: 12, 1: 2, 2: 2, 3: 2}


def test_generation_is_deterministic():
    a = make_all_walking_turns(star_map([0, 90, 180, 270]))
    b = make_all_walking_turns(star_map([0, 90, 180, 270]))
    assert list(a) == list(b)
    assert all(a[k].geom == b[k].geom for k in a)


@pytest.mark.parametrize("side", [DrivingSide.RIGHT, DrivingSide.LEFT])
def test_corner_lengths_stay_bounded(side):
    m = star_map([0, 90, 180, 270])
    for t in make_walking_turns(m, m.get_i(CENTER), driving_side=side):
        if t.turn_type is TurnType.SHARED_SIDEWALK_CORNER:
            baseline = t.geom.first_pt().dist_to(t.geom.last_pt())
            assert t.length <= 10.0 * baseline + 1e-9
