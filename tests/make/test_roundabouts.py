# tests/make/test_roundabouts.py
import pytest

from ab_map.app.protocols import FlatElevation
from ab_map.config.models import RoundaboutModel
from ab_map.domain.entities.geography import Point
from ab_map.domain.entities.raw import RawRoad
from ab_map.domain.errors import InvalidTopology, MapBuildError
from ab_map.make.roundabouts import collapse_roundabouts
from ab_map.make.split_ways import split_up_roads

RING = [(0.0, 1.0), (1.0, 0.0), (0.0, -1.0), (-1.0, 0.0)]


def _road(source_id, *pts, **tags):
    return RawRoad(source_id=source_id, points=tuple(Point(*p) for p in pts), tags=tags)


def _roundabout_roads():
    return [
        _road(100, *RING, junction="roundabout"),
        _road(1, (0.0, 1.0), (0.0, 5.0)),  # leaves the north point
        _road(2, (5.0, 0.0), (1.0, 0.0)),  # arrives at the east point
        _road(3, (0.0, -1.0), (0.0, -5.0)),
    ]


def test_collapse_maps_every_ring_point_to_center():
    remap = collapse_roundabouts(_roundabout_roads())

    assert remap.num_roundabouts == 1
    assert set(remap.centers) == {Point(*p) for p in RING}
    assert set(remap.centers.values()) == {Point(0.0, 0.0)}
    assert [r.source_id for r in remap.roads] == [1, 2, 3]


def test_collapse_inserts_center_at_the_touching_end():
    remap = collapse_roundabouts(_roundabout_roads())
    north, east, _ = remap.roads

    assert north.points == (Point(0.0, 0.0), Point(0.0, 1.0), Point(0.0, 5.0))
    assert north.added_to_start and not north.added_to_end
    assert east.points == (Point(5.0, 0.0), Point(1.0, 0.0), Point(0.0, 0.0))
    assert east.added_to_end and not east.added_to_start


def test_roundabout_becomes_one_intersection():
    m = split_up_roads(_roundabout_roads(), elevation=FlatElevation())

    assert [i.point for i in m.intersections.values()] == [
        Point(0.0, -5.0),
        Point(0.0, 0.0),
        Point(0.0, 5.0),
        Point(5.0, 0.0),
    ]
    center = m.intersection_at(Point(0.0, 0.0)).id
    assert len(m.roads) == 3
    assert len(m.roads_touching(center)) == 3
    # nothing left on the ring itself
    for p in RING:
        assert m.intersection_at(Point(*p)) is None
    assert all(r.source_id != 100 for r in m.roads.values())


def test_ring_point_shared_by_two_ways_is_not_an_intersection():
    roads = [
        _road(100, *RING, junction="roundabout"),
        _road(1, (0.0, 1.0), (3.0, 3.0)),
        _road(2, (0.0, 1.0), (-3.0, 3.0)),
    ]
    m = split_up_roads(roads, elevation=FlatElevation())

    assert {i.point for i in m.intersections.values()} == {
        Point(-3.0, 3.0),
        Point(0.0, 0.0),
        Point(3.0, 3.0),
    }


def test_way_through_a_roundabout_point_is_fatal():
    roads = _roundabout_roads() + [_road(4, (-5.0, 1.0), (-1.0, 0.0), (-5.0, -1.0))]
    with pytest.raises(InvalidTopology) as exc:
        split_up_roads(roads, elevation=FlatElevation())

    err = exc.value
    assert isinstance(err, MapBuildError)
    assert (err.source_id, err.index, err.length) == (4, 1, 3)
    assert "way 4 hits a roundabout not at an endpoint. idx 1 of length 3" in str(err)


def test_roundabout_tag_is_configurable():
    roads = [
        _road(100, *RING, junction="circular"),
        _road(1, (0.0, 1.0), (0.0, 5.0)),
    ]
    assert collapse_roundabouts(roads).num_roundabouts == 0

    cfg = RoundaboutModel(value="circular")
    m = split_up_roads(roads, elevation=FlatElevation(), roundabout=cfg)
    assert {i.point for i in m.intersections.values()} == {Point(0.0, 0.0), Point(0.0, 5.0)}


def test_center_landing_on_a_ring_vertex_is_still_an_intersection():
    # three collinear points: the mean is the middle one
    roads = [
        _road(100, (-1.0, 0.0), (0.0, 0.0), (1.0, 0.0), junction="roundabout"),
        _road(1, (-1.0, 0.0), (-5.0, 0.0)),
    ]
    m = split_up_roads(roads, elevation=FlatElevation())

    assert [i.point for i in m.intersections.values()] == [Point(-5.0, 0.0), Point(0.0, 0.0)]
    (road,) = m.roads.values()
    assert road.points == (Point(0.0, 0.0), Point(-1.0, 0.0), Point(-5.0, 0.0))
    assert (road.i1, road.i2) == (1, 0)


def test_way_ending_on_the_center_vertex_gets_no_second_copy():
    roads = [
        _road(100, (-1.0, 0.0), (0.0, 0.0), (1.0, 0.0), junction="roundabout"),
        _road(1, (0.0, 5.0), (0.0, 0.0)),
    ]
    remap = collapse_roundabouts(roads)
    (way,) = remap.roads
    assert way.points == (Point(0.0, 5.0), Point(0.0, 0.0))
    assert not way.added_to_end

    m = split_up_roads(roads, elevation=FlatElevation())
    assert len(m.roads) == 1
    assert m.intersection_at(Point(0.0, 0.0)) is not None
