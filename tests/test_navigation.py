import pytest

from balloonmap.schemas.hazards import Advisory, Geometry
from balloonmap.services.navigation import AREA_MAX_ZOOM, POINT_ZOOM, AdvisorySelection, focus_target

SQUARE = [[0, 0], [0, 2], [2, 2], [2, 0]]


def _adv(gtype, coords, aid="a"):
    return Advisory(id=aid, geometry=Geometry(type=gtype, coordinates=coords))


def test_point_target():
    target = focus_target(_adv("Point", [-97.5, 35.25]))
    assert (target.center.lat, target.center.lon) == (35.25, -97.5)
    assert target.zoom == POINT_ZOOM
    assert target.bounds is None


def test_polygon_target_uses_vertex_mean_and_bounds():
    target = focus_target(_adv("Polygon", [SQUARE]))

    assert target.center.lat == pytest.approx(1.0)
    assert target.center.lon == pytest.approx(1.0)
    (south, west), (north, east) = target.bounds
    for lon, lat in SQUARE:
        assert south <= lat <= north
        assert west <= lon <= east
    assert target.max_zoom == AREA_MAX_ZOOM
    assert target.padding_px > 0
    assert target.zoom is None


def test_polygon_mean_is_not_area_centroid():
    # the closing vertex repeats the first one and pulls the mean toward it
    ring = SQUARE + [[0, 0]]
    target = focus_target(_adv("Polygon", [ring]))
    assert target.center.lat == pytest.approx(0.8)


def test_multipolygon_uses_first_ring_of_first_polygon():
    other = [[[50, 50], [50, 60], [60, 60]]]
    target = focus_target(_adv("MultiPolygon", [[SQUARE], other]))
    assert target.center.lat == pytest.approx(1.0)
    assert target.bounds == [[0.0, 0.0], [2.0, 2.0]]


@pytest.mark.parametrize("gtype,coords", [
    ("LineString", [[0, 0], [1, 1]]),
    ("Point", []),
    ("Point", ["x", "y"]),
    ("Point", [0, 95]),
    ("Polygon", []),
    ("Polygon", [[]]),
    ("Polygon", None),
    ("MultiPolygon", [[["bad"]]]),
    ("Polygon", [[[0, 95], [0, -95], [1, 0]]]),
    ("Polygon", [[[True, False], [0, 2]]]),
    ("Polygon", [[[181, 0], [0, 0]]]),
    ("Polygon", [[[0, 0], [1]]]),
])
def test_unusable_geometry_has_no_target(gtype, coords):
    assert focus_target(_adv(gtype, coords)) is None


def test_no_geometry_has_no_target():
    assert focus_target(Advisory(id="a")) is None


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_selection_expires_after_window():
    clock = FakeClock()
    sel = AdvisorySelection(window_s=2.0, clock=clock)
    adv = _adv("Point", [10, 20], aid="alert-1")

    assert sel.current() is None
    assert sel.select(adv) is not None

    clock.now += 1.5
    current = sel.current()
    assert current.advisory_id == "alert-1"
    assert current.expires_in_s == pytest.approx(0.5)

    clock.now += 0.5
    assert sel.current() is None
    assert sel.current() is None


def test_selecting_unnavigable_advisory_clears():
    clock = FakeClock()
    sel = AdvisorySelection(clock=clock)
    sel.select(_adv("Point", [10, 20]))
    assert sel.select(_adv("LineString", [[0, 0]])) is None
    assert sel.current() is None
