import pytest

from timings import GRAPH_WIDTH_CAP, ReverseDeps, layout_pipeline, time_scale, value_to_y
from timings.layout import BOX_HEIGHT, MARGIN, X_LINE, Y_TICK_DIST, route_edge


def test_time_scale_example():
    ts = time_scale(100, 10)
    assert ts.graph_width == 1000
    assert ts.px_per_sec == 10
    assert ts.x(5) == 50


def test_time_scale_caps_graph_width():
    ts = time_scale(1000, 10)
    assert ts.graph_width == GRAPH_WIDTH_CAP
    assert ts.px_per_sec == 4


def test_time_scale_keeps_sub_pixel_ratio_when_floor_is_zero():
    ts = time_scale(5000, 1)
    assert ts.graph_width == GRAPH_WIDTH_CAP
    assert ts.px_per_sec == pytest.approx(4096 / 5000)


def test_value_to_y():
    assert value_to_y(10, 10, 100, 10) == 10
    assert value_to_y(5, 10, 100, 10) == 60
    assert value_to_y(0, 10, 100, 10) == 110
    assert value_to_y(3, 0, 100, 10) is None


def test_layout_rows_and_boxes(chain_timings):
    layout = layout_pipeline(chain_timings, 0, 10)
    assert [u.i for u in layout.units] == [0, 1, 2, 3]

    a = layout.coords[0]
    assert (a.x, a.y, a.width, a.rmeta_x) == (0, 0, 40, 20)
    b = layout.coords[1]
    assert (b.x, b.y, b.width, b.rmeta_x) == (40, Y_TICK_DIST, 30, None)
    assert layout.coords[3].y == 3 * Y_TICK_DIST
    assert layout.graph_height == 4 * Y_TICK_DIST

    box = layout.hit_boxes[0]
    assert (box.x, box.y, box.x2, box.y2, box.index) == (X_LINE, MARGIN, X_LINE + 40, MARGIN + BOX_HEIGHT, 0)


def test_zero_duration_unit_keeps_one_pixel(chain_timings):
    layout = layout_pipeline(chain_timings, 0, 1)
    # c lasts 0.5s at 1px/s
    assert layout.coords[2].width == 1.0


def test_hit_test_bounds_are_inclusive(chain_timings):
    layout = layout_pipeline(chain_timings, 0, 10)
    x, y = X_LINE, MARGIN
    assert layout.hit_test(x, y) == 0
    assert layout.hit_test(x + 40, y + BOX_HEIGHT) == 0
    assert layout.hit_test(x - 1, y) is None
    assert layout.hit_test(x, y - 1) is None
    assert layout.hit_test(x + 41, y + 10) is None
    assert layout.hit_test(x + 10, y + BOX_HEIGHT + 1) is None


def test_route_edge_is_elbowed(chain_timings):
    layout = layout_pipeline(chain_timings, 0, 10)
    points = route_edge(40, 0, layout.coords[1])
    mid = BOX_HEIGHT / 2
    assert points == ((40, mid), (35, mid), (35, Y_TICK_DIST + mid), (40, Y_TICK_DIST + mid))


def test_edges_from_use_completion_and_rmeta_exit_points(chain_timings):
    layout = layout_pipeline(chain_timings, 0, 10)
    edges = layout.edges_from(chain_timings.unit(0))
    assert [(e.target, e.rmeta) for e in edges] == [(1, False), (2, True)]
    assert edges[0].points[0] == (40, BOX_HEIGHT / 2)    # right edge
    assert edges[1].points[0] == (20, BOX_HEIGHT / 2)    # rmeta_x
    assert edges[1].points[-1] == (20, 2 * Y_TICK_DIST + BOX_HEIGHT / 2)


def test_reverse_deps_last_writer_wins(chain_timings):
    deps = ReverseDeps.from_units(chain_timings.units)
    assert deps.unit == {1: 0, 3: 2}
    assert deps.rmeta == {2: 0}


def test_highlight_edges_include_recorded_incoming(chain_timings):
    layout = layout_pipeline(chain_timings, 0, 10)
    deps = ReverseDeps.from_units(chain_timings.units)

    edges = layout.highlight_edges(chain_timings.unit(2), deps)
    assert [(e.source, e.target, e.rmeta) for e in edges] == [(2, 3, False), (0, 2, True)]

    edges = layout.highlight_edges(chain_timings.unit(3), deps)
    assert [(e.source, e.target) for e in edges] == [(2, 3)]


def test_filter_removes_rows_boxes_and_edges(chain_timings):
    layout = layout_pipeline(chain_timings, 1.0, 10)
    deps = ReverseDeps.from_units(chain_timings.units)

    assert [u.i for u in layout.units] == [0, 1, 3]
    assert 2 not in layout.coords
    assert [b.index for b in layout.hit_boxes] == [0, 1, 3]
    # rows compact: d moves up into c's slot
    assert layout.coords[3].y == 2 * Y_TICK_DIST
    assert layout.coords[1].y == Y_TICK_DIST

    assert [e.target for e in layout.edges_from(chain_timings.unit(0))] == [1]
    assert layout.edges_from(chain_timings.unit(2)) == []
    # d's recorded predecessor is filtered out, so nothing comes in
    assert layout.edges_into(3, deps) == []


def test_filter_above_every_unit_leaves_empty_layout(chain_timings):
    layout = layout_pipeline(chain_timings, 100, 10)
    assert layout.units == []
    assert layout.hit_boxes == []
    assert layout.hit_test(X_LINE, MARGIN) is None
