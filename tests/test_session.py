import math

import pytest

from dietoy import (
    DegenerateQuadError,
    DieDescription,
    DieSession,
    EmptyIndexError,
    EngineConfig,
    InvalidSelectionError,
    QuadOrderingError,
    StaleDerivedStateError,
)

SQUARE = [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]


def _session_with_region(points=SQUARE):
    session = DieSession(EngineConfig())
    for point in points:
        session.add_or_pick_bounds_point(point)
    session.rebuild_region()
    return session


def test_bounds_clicks_are_canonicalized_on_rebuild():
    session = DieSession()
    for point in [(100.0, 100.0), (0.0, 0.0), (0.0, 100.0), (100.0, 0.0)]:
        session.add_or_pick_bounds_point(point)

    session.rebuild_region()

    assert session.boundary_polygon() == tuple(SQUARE)
    assert session.has_region


def test_fifth_click_far_from_bounds_is_ignored():
    session = _session_with_region()
    assert session.add_or_pick_bounds_point((50.0, 50.0)) is None
    assert len(session.bounds_points) == 4


def test_click_near_bounds_point_picks_it_for_dragging():
    session = _session_with_region()

    picked = session.add_or_pick_bounds_point((98.0, 3.0))

    assert picked == 1
    assert session.active_bounds_point == 1
    assert session.drag_bounds_point((110.0, -5.0))
    session.release_bounds_point()
    assert session.bounds_points[1] == (110.0, -5.0)
    assert not session.drag_bounds_point((0.0, 0.0))


def test_dragging_makes_homography_stale():
    session = _session_with_region()
    session.add_or_pick_bounds_point((1.0, 1.0))
    session.drag_bounds_point((5.0, 5.0))

    with pytest.raises(StaleDerivedStateError):
        session.homography

    session.rebuild_region()
    assert session.homography.to_die_space((5.0, 5.0)) == pytest.approx((0.0, 0.0), abs=1e-12)
    assert session.active_bounds_point == 0


def test_collinear_bounds_leave_no_region():
    session = DieSession()
    session.set_bounds([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0), (30.0, 0.0)])

    with pytest.raises(DegenerateQuadError):
        session.rebuild_region()
    assert not session.has_region
    with pytest.raises(DegenerateQuadError):
        session.rebuild_grid()
    with pytest.raises(DegenerateQuadError):
        session.bit_locations()


def test_slot_collision_surfaces_as_ordering_error():
    session = DieSession()
    session.set_bounds([(0.0, 0.0), (100.0, 0.0), (10.0, 10.0), (0.0, 100.0)])
    with pytest.raises(QuadOrderingError):
        session.rebuild_region()


def test_incomplete_bounds_have_no_region():
    session = DieSession()
    session.add_or_pick_bounds_point((0.0, 0.0))
    with pytest.raises(DegenerateQuadError):
        session.rebuild_region()
    session.refresh()
    assert not session.has_region
    assert session.slice_lines() == []


def test_add_slice_converts_click_to_die_offset():
    session = _session_with_region()

    assert session.add_slice((30.0, 60.0), 'horizontal') == pytest.approx(0.3)
    assert session.add_slice((30.0, 60.0), 'vertical') == pytest.approx(0.6)
    assert session.add_slice((130.0, 60.0), 'vertical') is None
    assert len(session.horizontal) == 1
    assert len(session.vertical) == 1


def test_select_slice_toggles_and_select_more_extends():
    session = _session_with_region()
    session.horizontal.replace([0.2, 0.5])

    assert session.select_slice((52.0, 40.0), 'horizontal') == 1
    assert session.horizontal.selected_indices == (1,)
    assert session.select_slice((51.0, 70.0), 'horizontal') == 1
    assert session.horizontal.selected_indices == ()

    assert session.select_more_slices((21.0, 10.0), 'horizontal') == 0
    assert session.select_more_slices((21.0, 10.0), 'horizontal') == 0
    assert session.horizontal.selected_indices == (0,)

    assert session.select_slice((35.0, 40.0), 'horizontal') is None


def test_copy_and_paste_at_cursor():
    session = _session_with_region()
    session.vertical.replace([0.2, 0.3, 0.45])
    session.vertical.extend_select(1)
    session.vertical.extend_select(2)

    copied = session.copy_slices('vertical')
    placed = session.paste_slices((10.0, 60.0), 'vertical')

    assert copied == pytest.approx([0.1, 0.15])
    assert placed == pytest.approx([0.6, 0.75])
    assert len(session.vertical) == 5


def test_copy_from_first_slice_is_rejected():
    session = _session_with_region()
    session.horizontal.replace([0.2, 0.3])
    session.horizontal.extend_select(0)
    with pytest.raises(InvalidSelectionError):
        session.copy_slices('horizontal')


def test_delete_and_deselect_slices():
    session = _session_with_region()
    session.horizontal.replace([0.2, 0.3, 0.4])
    session.vertical.replace([0.5])
    session.horizontal.extend_select(1)
    session.vertical.extend_select(0)

    session.deselect_slices('vertical')
    assert session.delete_slices('horizontal') == 1
    assert session.delete_slices('vertical') == 0
    assert session.horizontal.values == (0.2, 0.4)


def test_grid_and_nearest_bit():
    session = _session_with_region()
    session.add_slice((50.0, 50.0), 'horizontal')
    session.add_slice((50.0, 25.0), 'vertical')

    points = session.rebuild_grid()

    assert len(points) == 9
    assert session.grid_shape() == (3, 3)
    index, distance = session.nearest_bit((52.0, 27.0))
    assert index == 4
    assert session.bit_cell(index) == (1, 1)
    assert math.isclose(distance, math.hypot(2.0, 2.0), rel_tol=1e-9)


def test_nearest_before_grid_build():
    session = _session_with_region()
    with pytest.raises(EmptyIndexError):
        session.nearest_bit((0.0, 0.0))


def test_grid_goes_stale_after_edits():
    session = _session_with_region()
    session.horizontal.replace([0.5])
    session.rebuild_grid()

    session.add_slice((20.0, 20.0), 'horizontal')

    with pytest.raises(StaleDerivedStateError):
        session.bit_locations()
    with pytest.raises(StaleDerivedStateError):
        session.nearest_bit((0.0, 0.0))

    session.rebuild_grid()
    assert len(session.bit_locations()) == 8


def test_refresh_rebuilds_region_and_grid():
    session = DieSession()
    session.set_bounds(SQUARE)
    session.horizontal.replace([0.5])
    session.vertical.replace([0.25])

    session.refresh()

    assert session.has_region
    assert session.grid_shape() == (3, 3)
    assert session.bit_locations()[4] == pytest.approx((50.0, 25.0))

    session.set_bounds([(10.0, 0.0), (110.0, 0.0), (110.0, 100.0), (10.0, 100.0)])
    with pytest.raises(StaleDerivedStateError):
        session.bit_locations()

    session.refresh()

    assert session.bit_locations()[4] == pytest.approx((60.0, 25.0))
    assert session.nearest_bit((61.0, 25.0))[0] == 4


def test_grid_goes_stale_after_region_rebuild():
    session = _session_with_region()
    session.rebuild_grid()
    session.rebuild_region()
    with pytest.raises(StaleDerivedStateError):
        session.bit_locations()


def test_selection_does_not_invalidate_grid():
    session = _session_with_region()
    session.horizontal.replace([0.5])
    session.rebuild_grid()
    session.horizontal.toggle_select(0)
    assert len(session.bit_locations()) == 6


def test_slice_lines_follow_tool_and_selection():
    config = EngineConfig(selected_color=(1, 2, 3), unselected_color=(4, 5, 6))
    session = DieSession(config)
    session.set_bounds(SQUARE)
    session.rebuild_region()
    session.horizontal.replace([0.25, 0.75])
    session.vertical.replace([0.5])
    session.horizontal.toggle_select(1)

    navigation = session.slice_lines('navigation')
    horizontal_only = session.slice_lines('slice-horizontal')
    vertical_only = session.slice_lines('slice-vertical')

    assert [(line.axis, line.index) for line in navigation] == [
        ('horizontal', 0),
        ('horizontal', 1),
        ('vertical', 0),
    ]
    assert [line.color for line in horizontal_only] == [(4, 5, 6), (1, 2, 3)]
    assert [line.selected for line in vertical_only] == [False]
    assert session.slice_lines('bit-display') == []
    assert vertical_only[0].segment.p1 == pytest.approx((0.0, 50.0))
    with pytest.raises(ValueError):
        session.slice_lines('lasso')


def test_clear_bounds_drops_everything():
    session = _session_with_region()
    session.horizontal.replace([0.5])
    session.rebuild_grid()

    session.clear_bounds()

    assert session.bounds_points == ()
    assert len(session.horizontal) == 0
    assert not session.has_region
    with pytest.raises(DegenerateQuadError):
        session.nearest_bit((0.0, 0.0))


def test_description_round_trip_keeps_stored_order():
    session = _session_with_region()
    session.horizontal.replace([0.7, 0.1])
    session.vertical.replace([0.4])

    description = session.to_description()

    assert description.rom_bounds == SQUARE
    assert description.horizontal_slices == [0.7, 0.1]

    restored = DieSession.from_description(description)
    assert restored.horizontal.values == (0.1, 0.7)
    assert len(restored.bit_locations()) == 12


def test_loading_partial_bounds_keeps_slices_without_region():
    session = DieSession.from_description(
        DieDescription(rom_bounds=[(0.0, 0.0), (5.0, 5.0)], horizontal_slices=[0.3])
    )
    assert session.horizontal.values == (0.3,)
    assert not session.has_region
    with pytest.raises(DegenerateQuadError):
        session.bit_locations()


FLAT_BOUNDS = [(0.0, 0.0), (10.0, 0.0), (20.0, 0.0), (30.0, 0.0)]


def test_loading_degenerate_bounds_replaces_slices_without_region():
    session = _session_with_region()
    session.horizontal.replace([0.2, 0.4])
    session.rebuild_grid()
    session.clipboard = [0.1]

    session.load_description(
        DieDescription(rom_bounds=FLAT_BOUNDS, horizontal_slices=[0.9], vertical_slices=[0.5])
    )

    assert session.bounds_points == tuple(FLAT_BOUNDS)
    assert session.horizontal.values == (0.9,)
    assert session.vertical.values == (0.5,)
    assert session.clipboard == []
    assert not session.has_region
    with pytest.raises(DegenerateQuadError):
        session.bit_locations()


def test_from_description_with_degenerate_bounds_keeps_slices():
    session = DieSession.from_description(
        DieDescription(rom_bounds=FLAT_BOUNDS, horizontal_slices=[0.9], vertical_slices=[0.5])
    )

    assert session.horizontal.values == (0.9,)
    assert session.vertical.values == (0.5,)
    assert not session.has_region
