import math

import numpy as np
import pytest

from lumenrdr.aabb import AABB


def test_default_box_is_empty_and_invalid():
    box = AABB()
    assert np.all(box.low == math.inf)
    assert np.all(box.upper == -math.inf)
    assert not box.is_valid()


def test_from_points_takes_componentwise_bounds():
    box = AABB.from_points([1, 5, -2], [3, 0, 4], [2, 2, 2])
    assert box.low.tolist() == [1.0, 0.0, -2.0]
    assert box.upper.tolist() == [3.0, 5.0, 4.0]
    assert box.is_valid()


def test_from_points_needs_a_point():
    with pytest.raises(ValueError):
        AABB.from_points()


def test_mismatched_corners_rejected():
    with pytest.raises(ValueError):
        AABB([0, 0], [1, 1, 1])


def test_merging_into_empty_box_gives_other_box():
    box = AABB.from_points([0, 0, 0], [1, 2, 3])
    assert AABB().merged(box) == box


def test_merged_encloses_both_corners():
    a = AABB.from_points([0, 0, 0], [1, 1, 1])
    b = AABB.from_points([-1, 2, 0.5], [0.5, 3, 4])
    m = a.merged(b)
    for corner in (a.low, a.upper, b.low, b.upper):
        assert m.is_inside(corner)
    assert m.volume() >= a.volume()
    assert m.volume() >= b.volume()
    # merged does not modify its operands
    assert a == AABB.from_points([0, 0, 0], [1, 1, 1])


def test_union_point_grows_in_place():
    box = AABB()
    box.union_point([1, 2, 3])
    assert box.low.tolist() == [1.0, 2.0, 3.0]
    assert box.upper.tolist() == [1.0, 2.0, 3.0]
    box.union_point([-1, 4, 3])
    assert box.is_inside([0, 3, 3])
    assert box.low.tolist() == [-1.0, 2.0, 3.0]


def test_union_with_matches_merged():
    a = AABB.from_points([0, 0, 0], [1, 1, 1])
    b = AABB.from_points([2, -1, 0], [3, 0, 5])
    expected = a.merged(b)
    a.union_with(b)
    assert a == expected


def test_center_and_extent_relations():
    box = AABB.from_points([-2, 0, 1], [4, 6, 3])
    assert box.is_inside(box.center())
    assert np.allclose(box.low + box.extent(), box.upper)
    assert np.allclose(box.center() * 2, box.low + box.upper)
    for axis in range(3):
        assert box.dist(axis) == pytest.approx(box.extent()[axis])


def test_unit_cube_volume_and_surface():
    box = AABB.from_points([0, 0, 0], [1, 1, 1])
    assert box.volume() == pytest.approx(1.0)
    assert box.surface_area() == pytest.approx(6.0)


def test_surface_area_clips_negative_sides():
    assert AABB().surface_area() == 0.0


def test_surface_area_only_for_3d():
    with pytest.raises(ValueError):
        AABB.from_points([0, 0], [1, 1]).surface_area()


def test_is_inside_includes_faces():
    box = AABB.from_points([0, 0, 0], [1, 1, 1])
    assert box.is_inside([1, 1, 1])
    assert box.is_inside([0, 0.5, 1])
    assert not box.is_inside([1.0001, 0.5, 0.5])


def test_two_dimensional_box():
    box = AABB.empty(2)
    box.union_point([0.25, 0.5])
    box.union_point([0.75, 1.0])
    assert box.dim == 2
    assert box.is_inside([0.5, 0.75])
    assert box.volume() == pytest.approx(box.dist(0) * box.dist(1))


def test_to_string_layout():
    box = AABB.from_points([0, 1, 2], [3, 4, 5])
    text = box.to_string()
    lines = text.split("\n")
    assert lines[0] == "TAABB["
    assert lines[1].startswith("  low_bnd = ")
    assert lines[2].startswith("  upper_bnd = ")
    assert lines[3] == "]"