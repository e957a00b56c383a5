import math

import pytest

cq = pytest.importorskip("cadquery")

from comb_csg import (
    Cube, Cylinder, Torus, bounds, difference, intersection, rotate, translate, union,
)
from comb_kernel import GeometryError, Mesh, Tessellation, build_solid, evaluate, solid_bounds
from comb_params import CombParams, Piece, derive_constants
from wire_comb import make_piece

TOL = 1e-2


def assert_box(box, expected_min, expected_max):
    assert (box.xmin, box.ymin, box.zmin) == pytest.approx(expected_min, abs=TOL)
    assert (box.xmax, box.ymax, box.zmax) == pytest.approx(expected_max, abs=TOL)


def test_cube_corner_at_origin():
    solid = build_solid(Cube((2.0, 3.0, 4.0)))

    assert solid.val().Volume() == pytest.approx(24.0)
    assert_box(solid_bounds(solid), (0, 0, 0), (2, 3, 4))


def test_centered_cylinder():
    solid = build_solid(Cylinder(4.0, 1.0, center=True))

    assert solid.val().Volume() == pytest.approx(math.pi * 4.0, rel=1e-3)
    assert_box(solid_bounds(solid), (-1, -1, -2), (1, 1, 2))


def test_torus_volume_and_extent():
    # tube radius 0.5 swept at 2.0 + 0.5 from the axis
    solid = build_solid(Torus(2.0, 0.5))

    expected = 2 * math.pi ** 2 * 2.5 * 0.5 ** 2
    assert solid.val().Volume() == pytest.approx(expected, rel=1e-3)
    assert_box(solid_bounds(solid), (-3, -3, -0.5), (3, 3, 0.5))


def test_rotated_translated_cylinder():
    tree = translate((1, 2, 3), rotate((0, 90, 0), Cylinder(4.0, 1.0)))
    assert_box(solid_bounds(build_solid(tree)), (1, 1, 2), (5, 3, 4))


def test_booleans():
    a = Cube((2.0, 2.0, 2.0))
    b = translate((1, 1, 1), Cube((2.0, 2.0, 2.0)))

    assert build_solid(union(a, b)).val().Volume() == pytest.approx(15.0)
    assert build_solid(intersection(a, b)).val().Volume() == pytest.approx(1.0)
    assert build_solid(difference(a, b)).val().Volume() == pytest.approx(7.0)


def test_drilled_plate():
    plate = Cube((10.0, 10.0, 2.0))
    hole = translate((5, 5, 1), Cylinder(2.2, 1.0, center=True))

    solid = build_solid(difference(plate, hole))
    assert solid.val().Volume() == pytest.approx(200 - math.pi * 2.0, rel=1e-3)


def test_empty_result_is_a_geometry_error():
    a = Cube((1.0, 1.0, 1.0))
    far = translate((10, 0, 0), Cube((1.0, 1.0, 1.0)))

    with pytest.raises(GeometryError):
        build_solid(intersection(a, far))


def test_evaluate_returns_mesh():
    mesh = evaluate(Cube((1.0, 2.0, 3.0)), Tessellation())

    assert isinstance(mesh, Mesh)
    assert len(mesh.triangles) >= 12
    assert mesh.bounds().size == pytest.approx((1, 2, 3), abs=1e-6)
    for tri in mesh.triangles:
        assert all(0 <= i < len(mesh.vertices) for i in tri)


def test_tessellation_from_arc_resolution():
    params = CombParams(thickness=5.2, hole_diameter=5.0, arc_resolution=0.5)
    tess = Tessellation.from_params(params)

    # tightest curve is the peg, radius 1.3
    assert tess.tolerance == pytest.approx(0.25 / (8 * 1.3))
    assert tess.angular_tolerance == pytest.approx(0.5 / 1.3)


def test_finer_arc_resolution_gives_more_triangles():
    tree = Cylinder(2.0, 3.0)
    coarse = evaluate(tree, Tessellation.from_params(CombParams(arc_resolution=1.0)))
    fine = evaluate(tree, Tessellation.from_params(CombParams(arc_resolution=0.2)))

    assert len(fine.triangles) > len(coarse.triangles)


# =============================================================================
# FULL PIECES
# =============================================================================

SMALL_COMB = CombParams(hole_count=2, hole_diameter=5.0, thickness=5.2)


def channel_volume(params):
    """Plate material removed by one radiused wire channel.

    The cutter cylinder holds the inner half of the torus tube; its centroid
    sits 4r / 3pi inside the tube centre (Pappus).
    """
    d = derive_constants(params)
    outer = d.hole_radius + d.torus_body_radius
    r = d.torus_body_radius
    cylinder_volume = math.pi * outer ** 2 * params.thickness
    half_tube = 2 * math.pi * (outer - 4 * r / (3 * math.pi)) * math.pi * r ** 2 / 2
    return cylinder_volume - half_tube


@pytest.mark.parametrize("piece", list(Piece))
def test_piece_builds_a_single_valid_solid(piece):
    params = SMALL_COMB.with_piece(piece)
    tree = make_piece(params)

    solid = build_solid(tree)

    assert solid.val().isValid()
    assert len(solid.solids().vals()) == 1

    expected = bounds(tree)
    assert_box(solid_bounds(solid),
               (expected.xmin, expected.ymin, expected.zmin),
               (expected.xmax, expected.ymax, expected.zmax))


def test_two_row_solid_volume():
    params = SMALL_COMB.with_piece(Piece.TWO_ROW_SOLID)
    d = derive_constants(params)

    block = d.width * d.depth * params.thickness
    expected = block - 2 * params.hole_count * channel_volume(params)

    solid = build_solid(make_piece(params))
    assert solid.val().Volume() == pytest.approx(expected, rel=1e-3)


def test_evaluate_piece_mesh_matches_solid():
    params = SMALL_COMB.with_piece(Piece.CENTER)
    tree = make_piece(params)

    mesh = evaluate(tree, Tessellation.from_params(params))

    assert len(mesh.triangles) > 100
    expected = bounds(tree)
    assert mesh.bounds().size == pytest.approx(expected.size, abs=0.05)
