import math

import pytest

from comb_csg import Difference, Intersection, Torus, Union, bounds, count_nodes
from comb_params import CombParams, ConfigurationError, Piece
from wire_comb import (
    PIECE_BUILDERS, channel_centers, clip_box, clip_range, comb_form, make_piece,
    peg_centers, peg_hole_size, peg_size, row_of_peg_holes, row_of_pegs, row_offset,
)

REFERENCE = CombParams(hole_count=8, hole_diameter=5.0, thickness=5.2,
                       peg_clearance=0.3, peg_end_clearance=0.5, pad=0.01)


# =============================================================================
# COMB FORM
# =============================================================================

def test_reference_comb_form_bounding_box():
    assert bounds(comb_form(REFERENCE)).size == pytest.approx((25.6, 86.8, 5.2))


@pytest.mark.parametrize("hole_count, hole_diameter, thickness", [
    (1, 2.0, 1.0),
    (3, 4.5, 3.0),
    (12, 2.5, 3.0),
    (20, 9.0, 7.5),
])
def test_comb_form_bounding_box(hole_count, hole_diameter, thickness):
    params = CombParams(hole_count=hole_count, hole_diameter=hole_diameter,
                        thickness=thickness)
    expected = (
        2 * (hole_diameter + thickness) + thickness,
        hole_count * (hole_diameter + thickness) + thickness,
        thickness,
    )

    box = bounds(comb_form(params))
    assert (box.xmin, box.ymin, box.zmin) == (0, 0, 0)
    assert box.size == pytest.approx(expected)


@pytest.mark.parametrize("hole_count", [1, 2, 8])
def test_comb_form_has_two_columns_of_channels(hole_count):
    params = CombParams(hole_count=hole_count)
    tree = comb_form(params)

    assert count_nodes(tree, Torus) == 2 * hole_count
    assert len(channel_centers(params)) == 2 * hole_count


def test_channel_spacing():
    params = CombParams(hole_count=4, hole_diameter=3.0, thickness=2.0)
    centers = channel_centers(params)
    pitch = 5.0

    first_column = centers[:4]
    second_column = centers[4:]
    for (x0, y0, _), (x1, y1, _) in zip(first_column, first_column[1:]):
        assert x1 == pytest.approx(x0)
        assert y1 - y0 == pytest.approx(pitch)
    for (x0, y0, _), (x1, y1, _) in zip(first_column, second_column):
        assert x1 - x0 == pytest.approx(pitch)
        assert y1 == pytest.approx(y0)

    # first channel at (tbd + hr, tbd + hr, tbr)
    assert centers[0] == pytest.approx((3.5, 3.5, 1.0))


def test_channels_stay_inside_block():
    params = REFERENCE
    tree = comb_form(params)
    block = bounds(tree.base)
    cutters = tree.cutters[0]

    box = bounds(cutters)
    # the cutter cylinders poke out of the faces only by pad
    assert box.zmin == pytest.approx(-params.pad)
    assert box.zmax == pytest.approx(params.thickness + params.pad)
    assert box.xmin > block.xmin
    assert box.xmax < block.xmax
    assert box.ymin > block.ymin
    assert box.ymax < block.ymax


def test_two_row_solid_is_comb_form():
    params = REFERENCE.with_piece(Piece.TWO_ROW_SOLID)
    assert make_piece(params) == comb_form(params)


# =============================================================================
# PEGS
# =============================================================================

def test_row_offsets():
    assert row_offset(1, REFERENCE) == pytest.approx(5.2 + 2.5 - 0.01)
    assert row_offset(2, REFERENCE) == pytest.approx(5.2 + 2.5 + 10.2 - 0.01)


@pytest.mark.parametrize("row", [0, 3, -1])
def test_row_offset_rejects_unknown_slots(row):
    with pytest.raises(ConfigurationError):
        row_offset(row, REFERENCE)


def test_peg_and_peg_hole_sizes():
    assert peg_size(REFERENCE) == pytest.approx((2.6, 2.6))
    assert peg_hole_size(REFERENCE) == pytest.approx((3.1, 2.9))


@pytest.mark.parametrize("clearance", [0.01, 0.3, 1.0])
def test_pegs_always_narrower_than_holes(clearance):
    params = CombParams(peg_clearance=clearance)
    assert peg_size(params)[1] < peg_hole_size(params)[1]


def test_zero_clearance_gives_equal_diameters():
    params = CombParams(peg_clearance=0)
    assert peg_size(params)[1] == peg_hole_size(params)[1]


@pytest.mark.parametrize("clearance", [0, 0.2, 2.0])
def test_peg_never_bottoms_out(clearance):
    params = CombParams(peg_end_clearance=clearance)
    assert peg_hole_size(params)[0] >= peg_size(params)[0]


def test_peg_rows_sit_between_channels():
    params = REFERENCE
    channels = [y for _, y, _ in channel_centers(params)[:params.hole_count]]
    pegs = [y for _, y, _ in peg_centers(1, params)]

    assert len(pegs) == params.hole_count
    assert pegs[0] == pytest.approx(2.6)
    for peg_y, channel_y in zip(pegs, channels):
        # solid strip centre is half a pitch before each channel
        assert channel_y - peg_y == pytest.approx(10.2 / 2)


def test_peg_row_geometry():
    row = row_of_pegs(1, REFERENCE)
    box = bounds(row)

    assert box.xmin == pytest.approx(row_offset(1, REFERENCE))
    assert box.size[0] == pytest.approx(2.6 + 0.01)
    assert box.size[2] == pytest.approx(2.6)
    assert box.center[2] == pytest.approx(2.6)


def test_peg_hole_row_geometry():
    row = row_of_peg_holes(2, REFERENCE)
    box = bounds(row)

    assert box.xmin == pytest.approx(row_offset(2, REFERENCE))
    assert box.size[0] == pytest.approx(3.1 + 0.01)
    assert box.size[2] == pytest.approx(2.9)


# =============================================================================
# PIECES
# =============================================================================

def test_clip_ranges_tile_the_block():
    params = REFERENCE
    peg_end = clip_range(Piece.PEG_END, params)
    center = clip_range(Piece.CENTER, params)
    hole_end = clip_range(Piece.HOLE_END, params)

    assert peg_end == pytest.approx((0, 7.7))
    assert center == pytest.approx((7.7, 10.2))
    assert hole_end == pytest.approx((17.9, 7.7))
    assert hole_end[0] + hole_end[1] == pytest.approx(25.6)
    assert clip_range(Piece.TWO_ROW_SOLID, params) is None


def test_clip_box_is_padded_on_every_side():
    box = bounds(clip_box(Piece.CENTER, REFERENCE))

    assert box.xmin == pytest.approx(7.7 - 0.01)
    assert box.xmax == pytest.approx(17.9 + 0.01)
    assert (box.ymin, box.zmin) == pytest.approx((-0.01, -0.01))
    assert box.ymax == pytest.approx(86.8 + 0.01)
    assert box.zmax == pytest.approx(5.2 + 0.01)
    assert clip_box(Piece.TWO_ROW_SOLID, REFERENCE) is None


def test_peg_end_piece():
    tree = make_piece(REFERENCE.with_piece(Piece.PEG_END))

    assert isinstance(tree, Union)
    clipped, pegs = tree.children
    assert isinstance(clipped, Intersection)
    assert pegs == row_of_pegs(1, REFERENCE)

    box = bounds(tree)
    assert box.xmin == pytest.approx(0)
    assert box.xmax == pytest.approx(7.69 + 2.61)
    assert box.size[1:] == pytest.approx((86.8, 5.2))


def test_center_piece():
    tree = make_piece(REFERENCE.with_piece(Piece.CENTER))

    holed, pegs = tree.children
    assert isinstance(holed, Difference)
    assert holed.cutters == (row_of_peg_holes(1, REFERENCE),)
    assert pegs == row_of_pegs(2, REFERENCE)

    box = bounds(tree)
    assert box.xmin == pytest.approx(7.69)
    assert box.xmax == pytest.approx(17.89 + 2.61)


def test_hole_end_piece():
    tree = make_piece(REFERENCE.with_piece(Piece.HOLE_END))

    assert isinstance(tree, Difference)
    assert tree.cutters == (row_of_peg_holes(2, REFERENCE),)

    box = bounds(tree)
    assert box.xmin == pytest.approx(17.89)
    assert box.xmax == pytest.approx(25.6)


def test_mating_rows_share_positions():
    peg_end = make_piece(REFERENCE.with_piece(Piece.PEG_END))
    center = make_piece(REFERENCE.with_piece(Piece.CENTER))
    hole_end = make_piece(REFERENCE.with_piece(Piece.HOLE_END))

    peg_end_row1 = peg_end.children[1].offset
    center_holes_row1 = center.children[0].cutters[0].offset
    center_row2 = center.children[1].offset
    hole_end_row2 = hole_end.cutters[0].offset

    assert peg_end_row1 == center_holes_row1
    assert center_row2 == hole_end_row2
    assert center_row2[0] - peg_end_row1[0] == pytest.approx(10.2)


@pytest.mark.parametrize("piece", list(Piece))
def test_every_piece_builds_deterministically(piece):
    params = CombParams(hole_count=3, piece=piece)
    assert make_piece(params) == make_piece(params)


def test_every_piece_has_a_builder():
    assert set(PIECE_BUILDERS) == set(Piece)


def test_make_piece_accepts_piece_tag_strings():
    params = CombParams(hole_count=2, piece="HoleEnd")
    assert make_piece(params) == make_piece(CombParams(hole_count=2, piece=Piece.HOLE_END))


def test_make_piece_validates_first():
    with pytest.raises(ConfigurationError):
        make_piece(CombParams(hole_count=0))
    with pytest.raises(ConfigurationError):
        make_piece(CombParams(piece="Bracket"))


def test_clip_widths_cover_block():
    # the three nominal clip widths cover the block exactly once
    params = REFERENCE
    widths = [clip_range(p, params)[1] for p in (Piece.PEG_END, Piece.CENTER, Piece.HOLE_END)]
    assert math.fsum(widths) == pytest.approx(25.6)
