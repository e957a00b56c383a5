#!/usr/bin/env python3
"""
WIRE_COMB.PY - CSG construction of the four comb pieces

Interlocking comb that holds the wires of a cable harness in a grid.
A flat plate is perforated by a 2 x N grid of wire channels with rounded
(toroidal) edges. The plate is split through the channel centres into
pieces that peg together, so a comb of any number of columns is built by
chaining pieces:

Top view (Z up out of page), hole_count = 3:

      X ->
    +------+-----------+------+
    |      |           |      |
    |  (   |   )   (   |   )  |   ^
    |      |           |      |   | Y (row of hole_count channels)
    |  (  =|>  )   (  =|>  )  |   |
    |      |           |      |
    |  (   |   )   (   |   )  |
    |      |           |      |
    +------+-----------+------+
    PegEnd    Center     HoleEnd       => pegs (=>) at row 1 and row 2

    TwoRowSolid = the whole block, unsplit.

Pegs and peg-holes use the same pitch and slot positions, so a PegEnd
mates with a Center, a Center with another Center or a HoleEnd.

Everything here is pure: functions take CombParams and return immutable
CSG trees (see comb_csg.py). comb_kernel.py turns a tree into a solid.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from comb_csg import Solid, difference, intersection, translate, union
from comb_params import CombParams, ConfigurationError, Piece, derive_constants
from comb_patterns import row_of_cylinders, torus_hole_array
from comb_primitives import cube

logger = logging.getLogger("wire_comb.geometry")

ROW_SLOTS = (1, 2)


# =============================================================================
# ROW PLACEMENT
# =============================================================================

def row_offset(row_index: int, params: CombParams) -> float:
    """X position of the base of a peg / peg-hole row (already pad-shifted).

    Row 1 sits on the cut between the first and middle strips, row 2 on the
    cut between the middle and last strips.
    """
    if row_index not in ROW_SLOTS:
        raise ConfigurationError(f"row index must be 1 or 2, got {row_index!r}")

    d = derive_constants(params)
    return d.torus_body_diameter + d.hole_radius + (row_index - 1) * d.pitch - params.pad


def row_of_pegs_or_holes(row_index: int, cylinder_height: float,
                         cylinder_diameter: float, params: CombParams) -> Solid:
    """hole_count cylinders along Y at slot `row_index`, pointing +X.

    The first cylinder is centred in the solid strip before the first
    channel, the others in the strips between channels. Each is `pad` longer
    than asked so it never shares a face with the cut plane.
    """
    d = derive_constants(params)
    offset = row_offset(row_index, params)

    row = row_of_cylinders(
        height=cylinder_height + params.pad,
        diameter=cylinder_diameter,
        pitch=d.pitch,
        count=params.hole_count,
    )
    return translate((offset, d.torus_body_radius, d.torus_body_radius), row)


def row_of_pegs(row_index: int, params: CombParams) -> Solid:
    return row_of_pegs_or_holes(row_index, *peg_size(params), params)


def row_of_peg_holes(row_index: int, params: CombParams) -> Solid:
    return row_of_pegs_or_holes(row_index, *peg_hole_size(params), params)


def peg_size(params: CombParams) -> Tuple[float, float]:
    """(length, diameter) of a peg."""
    d = derive_constants(params)
    return d.torus_body_radius, d.torus_body_radius


def peg_hole_size(params: CombParams) -> Tuple[float, float]:
    """(depth, diameter) of a peg-hole."""
    d = derive_constants(params)
    return (d.torus_body_radius + params.peg_end_clearance,
            d.torus_body_radius + params.peg_clearance)


def peg_centers(row_index: int, params: CombParams) -> List[Tuple[float, float, float]]:
    """Base centre (x, y, z) of each peg / peg-hole in slot `row_index`."""
    d = derive_constants(params)
    x = row_offset(row_index, params)
    return [(x, d.torus_body_radius + i * d.pitch, d.torus_body_radius)
            for i in range(params.hole_count)]


# =============================================================================
# COMB FORM
# =============================================================================

def channel_centers(params: CombParams) -> List[Tuple[float, float, float]]:
    """Axis centre (x, y, z) of every wire channel, column by column."""
    d = derive_constants(params)
    first = d.torus_body_diameter + d.hole_radius
    return [(first + ix * d.pitch, first + iy * d.pitch, d.torus_body_radius)
            for ix in range(2)
            for iy in range(params.hole_count)]


def comb_form(params: CombParams) -> Solid:
    """Two-column block perforated by the 2 x hole_count channel grid."""
    d = derive_constants(params)

    block = cube((d.width, d.depth, params.thickness))

    channels = torus_hole_array(
        major_radius=d.hole_radius,
        minor_radius=d.torus_body_radius,
        pitch=d.pitch,
        count_x=2,
        count_y=params.hole_count,
        params=params,
    )
    first = d.torus_body_diameter + d.hole_radius

    return difference(block, translate((first, first, d.torus_body_radius), channels))


# =============================================================================
# PIECE CLIPPING
# =============================================================================

def clip_range(piece: Piece, params: CombParams) -> Optional[Tuple[float, float]]:
    """Nominal (x_start, x_extent) kept by a piece, None for the full block."""
    d = derive_constants(params)
    tbd = d.torus_body_diameter
    hr = d.hole_radius

    ranges = {
        Piece.PEG_END: (0.0, tbd + hr),
        Piece.CENTER: (tbd + hr, tbd + params.hole_diameter),
        Piece.HOLE_END: (2 * tbd + 3 * hr, tbd + hr),
        Piece.TWO_ROW_SOLID: None,
    }
    return ranges[Piece.parse(piece)]


def clip_box(piece: Piece, params: CombParams) -> Optional[Solid]:
    """Selection box for a piece, grown by pad on every side."""
    x_range = clip_range(piece, params)
    if x_range is None:
        return None

    d = derive_constants(params)
    x_start, x_extent = x_range
    pad = params.pad

    box = cube((x_extent + 2 * pad, d.depth + 2 * pad, params.thickness + 2 * pad))
    return translate((x_start - pad, -pad, -pad), box)


def _clipped(piece: Piece, params: CombParams) -> Solid:
    return intersection(comb_form(params), clip_box(piece, params))


def make_peg_end(params: CombParams) -> Solid:
    return union(_clipped(Piece.PEG_END, params), row_of_pegs(1, params))


def make_center(params: CombParams) -> Solid:
    holed = difference(_clipped(Piece.CENTER, params), row_of_peg_holes(1, params))
    return union(holed, row_of_pegs(2, params))


def make_hole_end(params: CombParams) -> Solid:
    return difference(_clipped(Piece.HOLE_END, params), row_of_peg_holes(2, params))


def make_two_row_solid(params: CombParams) -> Solid:
    return comb_form(params)


PIECE_BUILDERS: Dict[Piece, Callable[[CombParams], Solid]] = {
    Piece.PEG_END: make_peg_end,
    Piece.CENTER: make_center,
    Piece.HOLE_END: make_hole_end,
    Piece.TWO_ROW_SOLID: make_two_row_solid,
}


def make_piece(params: CombParams) -> Solid:
    """CSG tree of the piece selected by params.piece.

    Parameters are validated before any node is built.
    """
    derive_constants(params)

    piece = Piece.parse(params.piece)
    builder = PIECE_BUILDERS.get(piece)
    if builder is None:
        raise ConfigurationError(f"Unknown piece {params.piece!r}")

    logger.debug("Building %s: %d holes, %.3fmm holes, %.3fmm plate",
                 piece.value, params.hole_count, params.hole_diameter, params.thickness)
    return builder(params)
