#!/usr/bin/env python3
"""
COMB_PATTERNS.PY - Repeated primitives on a grid or in a row

Contains:
- torus_hole_array: grid of wire channel cutters sharing one cutter node
- row_of_cylinders: evenly spaced cylinders along Y, pointing +X
"""

from comb_csg import Solid, Union, rotate, translate, union
from comb_params import CombParams, ConfigurationError
from comb_primitives import cylinder, torus_hole


def torus_hole_array(major_radius, minor_radius, pitch, count_x, count_y,
                     params: CombParams) -> Union:
    """count_x * count_y torus-hole cutters on a square grid.

    First cutter centered at the origin; the grid extends along +X and +Y
    with spacing `pitch`. Every instance references the same cutter node.
    """
    if count_x < 1 or count_y < 1:
        raise ConfigurationError(
            f"torus hole array needs at least 1x1 instances, got {count_x}x{count_y}")

    cutter = torus_hole(major_radius, minor_radius, params)

    return union(*[
        translate((ix * pitch, iy * pitch, 0), cutter)
        for ix in range(count_x)
        for iy in range(count_y)
    ])


def row_of_cylinders(height, diameter, pitch, count) -> Solid:
    """`count` cylinders lying along +X, spaced by `pitch` along +Y.

    Each cylinder has its base on the x=0 plane and its axis at z=0; the
    first one is on the origin.
    """
    if count < 1:
        raise ConfigurationError(f"row of cylinders needs count >= 1, got {count}")

    # Z axis -> X axis
    lying = rotate((0, 90, 0), cylinder(height, diameter / 2))

    return union(*[translate((0, i * pitch, 0), lying) for i in range(count)])
