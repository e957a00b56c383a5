#!/usr/bin/env python3
r"""
COMB_PRIMITIVES.PY - Primitive library for the wire comb

Contains:
- cube, cylinder: thin constructors over the CSG node types
- torus: radiused tube around the Z axis
- torus_hole: cutter for one radiused wire channel

The wire channels get their rounded edges from a torus. Rather than cutting
the torus itself, torus_hole() builds the complement of the torus inside a
cylinder; one difference of that cutter against the plate leaves the torus
curvature behind in the plate material.

Section of the torus_hole cutter through its axis:

    +--------------------+   z = minor + pad
     \                  /
      )                (     walls follow the torus tube
     /                  \
    +--------------------+   z = -(minor + pad)
    |<- 2(major+minor) ->|   width at the plate faces
         2 * major           width at z = 0 (channel throat)
"""

from comb_csg import Cube, Cylinder, Solid, Torus, difference
from comb_params import CombParams


def cube(size) -> Cube:
    return Cube(tuple(float(v) for v in size))


def cylinder(height, radius, center=False) -> Cylinder:
    return Cylinder(float(height), float(radius), center)


def torus(major_radius, minor_radius) -> Torus:
    """Tube of radius minor_radius around the Z axis, centered on z=0.

    The tube center sits at major_radius + minor_radius from the axis.
    """
    return Torus(float(major_radius), float(minor_radius))


def torus_hole(major_radius, minor_radius, params: CombParams) -> Solid:
    """Cutter for one radiused wire channel.

    A cylinder of radius major_radius + minor_radius, centered on the axis
    and on z=0, overlong by params.pad past the torus at each end, with the
    torus removed from it.
    """
    outer = cylinder(
        height=2 * (minor_radius + params.pad),
        radius=major_radius + minor_radius,
        center=True,
    )
    return difference(outer, torus(major_radius, minor_radius))
