#!/usr/bin/env python3
"""
COMB_KERNEL.PY - CadQuery evaluation of CSG trees

Turns a comb_csg tree into an OpenCascade solid (via CadQuery) and a
triangle mesh:

    tree --build_solid--> cq.Workplane --tessellate--> Mesh

Usage:
    from comb_params import CombParams, Piece
    from wire_comb import make_piece
    from comb_kernel import Tessellation, evaluate

    params = CombParams(piece=Piece.CENTER, hole_count=4)
    mesh = evaluate(make_piece(params), Tessellation.from_params(params))
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import cadquery as cq
from OCP.StdFail import StdFail_NotDone

from comb_csg import (
    BoundBox, Cube, Cylinder, Difference, Intersection, Rotate, Solid, Torus,
    Translate, Union,
)
from comb_params import CombParams, derive_constants

logger = logging.getLogger("wire_comb.kernel")

# Boolean/sweep failures surface from OCP as one of these
KERNEL_ERRORS = (StdFail_NotDone, ValueError)


class GeometryError(RuntimeError):
    """The kernel produced no solid, or an invalid one."""


@dataclass(frozen=True)
class Tessellation:
    """Mesh fineness for curved faces.

    tolerance: max chord deviation (mm)
    angular_tolerance: max angle between adjacent facets (radians)
    """
    tolerance: float = 0.01
    angular_tolerance: float = 0.1

    @classmethod
    def from_params(cls, params: CombParams) -> 'Tessellation':
        """Segments no longer than arc_resolution on the tightest curve.

        The tightest curve is the peg (radius torus_body_radius / 2) or the
        wire channel throat, whichever is smaller. A chord of length s on
        radius r deviates s^2 / 8r from the arc and spans s / r radians.
        """
        d = derive_constants(params)
        radius = min(d.torus_body_radius / 2, d.hole_radius)
        s = params.arc_resolution
        return cls(tolerance=s * s / (8 * radius), angular_tolerance=s / radius)


@dataclass
class Mesh:
    """Triangle mesh: vertex coordinates and vertex-index triples."""
    vertices: List[Tuple[float, float, float]]
    triangles: List[Tuple[int, int, int]]

    def bounds(self) -> BoundBox:
        return BoundBox.from_points(self.vertices)


# =============================================================================
# TREE EVALUATION
# =============================================================================

def _make_torus(node: Torus) -> cq.Workplane:
    # Sweep the tube circle around the global Z axis (local Y of the XZ plane)
    return (cq.Workplane("XZ")
            .moveTo(node.major_radius + node.minor_radius, 0)
            .circle(node.minor_radius)
            .revolve(360, (0, 0), (0, 1)))


def _make_rotate(child: cq.Workplane, angles) -> cq.Workplane:
    result = child
    for axis, angle in zip(((1, 0, 0), (0, 1, 0), (0, 0, 1)), angles):
        if angle:
            result = result.rotate((0, 0, 0), axis, angle)
    return result


def _evaluate_node(node: Solid, cache: dict) -> cq.Workplane:
    key = id(node)
    if key in cache:
        return cache[key]

    if isinstance(node, Cube):
        sx, sy, sz = node.size
        result = cq.Workplane("XY").box(sx, sy, sz, centered=False)

    elif isinstance(node, Cylinder):
        result = cq.Workplane("XY").cylinder(
            node.height, node.radius, centered=(True, True, node.center))

    elif isinstance(node, Torus):
        result = _make_torus(node)

    elif isinstance(node, Translate):
        result = _evaluate_node(node.child, cache).translate(node.offset)

    elif isinstance(node, Rotate):
        result = _make_rotate(_evaluate_node(node.child, cache), node.angles)

    elif isinstance(node, Union):
        result = _evaluate_node(node.children[0], cache)
        for child in node.children[1:]:
            result = result.union(_evaluate_node(child, cache))

    elif isinstance(node, Difference):
        result = _evaluate_node(node.base, cache)
        for cutter in node.cutters:
            result = result.cut(_evaluate_node(cutter, cache))

    elif isinstance(node, Intersection):
        result = _evaluate_node(node.children[0], cache)
        for child in node.children[1:]:
            result = result.intersect(_evaluate_node(child, cache))

    else:
        raise TypeError(f"Not a CSG node: {node!r}")

    cache[key] = result
    return result


def build_solid(tree: Solid) -> cq.Workplane:
    """Evaluate a CSG tree into a single valid CadQuery solid.

    Raises GeometryError if a boolean fails or the result is empty or
    invalid.
    """
    try:
        result = _evaluate_node(tree, {})
    except KERNEL_ERRORS as e:
        raise GeometryError(f"Boolean evaluation failed: {e}") from e

    if not result.vals():
        raise GeometryError("Evaluation produced no solid")

    shape = result.val()
    if not shape.isValid():
        raise GeometryError("Evaluation produced an invalid (non-manifold) solid")
    if shape.Volume() <= 0:
        raise GeometryError("Evaluation produced an empty solid")

    logger.debug("Built solid: volume %.3f mm^3, %d faces",
                 shape.Volume(), len(shape.Faces()))
    return result


def solid_bounds(solid: cq.Workplane) -> BoundBox:
    bb = solid.val().BoundingBox()
    return BoundBox(bb.xmin, bb.ymin, bb.zmin, bb.xmax, bb.ymax, bb.zmax)


def tessellate(solid: cq.Workplane, tessellation: Tessellation) -> Mesh:
    vertices, triangles = solid.val().tessellate(
        tessellation.tolerance, tessellation.angular_tolerance)
    return Mesh(
        vertices=[(v.x, v.y, v.z) for v in vertices],
        triangles=[tuple(t) for t in triangles],
    )


def evaluate(tree: Solid, tessellation: Tessellation) -> Mesh:
    """Evaluate a CSG tree into a triangle mesh."""
    mesh = tessellate(build_solid(tree), tessellation)
    logger.debug("Tessellated: %d vertices, %d triangles (tol %.4f, ang %.3f)",
                 len(mesh.vertices), len(mesh.triangles),
                 tessellation.tolerance, tessellation.angular_tolerance)
    if not mesh.triangles:
        raise GeometryError("Tessellation produced no triangles")
    return mesh
