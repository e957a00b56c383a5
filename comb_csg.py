#!/usr/bin/env python3
"""
COMB_CSG.PY - Typed CSG tree for the wire comb

Solids are immutable nodes:

    primitives:  Cube, Cylinder, Torus
    transforms:  Translate, Rotate
    booleans:    Union, Difference, Intersection

Nodes only describe geometry. comb_kernel.py evaluates a tree with
CadQuery; this module also gives analytic bounding boxes so trees can be
checked without a kernel.

Conventions (OpenSCAD-like):
- Cube has one corner at the origin and extends along +X, +Y, +Z.
- Cylinder axis is +Z; base at z=0, or centered on z=0 when center=True.
- Torus axis is +Z, centered on z=0. The tube circle of radius
  minor_radius is centered at major_radius + minor_radius from the axis,
  so the hole through it has radius major_radius.
- Rotate applies X, then Y, then Z rotations, in degrees.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Type, Union as TypingUnion

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class BoundBox:
    """Axis-aligned box given by min and max corners."""
    xmin: float
    ymin: float
    zmin: float
    xmax: float
    ymax: float
    zmax: float

    @property
    def size(self) -> Vec3:
        return (self.xmax - self.xmin, self.ymax - self.ymin, self.zmax - self.zmin)

    @property
    def center(self) -> Vec3:
        return ((self.xmin + self.xmax) / 2,
                (self.ymin + self.ymax) / 2,
                (self.zmin + self.zmax) / 2)

    def corners(self):
        for x in (self.xmin, self.xmax):
            for y in (self.ymin, self.ymax):
                for z in (self.zmin, self.zmax):
                    yield (x, y, z)

    @classmethod
    def from_points(cls, points) -> 'BoundBox':
        xs, ys, zs = zip(*points)
        return cls(min(xs), min(ys), min(zs), max(xs), max(ys), max(zs))

    def translated(self, offset: Vec3) -> 'BoundBox':
        dx, dy, dz = offset
        return BoundBox(self.xmin + dx, self.ymin + dy, self.zmin + dz,
                        self.xmax + dx, self.ymax + dy, self.zmax + dz)

    def enclose(self, other: 'BoundBox') -> 'BoundBox':
        return BoundBox(min(self.xmin, other.xmin), min(self.ymin, other.ymin),
                        min(self.zmin, other.zmin), max(self.xmax, other.xmax),
                        max(self.ymax, other.ymax), max(self.zmax, other.zmax))

    def overlap(self, other: 'BoundBox') -> Optional['BoundBox']:
        box = BoundBox(max(self.xmin, other.xmin), max(self.ymin, other.ymin),
                       max(self.zmin, other.zmin), min(self.xmax, other.xmax),
                       min(self.ymax, other.ymax), min(self.zmax, other.zmax))
        if box.xmin > box.xmax or box.ymin > box.ymax or box.zmin > box.zmax:
            return None
        return box


# =============================================================================
# NODES
# =============================================================================

@dataclass(frozen=True)
class Cube:
    size: Vec3


@dataclass(frozen=True)
class Cylinder:
    height: float
    radius: float
    center: bool = False


@dataclass(frozen=True)
class Torus:
    major_radius: float
    minor_radius: float


@dataclass(frozen=True)
class Translate:
    offset: Vec3
    child: 'Solid'


@dataclass(frozen=True)
class Rotate:
    angles: Vec3
    child: 'Solid'


@dataclass(frozen=True)
class Union:
    children: Tuple['Solid', ...]


@dataclass(frozen=True)
class Difference:
    """base minus every cutter."""
    base: 'Solid'
    cutters: Tuple['Solid', ...]


@dataclass(frozen=True)
class Intersection:
    children: Tuple['Solid', ...]


Solid = TypingUnion[Cube, Cylinder, Torus, Translate, Rotate, Union, Difference, Intersection]

PRIMITIVES = (Cube, Cylinder, Torus)


# =============================================================================
# COMPOSITION HELPERS
# =============================================================================

def translate(offset: Vec3, child: Solid) -> Translate:
    return Translate(tuple(float(v) for v in offset), child)


def rotate(angles: Vec3, child: Solid) -> Rotate:
    return Rotate(tuple(float(v) for v in angles), child)


def union(*children: Solid) -> Union:
    if not children:
        raise ValueError("union needs at least one solid")
    return Union(tuple(children))


def difference(base: Solid, *cutters: Solid) -> Difference:
    return Difference(base, tuple(cutters))


def intersection(*children: Solid) -> Intersection:
    if not children:
        raise ValueError("intersection needs at least one solid")
    return Intersection(tuple(children))


# =============================================================================
# TREE QUERIES
# =============================================================================

def children_of(node: Solid) -> Tuple[Solid, ...]:
    if isinstance(node, (Translate, Rotate)):
        return (node.child,)
    if isinstance(node, (Union, Intersection)):
        return node.children
    if isinstance(node, Difference):
        return (node.base,) + node.cutters
    if isinstance(node, PRIMITIVES):
        return ()
    raise TypeError(f"Not a CSG node: {node!r}")


def walk(node: Solid) -> Iterator[Solid]:
    """Yield every node of the tree, depth first, parents before children.

    Shared subtrees are yielded once per reference.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children_of(current)))


def count_nodes(node: Solid, node_type: Type) -> int:
    return sum(1 for n in walk(node) if isinstance(n, node_type))


def _rotate_point(point: Vec3, angles: Vec3) -> Vec3:
    x, y, z = point
    ax, ay, az = (math.radians(a) for a in angles)

    # X
    y, z = y * math.cos(ax) - z * math.sin(ax), y * math.sin(ax) + z * math.cos(ax)
    # Y
    x, z = x * math.cos(ay) + z * math.sin(ay), -x * math.sin(ay) + z * math.cos(ay)
    # Z
    x, y = x * math.cos(az) - y * math.sin(az), x * math.sin(az) + y * math.cos(az)

    return (x, y, z)


def _snap(value: float, ndigits: int = 9) -> float:
    # Keeps cos(90°) residue out of exact box sizes
    return round(value, ndigits) + 0.0


def bounds(node: Solid) -> Optional[BoundBox]:
    """Analytic bounding box of a tree, or None if it is provably empty.

    Exact for primitives, translations, unions and right-angle rotations.
    Differences keep the base box and intersections the box overlap, so
    both are conservative.
    """
    if isinstance(node, Cube):
        sx, sy, sz = node.size
        return BoundBox(0.0, 0.0, 0.0, sx, sy, sz)

    if isinstance(node, Cylinder):
        r = node.radius
        z0 = -node.height / 2 if node.center else 0.0
        return BoundBox(-r, -r, z0, r, r, z0 + node.height)

    if isinstance(node, Torus):
        outer = node.major_radius + 2 * node.minor_radius
        r = node.minor_radius
        return BoundBox(-outer, -outer, -r, outer, outer, r)

    if isinstance(node, Translate):
        box = bounds(node.child)
        return box.translated(node.offset) if box else None

    if isinstance(node, Rotate):
        box = bounds(node.child)
        if box is None:
            return None
        points = [tuple(_snap(v) for v in _rotate_point(c, node.angles))
                  for c in box.corners()]
        return BoundBox.from_points(points)

    if isinstance(node, Union):
        boxes = [b for b in (bounds(c) for c in node.children) if b is not None]
        if not boxes:
            return None
        result = boxes[0]
        for b in boxes[1:]:
            result = result.enclose(b)
        return result

    if isinstance(node, Difference):
        return bounds(node.base)

    if isinstance(node, Intersection):
        result = bounds(node.children[0])
        for child in node.children[1:]:
            if result is None:
                return None
            box = bounds(child)
            result = result.overlap(box) if box else None
        return result

    raise TypeError(f"Not a CSG node: {node!r}")
