#!/usr/bin/env python3
"""
COMB_VALIDATION.PY - Fit checks for wire comb parameters

Contains:
- FitViolation: Data class for fit/mating problems
- validate_fit: Check peg fit, strip width, pad size and row alignment
- check_row_alignment: Compare a peg row with its mating peg-hole row
- print_fit_report: Print formatted fit report
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from comb_csg import Solid, bounds, translate
from comb_params import CombParams, derive_constants
from wire_comb import peg_hole_size, peg_size, row_of_peg_holes, row_of_pegs

# pad must stay well below the plate thickness
MAX_PAD_FRACTION = 0.1


@dataclass
class FitViolation:
    """A fit problem found during validation."""
    constraint: str
    message: str
    severity: str = "error"  # "error" or "warning"
    actual_value: Optional[float] = None
    expected_value: Optional[float] = None


def validate_fit(params: CombParams) -> List[FitViolation]:
    """
    Check that the pieces will print and mate:
    1. Peg-hole wider than the peg (no interference fit)
    2. Peg-hole deeper than the peg (peg never bottoms out)
    3. Peg-hole fits in the solid strip between wire channels
    4. pad small relative to the plate thickness
    5. Peg and peg-hole rows at identical positions

    Returns list of violations (empty if the parameters are clean).
    """
    d = derive_constants(params)
    violations = []

    peg_length, peg_diameter = peg_size(params)
    hole_depth, hole_diameter = peg_hole_size(params)

    # ---------------------------------------------------------------------
    # 1. DIAMETER CLEARANCE
    # ---------------------------------------------------------------------
    if hole_diameter == peg_diameter:
        violations.append(FitViolation(
            constraint="peg_diameter",
            message=f"Peg and peg-hole are both Ø{peg_diameter:.2f}mm (interference fit)",
            severity="warning",
            actual_value=hole_diameter,
            expected_value=peg_diameter,
        ))

    # ---------------------------------------------------------------------
    # 2. DEPTH CLEARANCE
    # ---------------------------------------------------------------------
    if hole_depth == peg_length:
        violations.append(FitViolation(
            constraint="peg_depth",
            message=f"Peg length equals peg-hole depth ({peg_length:.2f}mm); "
                    f"pegs may bottom out before the faces meet",
            severity="warning",
            actual_value=hole_depth,
            expected_value=peg_length,
        ))

    # ---------------------------------------------------------------------
    # 3. STRIP WIDTH
    # The material between channels is torus_body_diameter wide at mid-plane
    # ---------------------------------------------------------------------
    strip = d.torus_body_diameter
    if hole_diameter >= strip:
        violations.append(FitViolation(
            constraint="strip_width",
            message=f"Peg-hole Ø{hole_diameter:.2f}mm breaks into the wire channels "
                    f"(strip between channels is {strip:.2f}mm)",
            actual_value=hole_diameter,
            expected_value=strip,
        ))

    # ---------------------------------------------------------------------
    # 4. PAD SIZE
    # ---------------------------------------------------------------------
    max_pad = params.thickness * MAX_PAD_FRACTION
    if params.pad >= max_pad:
        violations.append(FitViolation(
            constraint="pad_size",
            message=f"pad {params.pad}mm is not small against thickness "
                    f"{params.thickness}mm (limit {max_pad:.3f}mm)",
            actual_value=params.pad,
            expected_value=max_pad,
        ))

    # ---------------------------------------------------------------------
    # 5. ROW ALIGNMENT
    # Pegs of one piece must land in the peg-holes of the next
    # ---------------------------------------------------------------------
    mating_rows = [
        ("PegEnd -> Center", row_of_pegs(1, params), row_of_peg_holes(1, params)),
        ("Center -> HoleEnd", row_of_pegs(2, params), row_of_peg_holes(2, params)),
        # the next Center in a chain sits one pitch further along X
        ("Center -> Center", row_of_pegs(2, params),
         translate((d.pitch, 0, 0), row_of_peg_holes(1, params))),
    ]
    for joint, pegs, holes in mating_rows:
        violation = check_row_alignment(joint, pegs, holes)
        if violation:
            violations.append(violation)

    return violations


def row_axis(row: Solid) -> Tuple[float, float, float]:
    """(base x, mid y, axis z) of a row of X-pointing cylinders."""
    box = bounds(row)
    _, cy, cz = box.center
    return box.xmin, cy, cz


def check_row_alignment(joint: str, pegs: Solid, holes: Solid,
                        tolerance: float = 1e-6) -> Optional[FitViolation]:
    """Compare a peg row with the peg-hole row it plugs into."""
    peg_axis = row_axis(pegs)
    hole_axis = row_axis(holes)

    error = max(abs(p - h) for p, h in zip(peg_axis, hole_axis))
    if error <= tolerance:
        return None

    return FitViolation(
        constraint="row_alignment",
        message=f"{joint}: pegs at ({peg_axis[0]:.3f}, {peg_axis[1]:.3f}, {peg_axis[2]:.3f}), "
                f"peg-holes at ({hole_axis[0]:.3f}, {hole_axis[1]:.3f}, {hole_axis[2]:.3f})",
        actual_value=error,
        expected_value=0.0,
    )


def print_fit_report(violations: List[FitViolation], params: CombParams):
    """Print a formatted fit validation report."""

    d = derive_constants(params)
    peg_length, peg_diameter = peg_size(params)
    hole_depth, hole_diameter = peg_hole_size(params)

    print("\n" + "="*60)
    print("WIRE COMB FIT REPORT")
    print("="*60)

    print(f"\nParameters:")
    print(f"  Holes: {params.hole_count} per row, Ø{params.hole_diameter}mm")
    print(f"  Thickness: {params.thickness}mm, pitch {d.pitch:.2f}mm")
    print(f"  Block: {d.width:.2f} x {d.depth:.2f} x {params.thickness:.2f} mm")
    print(f"  Peg: Ø{peg_diameter:.2f} x {peg_length:.2f}mm")
    print(f"  Peg-hole: Ø{hole_diameter:.2f} x {hole_depth:.2f}mm")

    if not violations:
        print("\n✓ All fit checks PASSED")
        print("="*60 + "\n")
        return

    errors = [v for v in violations if v.severity == "error"]
    warnings = [v for v in violations if v.severity == "warning"]

    print(f"\n✗ Found {len(errors)} errors, {len(warnings)} warnings")

    for v in violations:
        marker = "✗" if v.severity == "error" else "⚠"
        print(f"  {marker} [{v.constraint}] {v.message}")

    print("="*60 + "\n")
