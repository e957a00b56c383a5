#!/usr/bin/env python3
"""
COMB_BOM.PY - Chain planning and bill of materials for wire combs

Contains:
- plan_chain: Pieces needed for a comb holding a given number of wire columns
- generate_bom: Count pieces, wire channels and pegs for a chain
- print_bom: Print formatted BOM to console

A chain always starts with a PegEnd and finishes with a HoleEnd. Every
joint between two pieces closes one column of wire channels, so
PegEnd + k x Center + HoleEnd holds k + 1 columns.
"""

from collections import Counter
from typing import Dict, List

from comb_params import CombParams, ConfigurationError, Piece, derive_constants


def plan_chain(columns: int, prefer_solid: bool = True) -> List[Piece]:
    """Pieces, in assembly order, for a comb with `columns` wire columns."""
    if isinstance(columns, bool) or not isinstance(columns, int) or columns < 1:
        raise ConfigurationError(f"columns must be an integer >= 1, got {columns!r}")

    if columns == 2 and prefer_solid:
        return [Piece.TWO_ROW_SOLID]

    return [Piece.PEG_END] + [Piece.CENTER] * (columns - 1) + [Piece.HOLE_END]


def _pegs_on(piece: Piece) -> int:
    return {Piece.PEG_END: 1, Piece.CENTER: 1}.get(piece, 0)


def _peg_rows_bored(piece: Piece) -> int:
    return {Piece.CENTER: 1, Piece.HOLE_END: 1}.get(piece, 0)


def generate_bom(params: CombParams, columns: int, prefer_solid: bool = True) -> Dict:
    """Generate Bill of Materials for a comb of `columns` wire columns."""
    d = derive_constants(params)
    chain = plan_chain(columns, prefer_solid)

    pieces = Counter(p.value for p in chain)
    pegs = sum(_pegs_on(p) for p in chain) * params.hole_count
    peg_holes = sum(_peg_rows_bored(p) for p in chain) * params.hole_count

    # End pieces are tbd + hr wide, each Center one pitch
    length = d.torus_body_diameter + columns * d.pitch

    bom = {
        "chain": [p.value for p in chain],
        "pieces": pieces,
        "summary": {
            "wire_columns": columns,
            "wire_channels": columns * params.hole_count,
            "total_pieces": len(chain),
            "total_pegs": pegs,
            "total_peg_holes": peg_holes,
            "assembled_size_mm": (round(length, 3), round(d.depth, 3),
                                  round(params.thickness, 3)),
        },
    }
    return bom


def print_bom(bom: Dict):
    """Print formatted BOM to console."""

    print("\n" + "="*60)
    print("BILL OF MATERIALS - WIRE COMB")
    print("="*60)

    print("\n--- CHAIN ---")
    print("  " + " + ".join(bom["chain"]))

    print("\n--- PIECES ---")
    for piece, count in sorted(bom["pieces"].items()):
        print(f"  {piece}: {count}")

    print("\n--- SUMMARY ---")
    for key, value in bom["summary"].items():
        if key == "assembled_size_mm":
            value = " x ".join(f"{v:.2f}" for v in value) + " mm"
        print(f"  {key.replace('_', ' ').title()}: {value}")

    print("="*60 + "\n")
