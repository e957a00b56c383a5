#!/usr/bin/env python3
"""
EXPORT_MODELS.PY - STEP and STL export for 3D printing

Exports wire comb pieces to industry-standard formats:
- STEP (.step) - for CAD interchange
- STL (.stl) - for 3D printing

Usage:
    python export_models.py                          # All four pieces
    python export_models.py center                   # Single piece
    python export_models.py --preset fine            # Named parameter set
    python export_models.py --config comb.json       # Parameters from JSON
    python export_models.py --hole-count 6 --thickness 4.5
    python export_models.py --format stl             # STL only
    python export_models.py --output-dir ./out       # Custom output directory
    python export_models.py --report --bom 5         # Fit report and BOM only
"""

import argparse
import logging
import sys
from pathlib import Path

import cadquery as cq

from comb_bom import generate_bom, print_bom
from comb_kernel import GeometryError, Tessellation, build_solid, solid_bounds
from comb_params import (
    COMB_PRESETS, CombParams, ConfigurationError, Piece, derive_constants,
    load_params, params_from_dict, preset_params,
)
from comb_validation import print_fit_report, validate_fit
from logging_config import setup_logging
from wire_comb import make_piece

logger = logging.getLogger("wire_comb.export")


def export_step(solid, filepath):
    """Export CadQuery solid to STEP format."""
    cq.exporters.export(solid, str(filepath), exportType='STEP')


def export_stl(solid, filepath, tolerance=0.01, angular_tolerance=0.1):
    """Export CadQuery solid to STL format.

    Args:
        solid: CadQuery solid to export
        filepath: Output file path
        tolerance: Linear tolerance for mesh (smaller = finer mesh)
        angular_tolerance: Angular tolerance in radians
    """
    cq.exporters.export(
        solid, str(filepath), exportType='STL',
        tolerance=tolerance, angularTolerance=angular_tolerance
    )


def export_piece(params, output_dir, formats=('step', 'stl')):
    """Build params.piece and export it to the specified formats.

    Args:
        params: CombParams with the piece to build
        output_dir: Directory for output files
        formats: Tuple of formats to export ('step', 'stl')

    Returns:
        List of exported file paths
    """
    piece = Piece.parse(params.piece)
    solid = build_solid(make_piece(params))
    tess = Tessellation.from_params(params)

    bb = solid_bounds(solid)
    logger.info("%s: %.2f x %.2f x %.2f mm", piece.value, *bb.size)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    exported = []

    if 'step' in formats:
        step_path = output_dir / f"wire_comb_{piece.slug}.step"
        export_step(solid, step_path)
        exported.append(step_path)
        print(f"  STEP: {step_path}")

    if 'stl' in formats:
        stl_path = output_dir / f"wire_comb_{piece.slug}.stl"
        export_stl(solid, stl_path, tess.tolerance, tess.angular_tolerance)
        exported.append(stl_path)
        print(f"  STL:  {stl_path}")

    return exported


def export_all(params, output_dir=None, formats=('step', 'stl')):
    """Export all four pieces for one parameter set.

    Args:
        params: CombParams (the piece field is ignored)
        output_dir: Output directory (default: ./exports)
        formats: Tuple of formats to export
    """
    if output_dir is None:
        output_dir = Path(__file__).parent / "exports"

    output_dir = Path(output_dir)
    d = derive_constants(params)

    print("=== Exporting Wire Comb ===")
    print(f"Output directory: {output_dir}")
    print(f"Formats: {', '.join(formats).upper()}")
    print(f"Holes: {params.hole_count} x Ø{params.hole_diameter}mm, "
          f"pitch {d.pitch:.2f}mm, thickness {params.thickness}mm")
    print()

    all_exported = []
    for piece in Piece:
        print(f"{piece.value}:")
        exported = export_piece(params.with_piece(piece), output_dir, formats)
        all_exported.extend(exported)
        print()

    print(f"Total files exported: {len(all_exported)}")
    return all_exported


def build_parser():
    parser = argparse.ArgumentParser(
        description='Export wire comb pieces to STEP/STL formats'
    )
    parser.add_argument(
        'piece', nargs='?',
        choices=[p.slug for p in Piece] + ['all'],
        default='all',
        help='Piece to export (default: all)'
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        '--config',
        type=Path,
        help='JSON file of parameters (holeCount, holeDiameter, ...)'
    )
    source.add_argument(
        '--preset',
        choices=sorted(COMB_PRESETS),
        help='Named parameter set'
    )

    parser.add_argument('--hole-count', type=int, help='Holes per row')
    parser.add_argument('--hole-diameter', type=float, help='Wire channel diameter (mm)')
    parser.add_argument('--thickness', type=float, help='Plate thickness (mm)')
    parser.add_argument('--peg-clearance', type=float, help='Peg-hole diameter clearance (mm)')
    parser.add_argument('--peg-end-clearance', type=float, help='Peg-hole depth clearance (mm)')
    parser.add_argument('--pad', type=float, help='Boolean robustness epsilon (mm)')
    parser.add_argument('--arc-resolution', type=float, help='Min curve segment length (mm)')

    parser.add_argument(
        '--format', '-f',
        choices=['step', 'stl', 'both'],
        default='both',
        help='Export format (default: both)'
    )
    parser.add_argument(
        '--output-dir', '-o',
        type=Path,
        default=None,
        help='Output directory (default: ./exports)'
    )
    parser.add_argument(
        '--report',
        action='store_true',
        help='Print the fit report instead of exporting'
    )
    parser.add_argument(
        '--bom',
        type=int,
        metavar='COLUMNS',
        help='Print the bill of materials for a comb of COLUMNS wire columns'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser


def params_from_args(args) -> CombParams:
    overrides = {
        'hole_count': args.hole_count,
        'hole_diameter': args.hole_diameter,
        'thickness': args.thickness,
        'peg_clearance': args.peg_clearance,
        'peg_end_clearance': args.peg_end_clearance,
        'pad': args.pad,
        'arc_resolution': args.arc_resolution,
    }

    if args.config:
        return load_params(args.config, **overrides)

    base = preset_params(args.preset) if args.preset else CombParams()
    return params_from_dict(overrides, base)


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    # Determine formats
    if args.format == 'both':
        formats = ('step', 'stl')
    else:
        formats = (args.format,)

    output_dir = args.output_dir or Path(__file__).parent / "exports"

    try:
        params = params_from_args(args)

        if args.report or args.bom is not None:
            if args.report:
                print_fit_report(validate_fit(params), params)
            if args.bom is not None:
                print_bom(generate_bom(params, args.bom))
            return 0

        for v in validate_fit(params):
            if v.severity == "error":
                logger.warning("Fit check failed: %s", v.message)

        if args.piece == 'all':
            export_all(params, output_dir, formats)
        else:
            piece = Piece.parse(args.piece)
            print(f"=== Exporting {piece.value} ===")
            print(f"Formats: {', '.join(formats).upper()}")
            print()
            export_piece(params.with_piece(piece), output_dir, formats)

    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except GeometryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
