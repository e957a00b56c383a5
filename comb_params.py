#!/usr/bin/env python3
"""
COMB_PARAMS.PY - Parameters and derived constants for the wire comb

Contains:
- Piece: the four mating piece variants
- CombParams: primary (customizer) parameters for one construction pass
- DerivedConstants: dimensions computed from the primary parameters
- validate_params / derive_constants: validation stage
- load_params: JSON config files with command-line style overrides
- COMB_PRESETS: named parameter sets
"""

import json
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class ConfigurationError(ValueError):
    """Invalid primary parameters, piece tag or config file."""


class Piece(Enum):
    """Piece variant selector."""
    PEG_END = "PegEnd"
    CENTER = "Center"
    HOLE_END = "HoleEnd"
    TWO_ROW_SOLID = "TwoRowSolid"

    @property
    def slug(self) -> str:
        """Name used for files and the command line (e.g. 'peg_end')."""
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> 'Piece':
        """Accept a Piece, its tag ('PegEnd') or a slug ('peg_end', 'peg-end')."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().replace('-', '_').replace(' ', '_')
            for piece in cls:
                if key == piece.value or key.lower() == piece.slug:
                    return piece
        raise ConfigurationError(
            f"Unknown piece {value!r} (expected one of: "
            f"{', '.join(p.value for p in cls)})")


@dataclass(frozen=True)
class CombParams:
    """Primary parameters. All lengths in mm."""
    piece: Piece = Piece.TWO_ROW_SOLID
    hole_count: int = 8               # holes per row
    hole_diameter: float = 5.0        # wire channel diameter
    thickness: float = 5.2            # plate thickness = torus body diameter
    peg_clearance: float = 0.3        # peg-hole diameter over peg diameter
    peg_end_clearance: float = 0.5    # peg-hole depth over peg length
    pad: float = 0.01                 # anti-coincident-face epsilon
    arc_resolution: float = 0.5       # min curve segment size, kernel only

    def with_piece(self, piece) -> 'CombParams':
        return replace(self, piece=Piece.parse(piece))


@dataclass(frozen=True)
class DerivedConstants:
    """Dimensions derived from CombParams."""
    hole_radius: float
    torus_body_diameter: float
    torus_body_radius: float
    pitch: float
    depth: float
    width: float


# Config file keys (customizer spelling) -> CombParams field
CONFIG_KEYS = {
    'piece': 'piece',
    'holeCount': 'hole_count',
    'holeDiameter': 'hole_diameter',
    'thickness': 'thickness',
    'pegClearance': 'peg_clearance',
    'pegEndClearance': 'peg_end_clearance',
    'pad': 'pad',
    'arcResolution': 'arc_resolution',
}


# Named parameter sets
COMB_PRESETS = {
    'standard': {
        'hole_count': 8,
        'hole_diameter': 5.0,       # mm - typical automotive harness wire
        'thickness': 5.2,
        'peg_clearance': 0.3,       # mm - FDM press-in
        'peg_end_clearance': 0.5,
    },
    'fine': {
        'hole_count': 12,
        'hole_diameter': 2.5,       # mm - signal wire
        'thickness': 3.0,
        'peg_clearance': 0.2,
        'peg_end_clearance': 0.4,
    },
    'heavy': {
        'hole_count': 4,
        'hole_diameter': 9.0,       # mm - battery cable
        'thickness': 7.0,
        'peg_clearance': 0.4,
        'peg_end_clearance': 0.6,
    },
}


def _check_errors(params: CombParams) -> List[str]:
    errors = []

    try:
        Piece.parse(params.piece)
    except ConfigurationError as e:
        errors.append(str(e))
    if isinstance(params.hole_count, bool) or not isinstance(params.hole_count, int):
        errors.append(f"holeCount must be an integer, got {params.hole_count!r}")
    elif params.hole_count < 1:
        errors.append(f"holeCount must be >= 1, got {params.hole_count}")

    positive = [
        ('holeDiameter', params.hole_diameter),
        ('thickness', params.thickness),
        ('pad', params.pad),
        ('arcResolution', params.arc_resolution),
    ]
    for name, value in positive:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            errors.append(f"{name} must be a number, got {value!r}")
        elif not value > 0:
            errors.append(f"{name} must be > 0, got {value}")

    non_negative = [
        ('pegClearance', params.peg_clearance),
        ('pegEndClearance', params.peg_end_clearance),
    ]
    for name, value in non_negative:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            errors.append(f"{name} must be a number, got {value!r}")
        elif not value >= 0:
            errors.append(f"{name} must be >= 0, got {value}")

    return errors


def validate_params(params: CombParams) -> CombParams:
    """Raise ConfigurationError listing every invalid parameter."""
    errors = _check_errors(params)
    if errors:
        raise ConfigurationError("; ".join(errors))
    return params


def derive_constants(params: CombParams) -> DerivedConstants:
    """Validate params and compute the derived dimensions."""
    validate_params(params)

    hole_radius = params.hole_diameter / 2
    torus_body_diameter = params.thickness
    torus_body_radius = torus_body_diameter / 2
    pitch = params.hole_diameter + torus_body_diameter

    return DerivedConstants(
        hole_radius=hole_radius,
        torus_body_diameter=torus_body_diameter,
        torus_body_radius=torus_body_radius,
        pitch=pitch,
        depth=params.hole_count * pitch + torus_body_diameter,
        width=2 * pitch + torus_body_diameter,
    )


def params_from_dict(values: Dict, base: Optional[CombParams] = None) -> CombParams:
    """Build CombParams from a dict keyed by config or field names.

    Keys not given keep their value from `base` (or the defaults).
    """
    field_names = {f.name for f in fields(CombParams)}
    changes = {}
    for key, value in values.items():
        name = CONFIG_KEYS.get(key, key)
        if name not in field_names:
            raise ConfigurationError(f"Unknown parameter {key!r}")
        if value is None:
            continue
        if name == 'piece':
            value = Piece.parse(value)
        changes[name] = value

    params = replace(base or CombParams(), **changes)
    return validate_params(params)


def preset_params(name: str) -> CombParams:
    if name not in COMB_PRESETS:
        raise ConfigurationError(
            f"Unknown preset {name!r} (expected one of: {', '.join(COMB_PRESETS)})")
    return params_from_dict(COMB_PRESETS[name])


def load_params(path, **overrides) -> CombParams:
    """Load CombParams from a JSON file, then apply non-None overrides."""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Config file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return params_from_dict(data)
