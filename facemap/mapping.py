"""Coordinate transforms between AI (0-1), percentage (0-100) and 3D model space.

Forward map (percent -> 3D) is the source of truth. The inverse used for
interactive dragging first guesses the zone from fixed 3D breakpoints and
then undoes the per-zone linear step, so it is exact only when the guessed
zone is the one the point was mapped from.
"""
import logging
import math
from typing import Iterable, Tuple, Dict, Optional

import numpy as np

from .geometry import (MODEL_BOUNDS, MODEL_CENTER_Y, MODEL_CENTER_Z, MODEL_SCALE, ZONE_BOUNDARIES,
                       ZONE_3D_ANCHORS, anchor_for, boundary_for_side, is_bilateral)
from .schemas import InjectionPoint, ZoneCheck
from .zones import AnatomicalZone, classify_muscle

log = logging.getLogger(__name__)

LATERAL_EXPONENT = 2.0    # quadratic falloff side to side
VERTICAL_EXPONENT = 1.5   # sub-linear falloff top to bottom

def _clip(v: float, lo: float, hi: float) -> float:
    return float(np.clip(v, lo, hi))

def _finite(v, default: float) -> float:
    try:
        v = float(v)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default

def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))

def _as_zone(zone) -> AnatomicalZone:
    try:
        return AnatomicalZone(zone)
    except ValueError:
        return AnatomicalZone.UNKNOWN

def ai_to_percent(x: float, y: float) -> Tuple[int, int]:
    x = _clip(_finite(x, 0.5), 0.0, 1.0); y = _clip(_finite(y, 0.5), 0.0, 1.0)
    return _round_half_up(x * 100), _round_half_up(y * 100)

def percent_to_ai(x: float, y: float) -> Tuple[float, float]:
    x = _clip(_finite(x, 50.0), 0.0, 100.0); y = _clip(_finite(y, 50.0), 0.0, 100.0)
    return x / 100, y / 100

def percent_to_3d(x: float, y: float, muscle: str) -> Tuple[float, float, float]:
    """Place a percentage-space point on the 3D head model.

    The point's offset from its zone centre (in half-extents, clamped to
    [-1, 1]) is scaled into the zone's 3D extent. Bilateral zones pick the
    side from x and mirror the anchor. Depth follows the zone's surface
    curvature away from the midline and from nose level.
    """
    zone = classify_muscle(muscle)
    anchor = anchor_for(zone)
    left_box = ZONE_BOUNDARIES[zone]

    x_norm = _clip(_finite(x, left_box.center_x * 100), 0.0, 100.0) / 100
    y_norm = _clip(_finite(y, left_box.center_y * 100), 0.0, 100.0) / 100

    bilateral = is_bilateral(zone)
    is_left = x_norm < 0.5
    box = boundary_for_side(zone, is_left)

    rel_x = _clip((x_norm - box.center_x) / box.half_width, -1.0, 1.0)
    rel_y = _clip((y_norm - box.center_y) / box.half_height, -1.0, 1.0)

    ref_x = -anchor.ref.x if (bilateral and is_left) else anchor.ref.x
    x3 = ref_x + rel_x * anchor.width / 2
    # 2D y grows downward, 3D y grows upward
    y3 = anchor.ref.y - rel_y * anchor.height / 2

    lateral_curve = abs(x3) ** LATERAL_EXPONENT * anchor.curvature_x
    vertical_curve = abs(y3 - MODEL_CENTER_Y) ** VERTICAL_EXPONENT * anchor.curvature_y
    z3 = anchor.ref.z - lateral_curve - vertical_curve + anchor.surface_offset

    b = MODEL_BOUNDS
    return (_clip(x3, b.x_min, b.x_max), _clip(y3, b.y_min, b.y_max), _clip(z3, b.z_min, b.z_max))

def points_to_3d(points: Iterable[InjectionPoint]) -> np.ndarray:
    rows = [percent_to_3d(p.x, p.y, p.muscle) for p in points]
    return np.array(rows, dtype=np.float64).reshape(-1, 3)

def zone_from_3d(x3: float, y3: float) -> AnatomicalZone:
    # breakpoints sit in the gaps between neighbouring anchor extents
    ax = abs(x3)
    if y3 > 0.92: return AnatomicalZone.FRONTALIS
    if y3 > 0.43 and ax < 0.5: return AnatomicalZone.GLABELLA
    if y3 > 0.12 and ax > 0.5: return AnatomicalZone.PERIORBITAL
    if -0.10 < y3 < 0.40 and ax < 0.3: return AnatomicalZone.NASAL
    if -0.685 < y3 < -0.25 and ax < 0.7: return AnatomicalZone.PERIORAL
    if y3 <= -0.685 and ax < 0.7: return AnatomicalZone.MENTALIS
    if ax > 0.7: return AnatomicalZone.MASSETER
    return AnatomicalZone.UNKNOWN

def three_d_to_percent(x3: float, y3: float, z3: Optional[float] = None) -> Tuple[int, int]:
    """Inverse of ``percent_to_3d``; depth is not needed and is ignored."""
    x3 = _finite(x3, 0.0); y3 = _finite(y3, MODEL_CENTER_Y)
    zone = zone_from_3d(x3, y3)
    anchor = anchor_for(zone)

    is_left = x3 < 0
    ref_x = -anchor.ref.x if (is_bilateral(zone) and is_left) else anchor.ref.x
    rel_x = _clip((x3 - ref_x) / (anchor.width / 2), -1.0, 1.0)
    rel_y = _clip(-(y3 - anchor.ref.y) / (anchor.height / 2), -1.0, 1.0)

    box = boundary_for_side(zone, is_left)
    x = (box.center_x + rel_x * box.half_width) * 100
    y = (box.center_y + rel_y * box.half_height) * 100
    log.debug("3D (%.3f, %.3f) -> zone %s -> (%.1f, %.1f)", x3, y3, zone.value, x, y)
    return _round_half_up(_clip(x, 0, 100)), _round_half_up(_clip(y, 0, 100))

def detect_muscle_from_3d(x3: float, y3: float) -> str:
    ax = abs(x3)
    if y3 > 1.0:
        return "frontalis"
    if 0.55 < y3 < 0.90 and ax < 0.20:
        return "procerus"
    if 0.55 < y3 < 0.85:
        if -0.65 < x3 < -0.20: return "corrugator_left"
        if 0.20 < x3 < 0.65: return "corrugator_right"
    if 0.25 < y3 < 0.65:
        if x3 < -0.50: return "orbicularis_oculi_left"
        if x3 > 0.50: return "orbicularis_oculi_right"
    if -0.10 < y3 < 0.40 and ax < 0.30:
        return "nasalis"
    if -0.65 < y3 < -0.25 and ax < 0.45:
        return "orbicularis_oris"
    if y3 < -0.65 and ax < 0.40:
        return "mentalis"
    if -0.60 < y3 < 0.0 and ax > 0.70:
        return "masseter"
    return "procerus"

def validate_coordinates_for_zone(x: float, y: float, zone) -> ZoneCheck:
    zone = _as_zone(zone)
    x_norm, y_norm = x / 100, y / 100
    box = boundary_for_side(zone, is_left=x_norm < 0.5)
    if box.contains(x_norm, y_norm):
        return ZoneCheck(valid=True)
    return ZoneCheck(valid=False, warning=f"Coordenadas fora da zona {zone.value}: x={x}%, y={y}%")

def zone_tables() -> Dict[str, dict]:
    """Read-only snapshot of the calibration tables for 3D viewers."""
    return {
        "bounds": MODEL_BOUNDS.model_dump(),
        "scale": MODEL_SCALE,
        "center_y": MODEL_CENTER_Y,
        "center_z": MODEL_CENTER_Z,
        "zones": {z.value: {"boundary": ZONE_BOUNDARIES[z].model_dump(),
                            "anchor": ZONE_3D_ANCHORS[z].model_dump()} for z in AnatomicalZone},
    }
