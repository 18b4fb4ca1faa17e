"""Calibrated zone tables for the 2D photo space and the 3D head model.

2D boundaries are normalized 0-1 relative to the face bounding box, matching
the coordinates the vision model emits. 3D anchors are calibrated by hand
against the GLB head asset at scale 2.5:

    X: -1.2 (left) .. +1.2 (right), 0 = midline
    Y: -1.0 (chin) .. +1.6 (forehead), 0.2 = nose level
    Z:  0.5 (ears) ..  2.0 (nose tip), larger = more frontal

Anchors give the zone centre, its linear extent, surface curvature
coefficients and a small offset that lifts points onto the visible skin.
"""
from types import MappingProxyType

from .schemas import ZoneBoundary2D, ZoneAnchor3D, Point3D, ModelBounds
from .zones import AnatomicalZone as Z

MODEL_SCALE = 2.5
MODEL_BOUNDS = ModelBounds(x_min=-1.2, x_max=1.2, y_min=-1.0, y_max=1.6, z_min=0.5, z_max=2.0)
MODEL_CENTER_Y = 0.2
MODEL_CENTER_Z = 1.8

BILATERAL_ZONES = frozenset({Z.PERIORBITAL, Z.MASSETER})

ZONE_BOUNDARIES = MappingProxyType({
    # procerus + corrugators; AI coords typically x 0.36-0.64, y 0.30-0.40
    Z.GLABELLA: ZoneBoundary2D(x_min=0.32, x_max=0.68, y_min=0.28, y_max=0.42, center_x=0.50, center_y=0.36),
    # upper forehead, at least 2cm above the brow
    Z.FRONTALIS: ZoneBoundary2D(x_min=0.25, x_max=0.75, y_min=0.05, y_max=0.28, center_x=0.50, center_y=0.16),
    # crow's feet, left side (right side centre is 0.77)
    Z.PERIORBITAL: ZoneBoundary2D(x_min=0.15, x_max=0.32, y_min=0.34, y_max=0.52, center_x=0.23, center_y=0.42),
    # bunny lines
    Z.NASAL: ZoneBoundary2D(x_min=0.40, x_max=0.60, y_min=0.42, y_max=0.56, center_x=0.50, center_y=0.48),
    Z.PERIORAL: ZoneBoundary2D(x_min=0.35, x_max=0.65, y_min=0.58, y_max=0.75, center_x=0.50, center_y=0.67),
    Z.MENTALIS: ZoneBoundary2D(x_min=0.40, x_max=0.60, y_min=0.78, y_max=0.95, center_x=0.50, center_y=0.88),
    # mandible angle, left side (right side centre is 0.82)
    Z.MASSETER: ZoneBoundary2D(x_min=0.08, x_max=0.28, y_min=0.55, y_max=0.80, center_x=0.18, center_y=0.68),
    Z.UNKNOWN: ZoneBoundary2D(x_min=0.0, x_max=1.0, y_min=0.0, y_max=1.0, center_x=0.50, center_y=0.50),
})

ZONE_3D_ANCHORS = MappingProxyType({
    Z.GLABELLA: ZoneAnchor3D(ref=Point3D(x=0, y=0.68, z=1.72), width=0.80, height=0.40,
                             curvature_x=0.06, curvature_y=0.03, surface_offset=0.04),
    # forehead recedes upwards, hence the stronger vertical curvature
    Z.FRONTALIS: ZoneAnchor3D(ref=Point3D(x=0, y=1.28, z=1.25), width=1.60, height=0.65,
                              curvature_x=0.22, curvature_y=0.14, surface_offset=0.05),
    # right side; mirrored for the left
    Z.PERIORBITAL: ZoneAnchor3D(ref=Point3D(x=0.82, y=0.42, z=1.32), width=0.50, height=0.45,
                                curvature_x=0.32, curvature_y=0.07, surface_offset=0.04),
    Z.NASAL: ZoneAnchor3D(ref=Point3D(x=0, y=0.18, z=1.88), width=0.32, height=0.42,
                          curvature_x=0.10, curvature_y=0.08, surface_offset=0.03),
    Z.PERIORAL: ZoneAnchor3D(ref=Point3D(x=0, y=-0.48, z=1.68), width=0.72, height=0.40,
                             curvature_x=0.12, curvature_y=0.05, surface_offset=0.04),
    Z.MENTALIS: ZoneAnchor3D(ref=Point3D(x=0, y=-0.85, z=1.48), width=0.45, height=0.32,
                             curvature_x=0.16, curvature_y=0.20, surface_offset=0.04),
    # right side; mirrored for the left
    Z.MASSETER: ZoneAnchor3D(ref=Point3D(x=0.98, y=-0.28, z=0.78), width=0.55, height=0.65,
                             curvature_x=0.38, curvature_y=0.08, surface_offset=0.05),
    Z.UNKNOWN: ZoneAnchor3D(ref=Point3D(x=0, y=0.25, z=1.60), width=1.0, height=1.0,
                            curvature_x=0.18, curvature_y=0.12, surface_offset=0.04),
})

# Reference landmarks (normalized) used for calibration and overlay guides
FACIAL_LANDMARKS = MappingProxyType({
    "glabella": (0.50, 0.36),
    "pupil_left": (0.35, 0.38),
    "pupil_right": (0.65, 0.38),
    "canthus_left": (0.22, 0.40),
    "canthus_right": (0.78, 0.40),
    "nasal_tip": (0.50, 0.55),
    "nasal_ala_left": (0.42, 0.53),
    "nasal_ala_right": (0.58, 0.53),
    "labial_commissure_left": (0.40, 0.68),
    "labial_commissure_right": (0.60, 0.68),
    "upper_lip_center": (0.50, 0.65),
    "chin_center": (0.50, 0.92),
    "masseter_left": (0.18, 0.72),
    "masseter_right": (0.82, 0.72),
})

def is_bilateral(zone: Z) -> bool:
    return zone in BILATERAL_ZONES

def boundary_for_side(zone: Z, is_left: bool = True) -> ZoneBoundary2D:
    b = ZONE_BOUNDARIES.get(zone, ZONE_BOUNDARIES[Z.UNKNOWN])
    if is_left or not is_bilateral(zone):
        return b
    return ZoneBoundary2D(x_min=1 - b.x_max, x_max=1 - b.x_min, y_min=b.y_min, y_max=b.y_max,
                          center_x=1 - b.center_x, center_y=b.center_y)

def anchor_for(zone: Z) -> ZoneAnchor3D:
    return ZONE_3D_ANCHORS.get(zone, ZONE_3D_ANCHORS[Z.UNKNOWN])
