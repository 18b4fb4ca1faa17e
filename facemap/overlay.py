import base64
from typing import Iterable, Tuple

import cv2
import numpy as np

from .config import POINT_RADIUS
from .geometry import FACIAL_LANDMARKS, ZONE_BOUNDARIES, boundary_for_side, is_bilateral
from .schemas import InjectionPoint
from .validation import DANGER_ZONES
from .zones import AnatomicalZone

def _hex_bgr(h: str) -> Tuple[int, int, int]:
    h = h.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return (b, g, r)

ZONE_COLORS = {
    AnatomicalZone.GLABELLA: _hex_bgr("#F59E0B"),
    AnatomicalZone.FRONTALIS: _hex_bgr("#EF4444"),
    AnatomicalZone.PERIORBITAL: _hex_bgr("#8B5CF6"),
    AnatomicalZone.NASAL: _hex_bgr("#06B6D4"),
    AnatomicalZone.PERIORAL: _hex_bgr("#EC4899"),
    AnatomicalZone.MENTALIS: _hex_bgr("#10B981"),
    AnatomicalZone.MASSETER: _hex_bgr("#F97316"),
    AnatomicalZone.UNKNOWN: _hex_bgr("#6B7280"),
}
DEEP_COLOR = _hex_bgr("#7C3AED")
SUPERFICIAL_COLOR = _hex_bgr("#10B981")
DANGER_COLOR = _hex_bgr("#DC2626")

def confidence_color(confidence: float) -> Tuple[int, int, int]:
    if confidence >= 0.8: return _hex_bgr("#10B981")
    if confidence >= 0.5: return _hex_bgr("#F59E0B")
    return _hex_bgr("#EF4444")

def to_bgr(img_bytes: bytes) -> np.ndarray:
    arr = np.frombuffer(img_bytes, np.uint8)
    im = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if im is None:
        raise ValueError("Invalid image data")
    return im

def _px(x_pct: float, y_pct: float, w: int, h: int) -> Tuple[int, int]:
    return int(round(x_pct / 100 * (w - 1))), int(round(y_pct / 100 * (h - 1)))

def _blend_rect(img, p0, p1, color, alpha=0.25):
    layer = img.copy()
    cv2.rectangle(layer, p0, p1, color, -1)
    cv2.addWeighted(layer, alpha, img, 1 - alpha, 0, dst=img)
    cv2.rectangle(img, p0, p1, color, 1)

def draw_overlay(img_bgr: np.ndarray, points: Iterable[InjectionPoint],
                 show_zones: bool = False, show_danger: bool = True) -> np.ndarray:
    out = img_bgr.copy()
    h, w = out.shape[:2]

    if show_danger:
        for dz in DANGER_ZONES:
            _blend_rect(out, _px(dz.x_min, dz.y_min, w, h), _px(dz.x_max, dz.y_max, w, h), DANGER_COLOR)

    if show_zones:
        for zone in ZONE_BOUNDARIES:
            if zone == AnatomicalZone.UNKNOWN:
                continue
            sides = (True, False) if is_bilateral(zone) else (True,)
            for is_left in sides:
                b = boundary_for_side(zone, is_left)
                p0 = _px(b.x_min * 100, b.y_min * 100, w, h)
                p1 = _px(b.x_max * 100, b.y_max * 100, w, h)
                cv2.rectangle(out, p0, p1, ZONE_COLORS[zone], 1)
        for lx, ly in FACIAL_LANDMARKS.values():
            cv2.drawMarker(out, _px(lx * 100, ly * 100, w, h), (255, 255, 255), cv2.MARKER_CROSS, 6, 1)

    for p in points:
        c = _px(p.x, p.y, w, h)
        fill = DEEP_COLOR if p.depth == "deep" else SUPERFICIAL_COLOR
        cv2.circle(out, c, POINT_RADIUS, fill, -1, lineType=cv2.LINE_AA)
        ring = confidence_color(p.confidence if p.confidence is not None else 0.85)
        cv2.circle(out, c, POINT_RADIUS + 2, ring, 2, lineType=cv2.LINE_AA)
        cv2.putText(out, f"{p.dosage:g}U", (c[0] + POINT_RADIUS + 4, c[1] + 4),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 255), 1, cv2.LINE_AA)
    return out

def to_png_b64(img: np.ndarray) -> str:
    _, buf = cv2.imencode(".png", img)
    return base64.b64encode(buf).decode("utf-8")

def overlay_png_b64(img_bytes: bytes, points: Iterable[InjectionPoint], **kwargs) -> str:
    return to_png_b64(draw_overlay(to_bgr(img_bytes), points, **kwargs))
