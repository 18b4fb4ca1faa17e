import base64

import cv2
import numpy as np
import pytest

from facemap.overlay import DEEP_COLOR, draw_overlay, overlay_png_b64, to_bgr

def _png(w=200, h=200):
    _, buf = cv2.imencode(".png", np.zeros((h, w, 3), np.uint8))
    return buf.tobytes()

def test_point_drawn_at_percentage_position(point):
    img = np.zeros((200, 200, 3), np.uint8)
    out = draw_overlay(img, [point("a", "nasalis", 50, 50, depth="deep")], show_danger=False)
    assert tuple(int(c) for c in out[100, 100]) == DEEP_COLOR
    assert not img.any()

def test_danger_zones_shaded():
    out = draw_overlay(np.zeros((200, 200, 3), np.uint8), [])
    # inside the left orbital margin box
    assert out[68, 70].any()
    assert not out[5, 5].any()

def test_zone_boxes_drawn_for_both_sides():
    out = draw_overlay(np.zeros((200, 200, 3), np.uint8), [], show_zones=True, show_danger=False)
    # periorbital left box x_min 0.15, right box x_max 0.85, both at y 0.42
    y = int(round(0.42 * 199))
    assert out[y, int(round(0.15 * 199))].any()
    assert out[y, int(round(0.85 * 199))].any()
    # glabella landmark marker
    assert tuple(int(c) for c in out[72, 100]) == (255, 255, 255)

def test_png_encoding(point):
    b64 = overlay_png_b64(_png(), [point("a", "procerus", 50, 30)])
    assert base64.b64decode(b64).startswith(b"\x89PNG")

def test_invalid_image():
    with pytest.raises(ValueError):
        to_bgr(b"not an image")
