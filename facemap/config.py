import os

LOG_LEVEL = os.getenv("FACEMAP_LOG_LEVEL", "INFO").upper()
MAX_POINTS = int(os.getenv("FACEMAP_MAX_POINTS", "200"))   # per request
POINT_RADIUS = int(os.getenv("FACEMAP_POINT_RADIUS", "6"))  # overlay, pixels
