"""Parse the vision model's JSON into strict ``InjectionPoint`` records.

The model is asked for percentage coordinates but sometimes answers in
normalized 0-1 form; both are accepted here so the core only ever sees
percentages. Entries that cannot be repaired are dropped and reported.
"""
import logging
import math
import uuid
from typing import Any, Dict, List, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from .mapping import ai_to_percent
from .schemas import IngestResult, InjectionPoint

log = logging.getLogger(__name__)

_DEEP = {"deep", "profundo", "profunda"}

def _number(v: Any) -> float:
    if isinstance(v, bool):
        raise ValueError("boolean is not a coordinate")
    f = float(v)
    if not math.isfinite(f):
        raise ValueError("non-finite number")
    return f

def looks_normalized(x: float, y: float) -> bool:
    # 0-1 range with a fractional part; (1, 1) or (0, 1) stay percentages
    return 0.0 <= x <= 1.0 and 0.0 <= y <= 1.0 and (x % 1 != 0 or y % 1 != 0)

def to_percent(x: float, y: float) -> Tuple[float, float]:
    if looks_normalized(x, y):
        return ai_to_percent(x, y)
    return min(max(x, 0.0), 100.0), min(max(y, 0.0), 100.0)

def parse_point(raw: Dict[str, Any]) -> InjectionPoint:
    if not isinstance(raw, dict):
        raise ValueError("entry is not an object")
    muscle = raw.get("muscle")
    if not isinstance(muscle, str) or not muscle.strip():
        raise ValueError("missing muscle")
    if raw.get("x") is None or raw.get("y") is None:
        raise ValueError("missing coordinates")
    x, y = to_percent(_number(raw["x"]), _number(raw["y"]))

    try:
        dosage = max(_number(raw.get("dosage", 0) or 0), 0.0)
    except (TypeError, ValueError):
        dosage = 0.0
    depth = "deep" if str(raw.get("depth", "")).strip().lower() in _DEEP else "superficial"

    confidence = raw.get("confidence")
    try:
        confidence = None if confidence is None else min(max(_number(confidence), 0.0), 1.0)
    except (TypeError, ValueError):
        confidence = None

    notes = raw.get("notes")
    return InjectionPoint(
        id=str(raw.get("id") or uuid.uuid4().hex),
        muscle=muscle.strip(), x=x, y=y, depth=depth, dosage=dosage,
        notes=notes if isinstance(notes, str) else None,
        confidence=confidence,
    )

def parse_ai_points(payload: Union[List[Any], Dict[str, Any]]) -> IngestResult:
    if isinstance(payload, dict):
        entries = payload.get("injectionPoints") or payload.get("injection_points") or []
    else:
        entries = payload or []
    if not isinstance(entries, list):
        entries = []

    points: List[InjectionPoint] = []
    rejected: List[Dict[str, str]] = []
    for i, raw in enumerate(entries):
        try:
            points.append(parse_point(raw))
        except (TypeError, ValueError, PydanticValidationError) as e:
            ref = str(raw.get("id", i)) if isinstance(raw, dict) else str(i)
            log.warning("Rejected AI point %s: %s", ref, e)
            rejected.append({"ref": ref, "reason": str(e)})
    return IngestResult(points=points, rejected=rejected)
