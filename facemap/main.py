import logging
from typing import Any, Dict, List, Union

from fastapi import Body, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from . import __version__
from .config import LOG_LEVEL, MAX_POINTS
from .dosage import check_dosage_safety, dosage_errors, dosages_by_muscle
from .ingest import parse_ai_points
from .mapping import (detect_muscle_from_3d, percent_to_3d, three_d_to_percent,
                      validate_coordinates_for_zone, zone_tables)
from .overlay import overlay_png_b64
from .schemas import (IngestResult, InjectionPoint, InverseRequest, InverseResponse, MapResponse,
                      MappedPoint, PointsRequest, ValidateResponse, ValidationResult)
from .validation import get_validation_summary, validate_anatomical_consistency
from .zones import classify_muscle, label_for_muscle

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="FaceMap Injection Mapping", version=__version__)

def _guard(points: List[InjectionPoint]):
    if len(points) > MAX_POINTS:
        raise HTTPException(status_code=413, detail=f"Too many points: {len(points)} > {MAX_POINTS}")

@app.get("/", response_class=JSONResponse)
def root():
    return {"ok": True, "name": "FaceMap Injection Mapping", "version": __version__, "docs": "/docs"}

@app.get("/zones")
def zones():
    return zone_tables()

@app.post("/ingest", response_model=IngestResult)
def ingest(payload: Union[List[Any], Dict[str, Any]] = Body(...)):
    result = parse_ai_points(payload)
    log.info("Ingested %d points (%d rejected)", len(result.points), len(result.rejected))
    return result

@app.post("/map", response_model=MapResponse)
def map_points(req: PointsRequest):
    _guard(req.points)
    out = []
    for p in req.points:
        zone = classify_muscle(p.muscle)
        out.append(MappedPoint(id=p.id, muscle=p.muscle, zone=zone,
                               position=percent_to_3d(p.x, p.y, p.muscle),
                               zone_check=validate_coordinates_for_zone(p.x, p.y, zone)))
    return MapResponse(points=out)

@app.post("/map/inverse", response_model=InverseResponse)
def map_inverse(req: InverseRequest):
    x, y = three_d_to_percent(req.x3D, req.y3D, req.z3D)
    muscle = detect_muscle_from_3d(req.x3D, req.y3D)
    return InverseResponse(x=x, y=y, muscle=muscle, zone=classify_muscle(muscle),
                           label=label_for_muscle(muscle))

@app.post("/validate", response_model=ValidateResponse)
def validate(req: PointsRequest):
    _guard(req.points)
    checked = validate_anatomical_consistency(req.points)
    errors = checked.errors + dosage_errors(req.points)
    result = ValidationResult(isValid=not errors, warnings=checked.warnings, errors=errors)
    per_muscle = dosages_by_muscle(req.points)
    total = sum(per_muscle.values())
    if not result.isValid:
        log.info("Validation blocked: %d error(s)", len(errors))
    return ValidateResponse(result=result, summary=get_validation_summary(result),
                            dosage_alerts=check_dosage_safety(per_muscle, total), total_dosage=total)

@app.post("/overlay")
async def overlay(
    photo: UploadFile = File(..., description="Frontal photo"),
    points: str = Form(..., description='JSON: {"points": [...]}'),
    show_zones: bool = Form(False),
    show_danger: bool = Form(True),
):
    try:
        req = PointsRequest.model_validate_json(points)
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    _guard(req.points)
    try:
        png = overlay_png_b64(await photo.read(), req.points,
                              show_zones=show_zones, show_danger=show_danger)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"overlay_png_b64": png, "count": len(req.points)}
