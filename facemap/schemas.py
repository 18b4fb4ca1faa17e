from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Literal, Tuple

from .zones import AnatomicalZone

Depth = Literal["superficial", "deep"]
Severity = Literal["low", "medium", "high"]
Triple = Tuple[float, float, float]

class InjectionPoint(BaseModel):
    # x/y in percentage space: x 0=left..100=right, y 0=forehead top..100=chin tip
    model_config = ConfigDict(frozen=True)

    id: str
    muscle: str
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)
    depth: Depth = "superficial"
    dosage: float = Field(0.0, ge=0)
    notes: Optional[str] = None
    confidence: Optional[float] = Field(None, ge=0, le=1)

class ZoneBoundary2D(BaseModel):
    # normalized 0-1; bilateral zones store the left side
    model_config = ConfigDict(frozen=True)

    x_min: float; x_max: float
    y_min: float; y_max: float
    center_x: float; center_y: float

    @property
    def half_width(self) -> float:
        return (self.x_max - self.x_min) / 2

    @property
    def half_height(self) -> float:
        return (self.y_max - self.y_min) / 2

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

class Point3D(BaseModel):
    model_config = ConfigDict(frozen=True)
    x: float; y: float; z: float

class ZoneAnchor3D(BaseModel):
    # bilateral anchors are stored for the right side (+x)
    model_config = ConfigDict(frozen=True)

    ref: Point3D
    width: float
    height: float
    curvature_x: float = Field(..., ge=0)
    curvature_y: float = Field(..., ge=0)
    surface_offset: float = Field(..., gt=0)

class ModelBounds(BaseModel):
    model_config = ConfigDict(frozen=True)

    x_min: float; x_max: float
    y_min: float; y_max: float
    z_min: float; z_max: float

class DangerZone(BaseModel):
    # rectangle in percentage space, inclusive bounds
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    x_min: float; x_max: float
    y_min: float; y_max: float
    reason: str

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

class ValidationWarning(BaseModel):
    type: Literal["symmetry", "hierarchy", "proximity", "dosage"]
    message: str
    affectedPoints: List[str]
    severity: Severity

class ValidationError(BaseModel):
    type: Literal["danger_zone", "limit_exceeded", "invalid_position"]
    message: str
    affectedPoints: List[str]

class ValidationResult(BaseModel):
    isValid: bool
    warnings: List[ValidationWarning] = []
    errors: List[ValidationError] = []

class ZoneCheck(BaseModel):
    valid: bool
    warning: Optional[str] = None

class DosageAlert(BaseModel):
    level: Literal["warning", "danger"]
    muscle: str
    label: str
    dosage: float
    limit: float
    message: str

class ToxinProduct(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    generic_name: str
    conversion_factor: float
    description: str

class IngestResult(BaseModel):
    points: List[InjectionPoint]
    rejected: List[Dict[str, str]] = []

# --- HTTP surface ---

class PointsRequest(BaseModel):
    points: List[InjectionPoint]

class MappedPoint(BaseModel):
    id: str
    muscle: str
    zone: AnatomicalZone
    position: Triple
    zone_check: ZoneCheck

class MapResponse(BaseModel):
    points: List[MappedPoint]

class InverseRequest(BaseModel):
    x3D: float
    y3D: float
    z3D: float = 1.5

class InverseResponse(BaseModel):
    x: float
    y: float
    muscle: str
    zone: AnatomicalZone
    label: str

class ValidateResponse(BaseModel):
    result: ValidationResult
    summary: str
    dosage_alerts: List[DosageAlert] = []
    total_dosage: float = 0.0
