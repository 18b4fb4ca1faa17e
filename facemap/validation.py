import logging
import math
from itertools import combinations
from types import MappingProxyType
from typing import Dict, List, Sequence, Tuple

from .schemas import DangerZone, InjectionPoint, ValidationError, ValidationResult, ValidationWarning
from .zones import AnatomicalZone as Z, classify_muscle, strip_laterality

log = logging.getLogger(__name__)

# percentage space, inclusive bounds
DANGER_ZONES: Tuple[DangerZone, ...] = (
    DangerZone(id="orbital_margin_left", label="Margem Orbital Esquerda",
               x_min=25, x_max=45, y_min=28, y_max=40, reason="Risco de ptose palpebral"),
    DangerZone(id="orbital_margin_right", label="Margem Orbital Direita",
               x_min=55, x_max=75, y_min=28, y_max=40, reason="Risco de ptose palpebral"),
    DangerZone(id="infraorbital_left", label="Área Infraorbital Esquerda",
               x_min=25, x_max=42, y_min=42, y_max=55, reason="Risco de difusão para músculos oculares"),
    DangerZone(id="infraorbital_right", label="Área Infraorbital Direita",
               x_min=58, x_max=75, y_min=42, y_max=55, reason="Risco de difusão para músculos oculares"),
    DangerZone(id="labial_commissure_left", label="Comissura Labial Esquerda",
               x_min=30, x_max=42, y_min=60, y_max=70, reason="Risco de assimetria do sorriso"),
    DangerZone(id="labial_commissure_right", label="Comissura Labial Direita",
               x_min=58, x_max=70, y_min=60, y_max=70, reason="Risco de assimetria do sorriso"),
)

# forehead above brow above eye region above nose above mouth above chin
SPATIAL_HIERARCHY = MappingProxyType({
    Z.FRONTALIS: (5, 25),
    Z.GLABELLA: (28, 42),
    Z.PERIORBITAL: (32, 50),
    Z.NASAL: (42, 55),
    Z.PERIORAL: (56, 76),
    Z.MENTALIS: (75, 95),
    Z.MASSETER: (50, 75),
})

SYMMETRY_X_TOLERANCE = 10
SYMMETRY_Y_TOLERANCE = 5
DOSAGE_TOLERANCE = 2
PROXIMITY_MIN_DISTANCE = 5

def _fmt(v: float) -> str:
    return f"{v:g}"

def check_symmetry(points: Sequence[InjectionPoint]) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    left: Dict[str, InjectionPoint] = {strip_laterality(p.muscle): p for p in points if p.x < 50}
    right = [p for p in points if p.x > 50]

    for r in right:
        lp = left.get(strip_laterality(r.muscle))
        if lp is None:
            continue
        pair = [lp.id, r.id]

        dev = abs(lp.x + r.x - 100)
        if dev > SYMMETRY_X_TOLERANCE:
            warnings.append(ValidationWarning(
                type="symmetry", affectedPoints=pair,
                severity="high" if dev >= 20 else "medium",
                message=(f"Assimetria detectada: {lp.muscle} (x={_fmt(lp.x)}) e {r.muscle} "
                         f"(x={_fmt(r.x)}) não são simétricos")))

        dev = abs(lp.y - r.y)
        if dev > SYMMETRY_Y_TOLERANCE:
            warnings.append(ValidationWarning(
                type="symmetry", affectedPoints=pair,
                severity="high" if dev > 10 else "medium",
                message=f"Altura diferente: {lp.muscle} (y={_fmt(lp.y)}) e {r.muscle} (y={_fmt(r.y)})"))

        dev = abs(lp.dosage - r.dosage)
        if dev > DOSAGE_TOLERANCE:
            warnings.append(ValidationWarning(
                type="dosage", affectedPoints=pair,
                severity="high" if dev > 5 else "low",
                message=(f"Dosagem assimétrica: {lp.muscle} ({_fmt(lp.dosage)}U) vs "
                         f"{r.muscle} ({_fmt(r.dosage)}U)")))
    return warnings

def check_hierarchy(points: Sequence[InjectionPoint]) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    for p in points:
        zone = classify_muscle(p.muscle)
        band = SPATIAL_HIERARCHY.get(zone)
        if band is None:
            continue
        min_y, max_y = band
        if p.y > max_y:
            msg = (f"{p.muscle} está muito baixo (y={_fmt(p.y)}). "
                   f"Para {zone.value}, máximo recomendado é y={max_y}")
        elif p.y < min_y:
            msg = (f"{p.muscle} está muito alto (y={_fmt(p.y)}). "
                   f"Para {zone.value}, mínimo recomendado é y={min_y}")
        else:
            continue
        warnings.append(ValidationWarning(type="hierarchy", message=msg,
                                          affectedPoints=[p.id], severity="medium"))
    return warnings

def check_proximity(points: Sequence[InjectionPoint]) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    for p1, p2 in combinations(points, 2):
        d = math.hypot(p1.x - p2.x, p1.y - p2.y)
        if d < PROXIMITY_MIN_DISTANCE:
            warnings.append(ValidationWarning(
                type="proximity", affectedPoints=[p1.id, p2.id],
                severity="high" if d < 3 else "medium",
                message=f"Pontos muito próximos: {p1.muscle} e {p2.muscle} (distância: {d:.1f}%)"))
    return warnings

def check_danger_zones(points: Sequence[InjectionPoint]) -> List[ValidationError]:
    errors: List[ValidationError] = []
    for p in points:
        for dz in DANGER_ZONES:
            if dz.contains(p.x, p.y):
                errors.append(ValidationError(type="danger_zone", affectedPoints=[p.id],
                                              message=f"{p.muscle} está na {dz.label}: {dz.reason}"))
    return errors

def validate_anatomical_consistency(points: Sequence[InjectionPoint]) -> ValidationResult:
    if not points:
        return ValidationResult(isValid=True, warnings=[], errors=[])
    points = list(points)
    warnings = check_symmetry(points) + check_hierarchy(points) + check_proximity(points)
    errors = check_danger_zones(points)
    log.debug("validated %d points: %d warnings, %d errors", len(points), len(warnings), len(errors))
    return ValidationResult(isValid=(len(errors) == 0), warnings=warnings, errors=errors)

def get_validation_summary(result: ValidationResult) -> str:
    if result.isValid and not result.warnings:
        return "✓ Todos os pontos estão em posições anatomicamente corretas"

    parts: List[str] = []
    if result.errors:
        parts.append(f"⚠️ {len(result.errors)} erro(s) crítico(s)")
    by_sev = {s: sum(1 for w in result.warnings if w.severity == s) for s in ("high", "medium", "low")}
    if by_sev["high"]: parts.append(f"{by_sev['high']} aviso(s) importante(s)")
    if by_sev["medium"]: parts.append(f"{by_sev['medium']} sugestão(ões)")
    if by_sev["low"]: parts.append(f"{by_sev['low']} observação(ões)")
    return " | ".join(parts)
