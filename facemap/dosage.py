"""Dosage safety limits (Brazilian consensus 2024) and toxin unit conversion.

Limits are in onabotulinumtoxinA-equivalent units. Products with a
different potency are converted before comparison.
"""
import re
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional

from .schemas import DosageAlert, InjectionPoint, ToxinProduct, ValidationError
from .zones import AnatomicalZone, classify_muscle

# muscle -> (max, warning, label)
DOSAGE_LIMITS = MappingProxyType({
    "procerus": (12, 10, "Prócero"),
    "corrugator_left": (15, 12, "Corrugador Esquerdo"),
    "corrugator_right": (15, 12, "Corrugador Direito"),
    "frontalis": (20, 15, "Frontal"),
    "orbicularis_oculi_left": (16, 12, "Orbicular Olho Esq."),
    "orbicularis_oculi_right": (16, 12, "Orbicular Olho Dir."),
    "nasalis": (6, 5, "Nasal"),
    "levator_labii": (5, 4, "Levantador Lábio"),
    "zygomaticus_major": (6, 5, "Zigomático Maior"),
    "zygomaticus_minor": (5, 4, "Zigomático Menor"),
    "orbicularis_oris": (6, 5, "Orbicular da Boca"),
    "depressor_anguli": (6, 5, "Depressor do Ângulo"),
    "mentalis": (12, 10, "Mentual"),
    "masseter": (60, 50, "Masseter"),
})

# zones whose limit covers a single muscle regardless of side
_ZONE_LIMIT_KEYS = {
    AnatomicalZone.FRONTALIS: "frontalis",
    AnatomicalZone.NASAL: "nasalis",
    AnatomicalZone.MENTALIS: "mentalis",
}
_LEFT = re.compile(r"esq|left")
_RIGHT = re.compile(r"dir|right")

SESSION_MAX = 100
SESSION_WARNING = 80

TOXIN_PRODUCTS = (
    ToxinProduct(id="botox", name="Botox®", generic_name="OnabotulinumtoxinA",
                 conversion_factor=1.0, description="Allergan - Padrão de referência"),
    ToxinProduct(id="dysport", name="Dysport®", generic_name="AbobotulinumtoxinA",
                 conversion_factor=2.5, description="Galderma - Fator de conversão 2.5:1"),
    ToxinProduct(id="xeomin", name="Xeomin®", generic_name="IncobotulinumtoxinA",
                 conversion_factor=1.0, description="Merz - Equivalente 1:1 ao Botox"),
    ToxinProduct(id="jeuveau", name="Jeuveau®", generic_name="PrabotulinumtoxinA",
                 conversion_factor=1.0, description="Evolus - Equivalente 1:1 ao Botox"),
    ToxinProduct(id="daxxify", name="Daxxify®", generic_name="DaxibotulinumtoxinA",
                 conversion_factor=1.0, description="Revance - Longa duração"),
)

def product_by_id(product_id: str) -> Optional[ToxinProduct]:
    return next((p for p in TOXIN_PRODUCTS if p.id == product_id), None)

def to_reference_units(units: float, product_id: str = "botox") -> float:
    """Product units -> onabotulinumtoxinA-equivalent units (unknown products pass through)."""
    product = product_by_id(product_id)
    return units / product.conversion_factor if product else units

def from_reference_units(units: float, product_id: str = "botox") -> float:
    product = product_by_id(product_id)
    return units * product.conversion_factor if product else units

def limit_key(muscle: str) -> str:
    """Resolve a free-text muscle name ("Corrugador Esq.") to its ``DOSAGE_LIMITS`` key.

    Names that cannot be pinned to one limited muscle, such as a corrugator
    without a side, are returned unchanged and only count towards the session.
    """
    if muscle in DOSAGE_LIMITS:
        return muscle
    name = muscle.lower()
    zone = classify_muscle(name)
    if zone in _ZONE_LIMIT_KEYS:
        return _ZONE_LIMIT_KEYS[zone]
    side = "left" if _LEFT.search(name) else "right" if _RIGHT.search(name) else None
    if zone == AnatomicalZone.GLABELLA:
        if "corruga" not in name:
            return "procerus"
        return f"corrugator_{side}" if side else muscle
    if zone == AnatomicalZone.PERIORBITAL and side:
        return f"orbicularis_oculi_{side}"
    if zone == AnatomicalZone.PERIORAL:
        if "depressor" in name:
            return "depressor_anguli"
        if "oris" in name or "boca" in name:
            return "orbicularis_oris"
    return muscle

def dosages_by_muscle(points: Iterable[InjectionPoint]) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for p in points:
        totals[limit_key(p.muscle)] += p.dosage
    return dict(totals)

def check_dosage_safety(dosages: Dict[str, float], total: float) -> List[DosageAlert]:
    alerts: List[DosageAlert] = []
    for muscle, dose in dosages.items():
        limits = DOSAGE_LIMITS.get(muscle)
        if limits is None:
            continue
        max_u, warn_u, label = limits
        if dose > max_u:
            alerts.append(DosageAlert(level="danger", muscle=muscle, label=label, dosage=dose, limit=max_u,
                                      message=f"{label}: {dose:g}U excede o limite máximo de {max_u}U"))
        elif dose > warn_u:
            alerts.append(DosageAlert(level="warning", muscle=muscle, label=label, dosage=dose, limit=max_u,
                                      message=f"{label}: {dose:g}U está próximo do limite ({max_u}U)"))

    if total > SESSION_MAX:
        alerts.append(DosageAlert(level="danger", muscle="total", label="Total da Sessão", dosage=total,
                                  limit=SESSION_MAX,
                                  message=(f"Dosagem total de {total:g}U excede o limite recomendado "
                                           f"de {SESSION_MAX}U por sessão")))
    elif total > SESSION_WARNING:
        alerts.append(DosageAlert(level="warning", muscle="total", label="Total da Sessão", dosage=total,
                                  limit=SESSION_MAX,
                                  message=(f"Dosagem total de {total:g}U está próxima do limite "
                                           f"recomendado ({SESSION_MAX}U)")))
    return alerts

def dosage_errors(points: List[InjectionPoint], product_id: str = "botox") -> List[ValidationError]:
    """Blocking ``limit_exceeded`` errors for muscles (or the session) over the maximum."""
    per_muscle = {m: to_reference_units(d, product_id) for m, d in dosages_by_muscle(points).items()}
    errors: List[ValidationError] = []
    for alert in check_dosage_safety(per_muscle, sum(per_muscle.values())):
        if alert.level != "danger":
            continue
        ids = [p.id for p in points if alert.muscle == "total" or limit_key(p.muscle) == alert.muscle]
        errors.append(ValidationError(type="limit_exceeded", message=alert.message, affectedPoints=ids))
    return errors
