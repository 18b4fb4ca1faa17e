"""Anatomical zone taxonomy.

Muscle identifiers arrive as free text from the AI collaborator, mixing
Portuguese labels ("Corrugador Esq.") and English slugs ("corrugator_left").
Classification is an ordered list of substring rules; the first rule whose
tokens match wins and anything else is ``unknown``.
"""
import re
from enum import Enum
from types import MappingProxyType
from typing import Tuple

class AnatomicalZone(str, Enum):
    GLABELLA = "glabella"
    FRONTALIS = "frontalis"
    PERIORBITAL = "periorbital"
    NASAL = "nasal"
    PERIORAL = "perioral"
    MENTALIS = "mentalis"
    MASSETER = "masseter"
    UNKNOWN = "unknown"

# (any-of tokens, all-of extra tokens, zone); order matters
_ZONE_RULES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...], AnatomicalZone], ...] = (
    (("procerus", "prócero", "corrugador", "corrugator"), (), AnatomicalZone.GLABELLA),
    (("frontal", "frontalis"), (), AnatomicalZone.FRONTALIS),
    (("olho", "oculi"), ("orbicular",), AnatomicalZone.PERIORBITAL),
    (("nasal", "nasalis"), (), AnatomicalZone.NASAL),
    (("oris", "boca", "depressor", "labial"), (), AnatomicalZone.PERIORAL),
    (("mentalis", "mentual", "queixo"), (), AnatomicalZone.MENTALIS),
    (("masseter",), (), AnatomicalZone.MASSETER),
)

MUSCLE_LABELS = MappingProxyType({
    "procerus": "Prócero",
    "corrugator_left": "Corrugador Esq.",
    "corrugator_right": "Corrugador Dir.",
    "corrugator": "Corrugadores",
    "frontalis": "Frontal",
    "orbicularis_oculi_left": "Orbicular Esq.",
    "orbicularis_oculi_right": "Orbicular Dir.",
    "orbicularis_oculi": "Orbicular Olhos",
    "nasalis": "Nasal",
    "mentalis": "Mentual",
    "masseter": "Masseter",
    "depressor_anguli": "Depressor do Ângulo",
    "orbicularis_oris": "Orbicular da Boca",
    "levator_labii": "Levantador do Lábio",
    "zygomaticus_major": "Zigomático Maior",
    "zygomaticus_minor": "Zigomático Menor",
})

# analytics grouping used by dashboards and reports
MUSCLE_REGIONS = MappingProxyType({
    "Glabelar": ("procerus", "corrugator_left", "corrugator_right", "corrugator"),
    "Frontal": ("frontalis",),
    "Periorbital": ("orbicularis_oculi_left", "orbicularis_oculi_right", "orbicularis_oculi"),
    "Nasal": ("nasalis",),
    "Perioral": ("orbicularis_oris", "levator_labii", "depressor_anguli",
                 "zygomaticus_major", "zygomaticus_minor"),
    "Terço Inferior": ("mentalis", "masseter"),
})

_SLUG_SIDE = re.compile(r"_left|_right|_esq|_dir", re.IGNORECASE)
_WORD_SIDE = re.compile(r"esquerdo|esq\.|left|dir\.|direito|right", re.IGNORECASE)

def _lower(muscle) -> str:
    return muscle.lower() if isinstance(muscle, str) else ""

def classify_muscle(muscle: str) -> AnatomicalZone:
    name = _lower(muscle)
    for any_of, all_of, zone in _ZONE_RULES:
        if any(t in name for t in any_of) and all(t in name for t in all_of):
            return zone
    return AnatomicalZone.UNKNOWN

def strip_laterality(muscle: str) -> str:
    """Base muscle name used to pair left/right points, e.g. 'Corrugador Esq.' -> 'corrugador'."""
    return _WORD_SIDE.sub("", _lower(muscle)).strip()

def label_for_muscle(muscle: str) -> str:
    if not isinstance(muscle, str):
        return ""
    base = _SLUG_SIDE.sub("", muscle)
    return MUSCLE_LABELS.get(base) or MUSCLE_LABELS.get(muscle) or muscle

def region_for_muscle(muscle: str) -> str:
    name = _lower(muscle)
    if "procerus" in name or "corrugator" in name:
        return "glabela"
    if "frontal" in name:
        return "frontal"
    if "orbicular" in name and ("oculi" in name or "olho" in name):
        return "periorbital"
    if "nasal" in name:
        return "nasal"
    if any(t in name for t in ("oris", "depressor", "labial", "zygom")):
        return "perioral"
    if any(t in name for t in ("mentalis", "mentual", "masseter")):
        return "mentual"
    return "unknown"

def muscle_matches_region(muscle: str, region: str) -> bool:
    name = _lower(muscle)
    if region in ("glabela", "glabella"):
        return any(t in name for t in ("procerus", "corrugator", "prócero", "corrugador"))
    if region in ("frontal", "frontalis"):
        return "frontal" in name
    if region == "periorbital":
        return "orbicular" in name and ("oculi" in name or "olho" in name)
    if region == "nasal":
        return "nasal" in name
    if region == "perioral":
        return any(t in name for t in ("oris", "depressor", "labial"))
    if region in ("mentual", "mentalis"):
        return "mentalis" in name or "mentual" in name
    return True
