import pytest

from facemap.schemas import ValidationResult, ValidationWarning
from facemap.validation import (check_hierarchy, check_proximity, check_symmetry,
                                get_validation_summary, validate_anatomical_consistency)

def _of_type(result, kind):
    return [w for w in result.warnings if w.type == kind]

def test_empty_input_is_valid():
    result = validate_anatomical_consistency([])
    assert result.model_dump() == {"isValid": True, "warnings": [], "errors": []}

@pytest.mark.parametrize("bx,expected", [
    (55, None),       # sum 95
    (70, None),       # sum 110, exactly at tolerance
    (71, "medium"),
    (79.5, "medium"),
    (80, "high"),       # deviation exactly 20
    (80.5, "high"),
    (85, "high"),
])
def test_symmetry_x(point, bx, expected):
    a = point("a", "corrugator_left", 40, 30, dosage=8)
    b = point("b", "corrugator_right", bx, 30, dosage=8)
    sym = _of_type(validate_anatomical_consistency([a, b]), "symmetry")
    if expected is None:
        assert sym == []
    else:
        assert len(sym) == 1
        assert sym[0].severity == expected
        assert sym[0].affectedPoints == ["a", "b"]

def test_symmetry_height(point):
    a = point("a", "corrugator_left", 40, 30)
    assert check_symmetry([a, point("b", "corrugator_right", 60, 35)]) == []
    [w] = check_symmetry([a, point("b", "corrugator_right", 60, 36)])
    assert (w.type, w.severity) == ("symmetry", "medium")
    [w] = check_symmetry([a, point("b", "corrugator_right", 60, 41)])
    assert w.severity == "high"

def test_symmetry_dosage(point):
    a = point("a", "orbicularis_oculi_left", 22, 40, dosage=8)
    assert check_symmetry([a, point("b", "orbicularis_oculi_right", 78, 40, dosage=10)]) == []
    [w] = check_symmetry([a, point("b", "orbicularis_oculi_right", 78, 40, dosage=11)])
    assert (w.type, w.severity) == ("dosage", "low")
    [w] = check_symmetry([a, point("b", "orbicularis_oculi_right", 78, 40, dosage=14)])
    assert w.severity == "high"

def test_symmetry_pairs_portuguese_labels(point):
    a = point("a", "Corrugador Esq.", 30, 30)
    b = point("b", "Corrugador Dir.", 85, 30)
    [w] = check_symmetry([a, b])
    assert w.affectedPoints == ["a", "b"]

def test_midline_points_have_no_side(point):
    assert check_symmetry([point("a", "procerus", 50, 30), point("b", "procerus", 50, 40)]) == []

def test_danger_zone(point):
    result = validate_anatomical_consistency([point("p1", "corrugator_tail", 30, 34)])
    assert result.isValid is False
    assert len(result.errors) == 1
    err = result.errors[0]
    assert err.type == "danger_zone"
    assert err.affectedPoints == ["p1"]
    assert "Margem Orbital Esquerda" in err.message

def test_danger_zone_bounds_inclusive(point):
    result = validate_anatomical_consistency([point("p1", "depressor_anguli", 42, 70)])
    assert [e.affectedPoints for e in result.errors] == [["p1"]]

def test_proximity(point):
    [w] = check_proximity([point("a", "xyz", 50, 50), point("b", "xyz", 52, 50)])
    assert (w.type, w.severity, w.affectedPoints) == ("proximity", "high", ["a", "b"])
    [w] = check_proximity([point("a", "xyz", 50, 50), point("b", "xyz", 54, 50)])
    assert w.severity == "medium"
    assert check_proximity([point("a", "xyz", 50, 50), point("b", "xyz", 56, 50)]) == []

def test_proximity_checks_every_pair(point):
    pts = [point(str(i), "xyz", 50 + i, 50) for i in range(4)]
    assert len(check_proximity(pts)) == 6

@pytest.mark.parametrize("muscle,y,n", [
    ("frontalis", 15, 0),
    ("frontalis", 30, 1),
    ("frontalis", 3, 1),
    ("procerus", 45, 1),
    ("mentalis", 85, 0),
    ("masseter", 40, 1),
    ("masseter", 60, 0),
    ("xyz123", 99, 0),
])
def test_hierarchy(point, muscle, y, n):
    warnings = check_hierarchy([point("a", muscle, 50, y)])
    assert len(warnings) == n
    assert all(w.severity == "medium" and w.type == "hierarchy" for w in warnings)

def test_hierarchy_messages(point):
    [low] = check_hierarchy([point("a", "frontalis", 50, 30)])
    [high] = check_hierarchy([point("a", "frontalis", 50, 3)])
    assert "muito baixo" in low.message
    assert "muito alto" in high.message

def test_all_checks_run_together(point):
    pts = [
        point("a", "corrugator_left", 40, 30, dosage=8),
        point("b", "corrugator_right", 80, 30, dosage=8),
        point("c", "frontalis", 41, 33),
    ]
    result = validate_anatomical_consistency(pts)
    kinds = {w.type for w in result.warnings}
    assert {"symmetry", "hierarchy", "proximity"} <= kinds
    assert result.errors and not result.isValid

def test_summary():
    assert get_validation_summary(ValidationResult(isValid=True)).startswith("✓")
    warn = lambda s: ValidationWarning(type="proximity", message="m", affectedPoints=["a"], severity=s)
    r = ValidationResult(isValid=True, warnings=[warn("high"), warn("medium"), warn("medium"), warn("low")])
    assert get_validation_summary(r) == (
        "1 aviso(s) importante(s) | 2 sugestão(ões) | 1 observação(ões)")

def test_summary_with_errors(point):
    result = validate_anatomical_consistency([point("p1", "corrugator_tail", 30, 34)])
    assert get_validation_summary(result) == "⚠️ 1 erro(s) crítico(s)"
