from facemap.ingest import looks_normalized, parse_ai_points

def test_normalized_coordinates_are_converted():
    [p] = parse_ai_points([{"muscle": "procerus", "x": 0.5, "y": 0.3, "dosage": 8}]).points
    assert (p.x, p.y) == (50, 30)
    assert p.depth == "superficial"
    assert p.id

def test_percentage_coordinates_pass_through():
    [p] = parse_ai_points([{"id": "corr_l1", "muscle": "corrugator_left", "x": 38, "y": 27,
                            "depth": "deep", "dosage": 8, "notes": "Corrugador medial"}]).points
    assert (p.id, p.x, p.y, p.depth, p.notes) == ("corr_l1", 38, 27, "deep", "Corrugador medial")

def test_out_of_range_is_clamped():
    [p] = parse_ai_points([{"muscle": "masseter", "x": 150, "y": -4}]).points
    assert (p.x, p.y) == (100, 0)

def test_unit_corner_stays_percentage():
    assert not looks_normalized(1, 1)
    assert looks_normalized(0.2, 1)

def test_coercions():
    [p] = parse_ai_points([{"muscle": "nasalis", "x": 50, "y": 48, "depth": "Profundo",
                            "dosage": "-3", "confidence": 1.4}]).points
    assert p.depth == "deep"
    assert p.dosage == 0
    assert p.confidence == 1.0

def test_dict_payload_and_rejections():
    payload = {"injectionPoints": [
        {"id": "ok", "muscle": "procerus", "x": 50, "y": 30, "dosage": "8"},
        {"id": "no_muscle", "x": 50, "y": 30},
        {"id": "bad_x", "muscle": "procerus", "x": "abc", "y": 30},
        {"id": "no_y", "muscle": "procerus", "x": 50},
        "junk",
    ], "confidence": 0.75}
    result = parse_ai_points(payload)
    assert [p.id for p in result.points] == ["ok"]
    assert result.points[0].dosage == 8.0
    assert [r["ref"] for r in result.rejected] == ["no_muscle", "bad_x", "no_y", "4"]

def test_garbage_payload():
    assert parse_ai_points({"injectionPoints": "nope"}).points == []
    assert parse_ai_points(None).points == []
