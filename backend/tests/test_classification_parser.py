"""
Unit tests for decoding the external classifier's output.
Run from repo root: python -m pytest backend/tests/test_classification_parser.py -v
"""
import pytest


def _payload(**overrides):
    payload = {
        "isVegan": True,
        "confidence": 0.9,
        "ingredientList": ["socker", "salt"],
        "nonVeganIngredients": [],
        "reasoning": "Inga animaliska ingredienser.",
    }
    payload.update(overrides)
    return payload


def test_decode_complete_payload():
    from vegancheck.ingestion import decode_classification
    result = decode_classification(_payload(productName=" Kakor "))
    assert result.is_vegan is True
    assert result.confidence == 0.9
    assert result.ingredient_list == ["socker", "salt"]
    assert result.non_vegan_ingredients == []
    assert result.product_name == "Kakor"


def test_missing_ingredient_list_rejected():
    from vegancheck.ingestion import decode_classification
    from vegancheck.models import IncompleteClassificationError
    payload = _payload()
    del payload["ingredientList"]
    with pytest.raises(IncompleteClassificationError) as exc:
        decode_classification(payload)
    assert exc.value.missing_fields == ["ingredientList"]


def test_missing_several_fields_listed_in_order():
    from vegancheck.ingestion import decode_classification
    from vegancheck.models import IncompleteClassificationError
    with pytest.raises(IncompleteClassificationError) as exc:
        decode_classification({"ingredientList": []})
    assert exc.value.missing_fields == ["isVegan", "confidence"]


def test_non_object_rejected():
    from vegancheck.ingestion import decode_classification
    from vegancheck.models import IncompleteClassificationError
    with pytest.raises(IncompleteClassificationError):
        decode_classification(["isVegan", True])


def test_ingredient_list_must_be_list():
    from vegancheck.ingestion import decode_classification
    from vegancheck.models import IncompleteClassificationError
    with pytest.raises(IncompleteClassificationError):
        decode_classification(_payload(ingredientList="socker, salt"))


@pytest.mark.parametrize("raw,expected", [
    (1.7, 1.0),
    (-0.2, 0.0),
    ("0.75", 0.75),
    ("85%", 0.85),
    ("abc", 0.0),
    (None, 0.0),
    (True, 0.0),
])
def test_confidence_coerced_into_unit_interval(raw, expected):
    from vegancheck.ingestion import decode_classification
    assert decode_classification(_payload(confidence=raw)).confidence == pytest.approx(expected)


def test_non_boolean_is_vegan_is_undecided():
    from vegancheck.ingestion import decode_classification
    assert decode_classification(_payload(isVegan="yes")).is_vegan is None
    assert decode_classification(_payload(isVegan=None)).is_vegan is None


def test_lists_trimmed_and_deduplicated():
    from vegancheck.ingestion import decode_classification
    result = decode_classification(_payload(nonVeganIngredients=["Mjölk", "mjölk", " vassle ", "", None]))
    assert result.non_vegan_ingredients == ["Mjölk", "vassle"]


def test_quality_codes_upper_cased():
    from vegancheck.ingestion import decode_classification
    result = decode_classification(_payload(imageQualityIssues=["blur", "Poor_Lighting"]))
    assert result.image_quality_issues == ["BLUR", "POOR_LIGHTING"]


def test_parse_fenced_response():
    from vegancheck.ingestion import parse_classification_text
    text = (
        "Here is my analysis:\n```json\n"
        '{"isVegan": false, "confidence": 0.8, "ingredientList": ["mjölk", "socker"], '
        '"nonVeganIngredients": ["mjölk"], "reasoning": "Innehåller mjölk."}\n```'
    )
    result = parse_classification_text(text)
    assert result.is_vegan is False
    assert result.non_vegan_ingredients == ["mjölk"]


def test_parse_object_inside_prose():
    from vegancheck.ingestion import parse_classification_text
    text = (
        'Result {"isVegan": true, "confidence": 0.95, "ingredientList": ["tofu"], '
        '"nonVeganIngredients": [], "reasoning": "ok"} end of answer'
    )
    result = parse_classification_text(text)
    assert result.is_vegan is True
    assert result.ingredient_list == ["tofu"]


def test_parse_without_json_raises():
    from vegancheck.ingestion import parse_classification_text
    from vegancheck.models import ClassificationParseError
    with pytest.raises(ClassificationParseError):
        parse_classification_text("I could not see the label, sorry.")
    with pytest.raises(ClassificationParseError):
        parse_classification_text("")


def test_parse_incomplete_json_raises_incomplete():
    from vegancheck.ingestion import parse_classification_text
    from vegancheck.models import IncompleteClassificationError
    with pytest.raises(IncompleteClassificationError):
        parse_classification_text('{"isVegan": true, "confidence": 0.9}')


def test_external_round_trip_to_dict():
    from vegancheck.ingestion import decode_classification
    out = decode_classification(_payload(imageQualityIssues=["BLUR"])).to_dict()
    assert out["isVegan"] is True
    assert out["ingredientList"] == ["socker", "salt"]
    assert out["imageQualityIssues"] == ["BLUR"]
    assert "productName" not in out
