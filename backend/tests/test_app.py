"""
HTTP tests for the FastAPI surface. Run from repo root:
  python -m pytest backend/tests/test_app.py -v
"""
import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("VEGANCHECK_DEBUG_EVIDENCE", raising=False)
    from app import app
    return TestClient(app)


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["terms"] > 0


def test_validate_list(client):
    r = client.post("/validate", json={"ingredients": ["socker", "mjölkprotein", None, ""]})
    assert r.status_code == 200
    body = r.json()
    assert body["isVegan"] is False
    assert body["nonVeganIngredients"] == ["mjölkprotein"]
    assert body["confidence"] == 1.0
    assert "debugEvidence" not in body


def test_validate_label_text(client):
    r = client.post("/validate", json={"text": "Ingredienser: socker, äggpulver, salt."})
    assert r.status_code == 200
    assert r.json()["nonVeganIngredients"] == ["äggpulver"]


def test_validate_empty_request(client):
    r = client.post("/validate", json={})
    assert r.status_code == 200
    assert r.json()["isVegan"] is True


def test_reconcile_structured(client):
    r = client.post("/reconcile", json={
        "classification": {
            "isVegan": True,
            "confidence": 0.9,
            "ingredientList": ["socker", "vassle"],
            "nonVeganIngredients": [],
            "reasoning": "Inga animaliska ingredienser.",
        },
    })
    assert r.status_code == 200
    body = r.json()
    assert body["isVegan"] is False
    assert body["nonVeganIngredients"] == ["vassle"]
    assert body["needsBetterInput"] is False


def test_reconcile_gates_low_quality(client):
    r = client.post("/reconcile", json={
        "classification": {
            "isVegan": True,
            "confidence": 0.5,
            "ingredientList": ["socker"],
            "reasoning": "The image is blurry.",
        },
    })
    assert r.status_code == 200
    assert r.json()["needsBetterInput"] is True
    assert r.json()["isVegan"] is None

    r = client.post("/reconcile", json={
        "classification": {
            "isVegan": True,
            "confidence": 0.5,
            "ingredientList": ["socker"],
            "reasoning": "The image is blurry.",
        },
        "isCropped": True,
    })
    assert r.json()["needsBetterInput"] is False


def test_reconcile_raw_response(client):
    raw = (
        '```json\n{"isVegan": false, "confidence": 0.85, "ingredientList": ["mjölk", "socker"], '
        '"nonVeganIngredients": ["mjölk"], "reasoning": "Innehåller mjölk."}\n```'
    )
    r = client.post("/reconcile", json={"rawResponse": raw})
    assert r.status_code == 200
    body = r.json()
    assert body["isVegan"] is False
    assert body["nonVeganIngredients"] == ["mjölk"]
    assert body["confidence"] == 0.85


def test_reconcile_explicit_ingredients_used_for_local_check(client):
    r = client.post("/reconcile", json={
        "classification": {"isVegan": True, "confidence": 0.9, "ingredientList": ["socker"]},
        "ingredients": ["socker", "honung"],
    })
    assert r.status_code == 200
    assert r.json()["nonVeganIngredients"] == ["honung"]


def test_reconcile_incomplete_rejected(client):
    r = client.post("/reconcile", json={"classification": {"isVegan": True, "confidence": 0.9}})
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "INCOMPLETE_CLASSIFICATION"
    assert body["details"]["missingFields"] == ["ingredientList"]


def test_reconcile_unparseable_rejected(client):
    r = client.post("/reconcile", json={"rawResponse": "no json here"})
    assert r.status_code == 422
    assert r.json()["error"] == "UNPARSEABLE_CLASSIFICATION"
