import json

import pytest
from fastapi.testclient import TestClient

from labelscan.container import AppContainer
from labelscan.main import app
from labelscan.routers import health as health_router
from labelscan.services.personalization import PersonalizationLayer
from labelscan.services.scan_pipeline import ScanPipeline

from .conftest import FakeOCR
from .test_scan_pipeline import FailingFinalSave

LABEL_TEXT = "INGREDIENTS: Water, Sugar, Sodium Benzoate. Nutrition Facts: Calories 120"


@pytest.fixture
def ocr():
    return FakeOCR(LABEL_TEXT, confidence=88)


@pytest.fixture
def install(knowledge_base, classifier, profiles, history, ocr):
    """Puts a container wired to in-memory stores and the fake OCR on app.state."""

    def _install(history_store=history):
        personalizer = PersonalizationLayer()
        app.state.container = AppContainer(
            knowledge_base=knowledge_base,
            classifier=classifier,
            profiles=profiles,
            history=history_store,
            personalizer=personalizer,
            pipeline=ScanPipeline(
                ocr=ocr,
                classifier=classifier,
                profiles=profiles,
                history=history_store,
                personalizer=personalizer,
            ),
        )

    _install()
    yield _install
    del app.state.container


@pytest.fixture
def client(install):
    return TestClient(app)


def _upload(client, data=b"\xff\xd8jpeg", headers=None):
    return client.post(
        "/scans",
        files={"image": ("label.jpg", data, "image/jpeg")},
        headers=headers or {},
    )


# ── Health ───────────────────────────────────────────────────────────────────


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": "1.0.0"}


@pytest.mark.parametrize("db_ok, expected", [(True, 200), (False, 503)])
def test_ready(client, monkeypatch, db_ok, expected):
    async def fake_check():
        return db_ok

    monkeypatch.setattr(health_router, "check_db_connectivity", fake_check)
    response = client.get("/ready")
    assert response.status_code == expected
    assert response.json()["knowledge_base"] == "ok"


# ── Scans ────────────────────────────────────────────────────────────────────


def test_upload_scan(client, ocr):
    response = _upload(client, headers={"X-Device-ID": "phone-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["session"]["status"] == "completed"
    assert body["session"]["image_ref"] == "label.jpg"
    assert body["session"]["extraction"]["ingredients"] == ["Water", "Sugar", "Sodium Benzoate"]
    assert body["analysis"]["summary"] == {"safe": 1, "caution": 1, "avoid": 1}
    assert body["analysis"]["overall_safety_score"] == 60
    assert ocr.calls == 1


def test_upload_rejects_empty_image(client):
    response = _upload(client, data=b"")
    assert response.status_code == 400


def test_extraction_failure_is_422(client, ocr):
    ocr.error = "No text found"
    response = _upload(client)
    assert response.status_code == 422
    assert response.json() == {"detail": "No text found", "code": "EXTRACTION_FAILED"}


def test_failed_save_returns_503_with_result(client, install):
    install(FailingFinalSave())
    response = _upload(client)
    assert response.status_code == 503
    body = response.json()
    assert body["code"] == "PERSISTENCE_FAILURE"
    assert body["result"]["analysis"]["summary"]["avoid"] == 1


def test_analyze_ingredient_list(client):
    response = client.post("/scans/analyze", json={"ingredients": ["Water", "Aspartame"]})
    assert response.status_code == 200
    body = response.json()
    assert [i["name"] for i in body["ingredients"]] == ["Water", "Aspartame"]
    assert body["outcome"] == "analyzed"


def test_analyze_empty_list(client):
    body = client.post("/scans/analyze", json={"ingredients": []}).json()
    assert body["outcome"] == "no_ingredients_found"
    assert body["overall_safety_score"] == 100


def test_analyze_text(client):
    response = client.post("/scans/text", json={"text": "Ingredients: Salt, Water"})
    assert response.status_code == 200
    assert [i["name"] for i in response.json()["ingredients"]] == ["Salt", "Water"]


def test_history_endpoints(client):
    first = _upload(client).json()["session"]["id"]
    second = _upload(client).json()["session"]["id"]

    listed = client.get("/scans").json()
    assert {s["id"] for s in listed} == {first, second}
    assert len(client.get("/scans", params={"limit": 1}).json()) == 1

    assert client.get(f"/scans/{first}").json()["status"] == "completed"
    assert client.get("/scans/scan_missing").status_code == 404

    stats = client.get("/scans/stats").json()
    assert stats["total_scans"] == 2
    assert stats["completed_scans"] == 2
    assert stats["average_safety_score"] == 60

    assert client.delete(f"/scans/{first}").status_code == 204
    assert client.delete(f"/scans/{first}").status_code == 404
    assert client.delete("/scans").status_code == 204
    assert client.get("/scans").json() == []


# ── Dietary ──────────────────────────────────────────────────────────────────


def test_preferences_change_scan_results(client):
    response = client.patch("/dietary/preferences/low-sodium", json={"is_active": True})
    assert response.status_code == 200
    active = [p["id"] for p in response.json()["preferences"] if p["is_active"]]
    assert active == ["low-sodium"]

    body = client.post("/scans/analyze", json={"ingredients": ["Salt"]}).json()
    assert body["ingredients"][0]["rating"] == "caution"
    assert body["ingredients"][0]["original_rating"] == "safe"

    toggled = client.patch("/dietary/preferences/low-sodium", json={}).json()
    assert not any(p["is_active"] for p in toggled["preferences"])


def test_unknown_preference_is_404(client):
    response = client.patch("/dietary/preferences/carnivore", json={"is_active": True})
    assert response.status_code == 404
    assert response.json()["code"] == "PREFERENCE_NOT_FOUND"


def test_custom_avoidances(client):
    response = client.post(
        "/dietary/avoidances", json={"ingredient_name": "Carrageenan", "reason": "Bloating"}
    )
    assert response.status_code == 201
    avoidance = response.json()
    assert avoidance["severity"] == "avoid"

    check = client.post("/dietary/check", json={"ingredient": "carrageenan"}).json()
    assert check == {
        "should_avoid": True,
        "should_flag": False,
        "reasons": ["Custom restriction: Bloating"],
    }
    assert client.get("/dietary/insights").json()["custom_avoidances"] == 1

    profile = client.delete(f"/dietary/avoidances/{avoidance['id']}").json()
    assert profile["custom_avoidances"] == []
    missing = client.delete(f"/dietary/avoidances/{avoidance['id']}")
    assert missing.status_code == 404
    assert missing.json()["code"] == "AVOIDANCE_NOT_FOUND"


def test_export_import_and_reset(client):
    client.patch("/dietary/preferences/vegan", json={"is_active": True})

    exported = client.get("/dietary/export")
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith("application/json")
    assert "attachment" in exported.headers["content-disposition"]

    reset = client.post("/dietary/reset").json()
    assert not any(p["is_active"] for p in reset["preferences"])

    imported = client.post("/dietary/import", content=exported.content)
    assert imported.status_code == 200
    assert [p["id"] for p in imported.json()["preferences"] if p["is_active"]] == ["vegan"]

    bad = client.post("/dietary/import", content=json.dumps({"nothing": True}))
    assert bad.status_code == 422
    assert bad.json()["code"] == "INVALID_PROFILE"


def test_suggestions_from_history(client, ocr):
    ocr.text = "Ingredients: Enriched Flour, Sugar"
    _upload(client)
    suggestions = client.get("/dietary/suggestions").json()
    assert suggestions["suggested_preferences"] == ["gluten-free", "diabetic"]


# ── Ingredients ──────────────────────────────────────────────────────────────


def test_ingredient_suggestions(client):
    names = client.get("/ingredients/suggestions", params={"q": "artificial color"}).json()
    assert "Artificial Color Red 40" in names
    assert len(client.get("/ingredients/suggestions", params={"q": "a", "limit": 2}).json()) == 2


def test_classify_single_ingredient(client):
    body = client.get("/ingredients/Sodium Benzoate").json()
    assert body["rating"] == "avoid"
    assert body["matched_entry"] == "Sodium Benzoate"
    assert body["position"] == 1
