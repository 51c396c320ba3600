"""HTTP API tests using FastAPI's TestClient."""

from __future__ import annotations

import asyncio
import inspect
import io
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

sys.path.append(str(Path(__file__).resolve().parents[1]))

from matcher_app.app import JewelMatcherApp
from matcher_app.config import MatcherConfig
from models.catalog_item import from_raw_metadata
from server import api
from tools.catalog_store import InMemoryCatalogStore


def _png(rgb) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (60, 60), color=rgb).save(buffer, format="PNG")
    return buffer.getvalue()


class _OfflineCatalog(InMemoryCatalogStore):
    def query(self, catalog_filter, limit=20):
        raise ConnectionError("catalog offline")


@pytest.fixture()
def client():
    catalog = InMemoryCatalogStore(
        [
            from_raw_metadata(
                {
                    "item_id": "silver_hoops",
                    "name": "Silver Hoops",
                    "price": 6000,
                    "category": "earrings",
                    "style": "modern",
                    "occasions": ["daily"],
                    "materials": ["silver"],
                    "colors": ["silver"],
                    "createdAt": "2024-05-01T00:00:00+00:00",
                }
            ),
            from_raw_metadata(
                {
                    "item_id": "temple_necklace",
                    "name": "Temple Necklace",
                    "price": 48000,
                    "category": "necklace",
                    "style": "traditional",
                    "occasions": ["wedding", "festival"],
                    "materials": ["gold"],
                    "colors": ["gold"],
                    "gender": "women",
                    "createdAt": "2024-04-01T00:00:00+00:00",
                }
            ),
        ]
    )
    api.set_matcher(JewelMatcherApp(config=MatcherConfig(max_upload_bytes=50_000), catalog=catalog))
    yield TestClient(api.app)
    api.set_matcher(None)


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "jewel-match"


def test_healthcheck_builds_matcher_off_the_event_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    built = []

    def _factory() -> JewelMatcherApp:
        # Plain ``def`` endpoints run in the threadpool, where no loop is running.
        with pytest.raises(RuntimeError):
            asyncio.get_running_loop()
        built.append(True)
        return JewelMatcherApp(config=MatcherConfig(), catalog=InMemoryCatalogStore())

    api.set_matcher(None)
    monkeypatch.setattr(api, "JewelMatcherApp", _factory)
    try:
        response = TestClient(api.app).get("/healthz")
    finally:
        api.set_matcher(None)

    assert not inspect.iscoroutinefunction(api.healthcheck)
    assert response.status_code == 200
    assert built == [True]


def test_analyze_with_upload(client: TestClient) -> None:
    response = client.post(
        "/recommendations/analyze",
        files={"image": ("look.png", _png((20, 20, 210)), "image/png")},
        data={"budget": "low"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["dominant_colors"] == ["blue"]
    assert body["preferences"]["style"] == "modern"
    assert [item["item_id"] for item in body["recommendations"]] == ["silver_hoops"]


def test_analyze_requires_an_image(client: TestClient) -> None:
    response = client.post("/recommendations/analyze", data={"style": "modern"})
    assert response.status_code == 400


def test_analyze_rejects_non_image_upload(client: TestClient) -> None:
    response = client.post(
        "/recommendations/analyze",
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


def test_analyze_rejects_oversized_upload(client: TestClient) -> None:
    response = client.post(
        "/recommendations/analyze",
        files={"image": ("huge.png", b"\x00" * 60_000, "image/png")},
    )
    assert response.status_code == 400


def test_analyze_rejects_unknown_style(client: TestClient) -> None:
    response = client.post(
        "/recommendations/analyze",
        files={"image": ("look.png", _png((20, 20, 210)), "image/png")},
        data={"style": "grunge"},
    )
    assert response.status_code == 422


def test_analyze_rejects_bad_image_url(client: TestClient) -> None:
    response = client.post("/recommendations/analyze", data={"image_url": "file:///etc/passwd"})
    assert response.status_code == 400


def test_suggest_with_preferences(client: TestClient) -> None:
    response = client.post(
        "/recommendations/suggest",
        json={"occasion": "wedding", "style": "Traditional", "gender": "women", "budget": 50000},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["dominant_colors"] == []
    top = body["recommendations"][0]
    assert top["item_id"] == "temple_necklace"
    assert top["score_breakdown"]["gender"] == 10.0


def test_suggest_rejects_unknown_category(client: TestClient) -> None:
    response = client.post("/recommendations/suggest", json={"category": "crown"})
    assert response.status_code == 422


def test_suggest_unknown_occasion_is_ignored(client: TestClient) -> None:
    response = client.post("/recommendations/suggest", json={"occasion": "brunch"})
    assert response.status_code == 200
    assert response.json()["preferences"]["occasion"] is None
    assert len(response.json()["recommendations"]) == 2


def test_catalog_outage_maps_to_503() -> None:
    api.set_matcher(JewelMatcherApp(config=MatcherConfig(), catalog=_OfflineCatalog()))
    try:
        response = TestClient(api.app).post("/recommendations/suggest", json={"style": "modern"})
    finally:
        api.set_matcher(None)
    assert response.status_code == 503
