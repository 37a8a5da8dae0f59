from __future__ import annotations

import io

import pytest
from PIL import Image

pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402

from stitchpattern.core.jobs import store as job_store  # noqa: E402
from stitchpattern.main import app  # noqa: E402
from tests.utils import make_grid_image  # noqa: E402

client = TestClient(app)


def _png_bytes(img) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(img).save(buf, format="PNG")
    return buf.getvalue()


def _create(params=None, content_type="image/png", payload=None) -> object:
    data = payload if payload is not None else _png_bytes(make_grid_image(4, 3, cell=10))
    return client.post(
        "/api/v1/patterns",
        files={"file": ("grid.png", data, content_type)},
        params=params or {},
    )


@pytest.fixture(autouse=True)
def _clean_store():
    job_store.clear()
    yield
    job_store.clear()


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_pattern_job_round_trip():
    response = _create({"width": 12, "height": 10, "max_colors": 3, "title": "Tiles"})
    assert response.status_code == 200
    job_id = response.json()["job_id"]

    status = client.get(f"/api/v1/patterns/{job_id}").json()
    assert status["status"] == "done"
    assert status["progress"] == 1.0
    assert status["grid"] == {"width": 12, "height": 10}

    pattern = client.get(f"/api/v1/patterns/{job_id}/pattern").json()
    assert pattern["title"] == "Tiles"
    assert len(pattern["grid"]) == 10
    assert all(len(row) == 12 for row in pattern["grid"])
    assert 1 <= len(pattern["usedColors"]) <= 3

    legend = client.get(f"/api/v1/patterns/{job_id}/legend").json()
    assert legend and {"code", "symbol", "count", "percent", "hex"} <= set(legend[0])

    listing = client.get("/api/v1/patterns", params={"status": "done"}).json()
    assert listing["total"] == 1


def test_missing_size_fits_source():
    job_id = _create().json()["job_id"]
    assert client.get(f"/api/v1/patterns/{job_id}").json()["grid"] == {"width": 40, "height": 30}


def test_meta_patch():
    job_id = _create().json()["job_id"]
    response = client.patch(
        f"/api/v1/patterns/{job_id}/meta",
        json={"title": "Renamed", "clothCount": 16, "notes": "hand tuned"},
    )
    assert response.status_code == 200
    assert response.json()["clothCount"] == 16
    pattern = client.get(f"/api/v1/patterns/{job_id}/pattern").json()
    assert pattern["title"] == "Renamed"
    assert pattern["meta"]["notes"] == "hand tuned"

    bad = client.patch(f"/api/v1/patterns/{job_id}/meta", json={"clothCount": 0})
    assert bad.status_code == 422


def test_rejects_bad_uploads():
    assert _create(content_type="text/plain").status_code == 400
    assert _create(payload=b"not a png").status_code == 400
    assert _create({"brand": "Nope"}).status_code == 400
    assert _create({"width": 5, "height": 20}).status_code == 422


def test_unknown_job():
    assert client.get("/api/v1/patterns/missing").status_code == 404
    assert client.get("/api/v1/patterns/missing/legend").status_code == 404


def test_catalog_and_match():
    catalog = client.get("/api/v1/catalogs/DMC").json()
    assert catalog["colors"][0]["code"] == "310"
    assert client.get("/api/v1/catalogs/Nope").status_code == 404

    match = client.post("/api/v1/match", json={"rgb": [250, 250, 250]}).json()
    assert match["color"]["code"] == "White"
    assert match["distance"] == pytest.approx(8.660254, rel=1e-5)

    restricted = client.post(
        "/api/v1/match",
        json={"rgb": [250, 250, 250], "candidates": ["310", "666"]},
    ).json()
    assert restricted["color"]["code"] == "666"

    assert client.post("/api/v1/match", json={"rgb": [0, 0, 0], "candidates": []}).status_code == 400
    assert client.post("/api/v1/match", json={"rgb": [0, 0, 0], "candidates": ["zzz"]}).status_code == 400


def test_match_distance_uses_clamped_query():
    match = client.post("/api/v1/match", json={"rgb": [300, 0, 0]}).json()
    assert match["color"]["code"] == "666"
    assert match["distance"] == pytest.approx(0.0)


def test_unexpected_pipeline_error_marks_job_failed(monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("decoder crashed")

    monkeypatch.setattr("stitchpattern.api.patterns.quantize", explode)
    with pytest.raises(RuntimeError):
        _create({"width": 12, "height": 10})

    failed = client.get("/api/v1/patterns", params={"status": "failed"}).json()
    assert failed["total"] == 1
    assert failed["items"][0]["meta"]["error"] == "decoder crashed"
    assert client.get("/api/v1/patterns", params={"status": "processing"}).json()["total"] == 0
