"""HTTP behaviour of the delogo endpoints with the fake engine injected."""
from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FakeVideoEngine, flat_writer
from delogo_worker.api.routes import delogo as delogo_routes
from delogo_worker.engines.base import EraseRegion, Rotate, VideoProbe
from delogo_worker.services.geometry import Box

OCTET = {"content-type": "application/octet-stream"}
AUTO_URL = "/api/v1/auto-delogo"
MANUAL_URL = "/api/v1/delogo"


@pytest.fixture
def workspace_calls(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    calls: list[str] = []
    original = delogo_routes.request_workspace

    def tracking(prefix: str = "delogo-"):
        calls.append(prefix)
        return original(prefix)

    monkeypatch.setattr(delogo_routes, "request_workspace", tracking)
    return calls


class TestAutoDelogo:
    def test_returns_processed_video(self, make_client, temp_root: Path):
        engine = FakeVideoEngine()
        response = make_client(engine).post(AUTO_URL, content=b"VIDEO", headers=OCTET)

        assert response.status_code == 200
        assert response.headers["content-type"] == "video/mp4"
        assert response.headers["content-disposition"] == 'attachment; filename="auto-delogo.mp4"'
        assert response.content.startswith(b"VIDEO|EraseRegion")
        assert list(temp_root.iterdir()) == []

    def test_all_passes_failing_cleans_workspace(self, make_client, temp_root: Path):
        engine = FakeVideoEngine(fail_all_erases=True)
        response = make_client(engine).post(AUTO_URL, content=b"VIDEO", headers=OCTET)

        assert response.status_code == 400
        assert response.text == "No valid watermark region detected"
        workdir = engine.passes[0][0].parent
        assert not workdir.exists()
        assert list(temp_root.iterdir()) == []

    def test_no_watermark(self, make_client):
        engine = FakeVideoEngine(frame_writer=flat_writer())
        response = make_client(engine).post(AUTO_URL, content=b"VIDEO", headers=OCTET)

        assert response.status_code == 400
        assert response.text == "No watermark detected"
        assert engine.passes == []

    def test_extraction_failure_is_server_error(self, make_client, temp_root: Path):
        engine = FakeVideoEngine(fail_extraction=True)
        response = make_client(engine).post(AUTO_URL, content=b"VIDEO", headers=OCTET)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert list(temp_root.iterdir()) == []

    def test_wrong_content_type(self, make_client, workspace_calls):
        response = make_client(FakeVideoEngine()).post(
            AUTO_URL, content=b"VIDEO", headers={"content-type": "video/mp4"}
        )
        assert response.status_code == 400
        assert response.text == "Expected application/octet-stream"
        assert workspace_calls == []

    def test_missing_body(self, make_client, temp_root: Path, workspace_calls):
        engine = FakeVideoEngine()
        response = make_client(engine).post(AUTO_URL, content=b"", headers=OCTET)

        assert response.status_code == 400
        assert response.text == "Missing body"
        assert engine.passes == []
        assert workspace_calls == []
        assert list(temp_root.iterdir()) == []


class TestManualDelogo:
    @pytest.mark.parametrize("query", ["x=1&y=1&w=0&h=10", "x=1&y=1&w=10&h=0", "x=1&y=1"])
    def test_non_positive_rectangle_rejected_before_workspace(self, make_client, workspace_calls, query):
        engine = FakeVideoEngine()
        response = make_client(engine).post(f"{MANUAL_URL}?{query}", content=b"VIDEO", headers=OCTET)

        assert response.status_code == 400
        assert response.text == "Invalid rectangle"
        assert workspace_calls == []
        assert engine.passes == []

    def test_malformed_query_is_bad_request(self, make_client, workspace_calls):
        response = make_client(FakeVideoEngine()).post(
            f"{MANUAL_URL}?x=a&y=1&w=10&h=10", content=b"VIDEO", headers=OCTET
        )
        assert response.status_code == 400
        assert workspace_calls == []

    def test_portrait_rectangle_is_rotated(self, make_client, temp_root: Path):
        engine = FakeVideoEngine(probe=VideoProbe(720, 1280, 5.0))
        response = make_client(engine).post(
            f"{MANUAL_URL}?x=10&y=10&w=100&h=50&vw=720&vh=1280", content=b"VIDEO", headers=OCTET
        )

        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'attachment; filename="delogo.mp4"'
        filters = engine.passes[0][2]
        assert isinstance(filters[0], Rotate)
        assert filters[1] == EraseRegion(Box(10, 610, 50, 100))
        assert list(temp_root.iterdir()) == []

    def test_rotation_metadata_rejected(self, make_client, temp_root: Path):
        engine = FakeVideoEngine(probe=VideoProbe(1920, 1080, 5.0, rotation=270))
        response = make_client(engine).post(
            f"{MANUAL_URL}?x=10&y=10&w=100&h=50", content=b"VIDEO", headers=OCTET
        )

        assert response.status_code == 400
        assert "rotation" in response.text
        assert list(temp_root.iterdir()) == []

    def test_engine_failure_is_server_error(self, make_client, temp_root: Path):
        engine = FakeVideoEngine(fail_all_erases=True)
        response = make_client(engine).post(
            f"{MANUAL_URL}?x=10&y=10&w=100&h=50", content=b"VIDEO", headers=OCTET
        )

        assert response.status_code == 500
        assert response.text.startswith("Delogo pass failed")
        assert list(temp_root.iterdir()) == []


class TestHealth:
    def test_health(self, make_client):
        response = make_client(FakeVideoEngine()).get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_readiness_reports_tools(self, make_client):
        body = make_client(FakeVideoEngine()).get("/api/v1/readiness").json()
        assert body["status"] in {"ready", "degraded"}
        assert set(body) == {"status", "ffmpeg", "ffprobe"}
