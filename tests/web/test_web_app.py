"""Tests for the FastAPI web app."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

pytest.importorskip("fastapi.testclient")

from fastapi.testclient import TestClient  # noqa: E402

from annosync.core.domain.embedding import extract  # noqa: E402
from annosync.core.domain.events import EventBus  # noqa: E402
from annosync.core.ports.config_provider import (  # noqa: E402
    AppConfig,
    Mode,
    ServerConfig,
    TrackerConfig,
    WorkflowConfig,
)
from annosync.core.ports.issue_tracker import IssueTrackerError, RepositoryRef  # noqa: E402
from annosync.web import create_app  # noqa: E402

from conftest import FakeTracker, make_annotation, stored_issue  # noqa: E402

JSONDict = dict[str, Any]


def _payload(value: str = "Typo here", annotation_id: str = "#abc") -> JSONDict:
    """Return an annotation as posted by the frontend."""

    return {
        "@context": "http://www.w3.org/ns/anno.jsonld",
        "type": "Annotation",
        "body": [{"type": "TextualBody", "purpose": "commenting", "value": value}],
        "target": {"selector": [{"type": "TextQuoteSelector", "exact": "calrify"}]},
        "id": annotation_id,
    }


@pytest.fixture
def frontend(tmp_path: Path) -> Path:
    """Create a minimal frontend directory."""

    root = tmp_path / "frontend"
    (root / "recogito").mkdir(parents=True)
    (root / "assets").mkdir()
    (root / "index.html").write_text("<main>{DOCUMENT}</main>", encoding="utf-8")
    (root / "recogito" / "recogito.min.js").write_text("var Recogito;", encoding="utf-8")
    (root / "assets" / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    (tmp_path / "document.html").write_text("<p>Hello</p>", encoding="utf-8")
    return root


def _config(frontend: Path, mode: Mode = Mode.READ_WRITE) -> AppConfig:
    """Return a configuration pointing at ``frontend``."""

    repository = RepositoryRef("acme", "notes")
    return AppConfig(
        tracker=TrackerConfig(token="secret"),
        repository=repository,
        mode=mode,
        workflows={
            "annotation": WorkflowConfig("annotation", "annotation", "[Annotation]", repository),
            "validation": WorkflowConfig("validation", "validation", "[Validation]", repository),
        },
        server=ServerConfig(
            document=frontend.parent / "document.html",
            frontend_dir=frontend,
        ),
    )


def _client(tracker: FakeTracker, frontend: Path, mode: Mode = Mode.READ_WRITE) -> TestClient:
    """Return a test client for an app backed by ``tracker``."""

    return TestClient(create_app(_config(frontend, mode), tracker))


class TestFrontend:
    """Tests for the static routes."""

    def test_index_inlines_document(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).get("/")

        assert response.status_code == 200
        assert response.text == "<main><p>Hello</p></main>"
        assert response.headers["content-type"].startswith("text/html")

    def test_mode(self, tracker: FakeTracker, frontend: Path) -> None:
        assert _client(tracker, frontend).get("/mode").json() == {"readOnly": False}
        assert _client(tracker, frontend, Mode.READ_ONLY).get("/mode").json() == {"readOnly": True}

    def test_recogito_asset(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).get("/recogito/recogito.min.js")

        assert response.status_code == 200
        assert response.text == "var Recogito;"
        assert "javascript" in response.headers["content-type"]

    def test_unknown_asset(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).get("/recogito/secrets.txt")

        assert response.status_code == 404

    def test_missing_asset_file(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).get("/recogito/recogito.min.css")

        assert response.status_code == 404

    def test_favicon(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).get("/favicon.ico")

        assert response.status_code == 200
        assert response.content == b"\x00\x00\x01\x00"


class TestListAnnotations:
    """Tests for GET /annotations."""

    def test_lists_with_status(self, tracker: FakeTracker, frontend: Path) -> None:
        tracker.issues = [
            stored_issue(1, make_annotation("#a")),
            stored_issue(2, make_annotation("#b"), state="closed"),
        ]

        response = _client(tracker, frontend).get("/annotations")

        assert response.status_code == 200
        assert [(a["id"], a["meta"]) for a in response.json()] == [
            ("#a", "Open"),
            ("#b", "Closed"),
        ]

    def test_workflow_param(self, tracker: FakeTracker, frontend: Path) -> None:
        tracker.issues = [
            stored_issue(1, make_annotation("#a")),
            stored_issue(2, make_annotation("#v"), label="validation"),
        ]

        response = _client(tracker, frontend).get("/annotations", params={"workflow": "validation"})

        assert [a["id"] for a in response.json()] == ["#v"]

    def test_unknown_workflow(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).get("/annotations", params={"workflow": "review"})

        assert response.status_code == 404

    def test_read_only_can_list(self, tracker: FakeTracker, frontend: Path) -> None:
        tracker.issues = [stored_issue(1, make_annotation("#a"))]

        response = _client(tracker, frontend, Mode.READ_ONLY).get("/annotations")

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_tracker_failure(self, tracker: FakeTracker, frontend: Path) -> None:
        tracker.fail_on["list"] = IssueTrackerError("GitHub is down")

        response = _client(tracker, frontend).get("/annotations")

        assert response.status_code == 502
        assert response.json() == {"detail": "GitHub is down"}


class TestPostAnnotation:
    """Tests for POST /annotation."""

    def test_create_then_update(self, tracker: FakeTracker, frontend: Path) -> None:
        client = _client(tracker, frontend)

        created = client.post("/annotation", json=_payload("Typo here"))
        assert created.status_code == 201
        issue = tracker.get(1)
        assert issue.title == "[Annotation] Typo here"
        assert issue.body.startswith("> calrify\r\n")
        before = extract(issue.body)

        updated = client.post("/annotation", json=_payload("Typo fixed"))
        assert updated.status_code == 202
        assert len(tracker.issues) == 1

        after = extract(tracker.get(1).body)
        assert after.annotation.comment() == "Typo fixed"
        assert after.prefix == before.prefix
        assert after.suffix == before.suffix

    def test_meta_ignored(self, tracker: FakeTracker, frontend: Path) -> None:
        payload = _payload()
        payload["meta"] = "Closed"

        _client(tracker, frontend).post("/annotation", json=payload)

        assert extract(tracker.get(1).body).annotation.meta is None

    def test_validation_workflow(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).post(
            "/annotation", params={"workflow": "validation"}, json=_payload()
        )

        assert response.status_code == 201
        assert tracker.get(1).title == "[Validation] Typo here"
        assert tracker.get(1).labels == ["validation"]

    def test_read_only_forbidden(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend, Mode.READ_ONLY).post("/annotation", json=_payload())

        assert response.status_code == 403
        assert tracker.list_calls == []
        assert tracker.created == []

    def test_tracker_failure(self, tracker: FakeTracker, frontend: Path) -> None:
        tracker.fail_on["create"] = IssueTrackerError("Validation failed")

        response = _client(tracker, frontend).post("/annotation", json=_payload())

        assert response.status_code == 406

    def test_undecodable_annotation(self, tracker: FakeTracker, frontend: Path) -> None:
        payload = _payload()
        payload["target"]["selector"][0]["type"] = "XPathSelector"

        response = _client(tracker, frontend).post("/annotation", json=payload)

        assert response.status_code == 422
        assert tracker.list_calls == []

    def test_missing_body(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).post("/annotation")

        assert response.status_code == 422


class TestDeleteAnnotation:
    """Tests for DELETE /annotation."""

    def test_not_implemented(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).delete("/annotation")

        assert response.status_code == 501
        assert tracker.updates == []

    def test_unknown_workflow(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend).delete("/annotation", params={"workflow": "nope"})

        assert response.status_code == 501

    def test_read_only(self, tracker: FakeTracker, frontend: Path) -> None:
        response = _client(tracker, frontend, Mode.READ_ONLY).delete("/annotation")

        assert response.status_code == 501


class TestAppState:
    """Tests for the objects shared through the app state."""

    def test_annotation_routes_mounted(self, tracker: FakeTracker, frontend: Path) -> None:
        app = create_app(_config(frontend), tracker)

        paths = {(route.path, method) for route in app.routes for method in getattr(route, "methods", ())}
        assert ("/annotations", "GET") in paths
        assert ("/annotation", "POST") in paths
        assert ("/annotation", "DELETE") in paths

    def test_event_history_bounded(self, tracker: FakeTracker, frontend: Path) -> None:
        bus = EventBus(max_history=10)
        client = TestClient(create_app(_config(frontend), tracker, event_bus=bus))

        for _ in range(20):
            assert client.post("/annotation", json=_payload()).status_code in (201, 202)

        assert len(tracker.issues) == 1
        assert len(bus.get_history()) == 10
