"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from pose_timer.api.app import create_app
from pose_timer.containers import AppContainer
from pose_timer.domain.poses import Difficulty
from tests.conftest import FakeKeywordClient, FakeTime, InMemoryPoseRepository


def _seed(repository: InMemoryPoseRepository) -> None:
    repository.create_pose("https://images.example/1.jpg", ["standing", "contrapposto"])
    repository.create_pose("https://images.example/2.jpg", ["sitting"])
    repository.create_pose("https://images.example/3.jpg", [])


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_poses_with_difficulty_filter(
    container: AppContainer, pose_repository: InMemoryPoseRepository
) -> None:
    _seed(pose_repository)
    pose_repository.update_difficulty(2, Difficulty.MEDIUM, "Crossed legs")
    client = TestClient(create_app(container))

    all_poses = client.get("/poses").json()["poses"]
    medium = client.get("/poses", params={"difficulty": 2}).json()["poses"]
    invalid = client.get("/poses", params={"difficulty": 9})

    assert len(all_poses) == 3
    assert [pose["id"] for pose in medium] == [2]
    assert medium[0]["difficulty_label"] == "Medium"
    assert invalid.status_code == 422


def test_pose_crud_endpoints(
    container: AppContainer, pose_repository: InMemoryPoseRepository
) -> None:
    client = TestClient(create_app(container))

    created = client.post(
        "/poses",
        json={"image_url": "https://images.example/9.jpg", "keywords": ["a", "a"]},
    )
    assert created.status_code == 201
    pose_id = created.json()["id"]
    assert created.json()["keywords"] == ["a"]

    updated = client.put(f"/poses/{pose_id}/keywords", json={"keywords": ["lying"]})
    assert updated.json()["keywords"] == ["lying"]

    rated = client.put(
        f"/poses/{pose_id}/difficulty",
        json={"difficulty_level": 1, "difficulty_reason": "Relaxed"},
    )
    assert rated.json()["difficulty_label"] == "Easy"

    assert client.delete(f"/poses/{pose_id}").status_code == 204
    assert client.delete(f"/poses/{pose_id}").status_code == 404
    assert client.get(f"/poses/{pose_id}").status_code == 404


def test_generate_keywords_and_difficulty(
    container: AppContainer, pose_repository: InMemoryPoseRepository
) -> None:
    _seed(pose_repository)
    client = TestClient(create_app(container))

    keywords = client.post("/poses/3/generate-keywords")
    difficulty = client.post("/poses/3/analyze-difficulty")
    missing = client.post("/poses/42/generate-keywords")

    assert keywords.json()["keywords"] == ["seated", "twisting"]
    assert difficulty.json()["difficulty_level"] == 3
    assert missing.status_code == 404


def test_analysis_failure_returns_bad_gateway(
    container: AppContainer,
    pose_repository: InMemoryPoseRepository,
    keyword_client: FakeKeywordClient,
) -> None:
    _seed(pose_repository)
    keyword_client.error = RuntimeError("upstream down")
    client = TestClient(create_app(container))

    response = client.post("/poses/1/analyze-difficulty")

    assert response.status_code == 502


def test_analyze_description(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/keywords/analyze", json={"description": "calm stance"})

    assert response.json() == {"keywords": ["standing", "contrapposto"]}


def test_session_lifecycle(
    container: AppContainer,
    pose_repository: InMemoryPoseRepository,
    fake_time: FakeTime,
) -> None:
    _seed(pose_repository)
    client = TestClient(create_app(container))

    created = client.post(
        "/sessions",
        json={
            "pose_length_seconds": 30,
            "session_type": "count",
            "pose_count": 4,
            "match_terms": [],
            "randomize": False,
        },
    )
    assert created.status_code == 201
    body = created.json()
    session_id = body["id"]
    assert body["total"] == 4
    assert body["position"] == 1
    assert body["current_pose"]["id"] == 1
    assert body["remaining_display"] == "00:30"
    assert body["is_running"] is False

    client.post(f"/sessions/{session_id}/start")
    fake_time.advance(10)
    snapshot = client.get(f"/sessions/{session_id}").json()
    assert snapshot["remaining_seconds"] == 20
    assert snapshot["is_running"] is True

    fake_time.advance(20)
    snapshot = client.get(f"/sessions/{session_id}").json()
    assert snapshot["position"] == 2
    assert snapshot["current_pose"]["id"] == 2
    assert snapshot["remaining_seconds"] == 30

    paused = client.post(f"/sessions/{session_id}/pause").json()
    assert paused["is_running"] is False

    client.post(f"/sessions/{session_id}/next")
    client.post(f"/sessions/{session_id}/next")
    done = client.post(f"/sessions/{session_id}/next").json()
    assert done["is_completed"] is True
    assert done["current_pose"] is None

    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404


def test_session_from_description_ranks_matches(
    container: AppContainer, pose_repository: InMemoryPoseRepository
) -> None:
    _seed(pose_repository)
    client = TestClient(create_app(container))

    body = client.post(
        "/sessions",
        json={
            "pose_length_seconds": 60,
            "session_type": "duration",
            "session_duration_minutes": 3,
            "description": "a calm standing figure",
            "autostart": True,
        },
    ).json()

    assert body["total"] == 3
    assert body["current_pose"]["id"] == 1
    assert body["is_running"] is True


def test_session_config_bounds_are_validated(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    too_short = client.post("/sessions", json={"pose_length_seconds": 4})
    too_many = client.post(
        "/sessions", json={"pose_length_seconds": 30, "pose_count": 101}
    )
    bad_action = client.post(
        "/sessions/00000000-0000-0000-0000-000000000000/rewind"
    )

    assert too_short.status_code == 422
    assert too_many.status_code == 422
    assert bad_action.status_code == 422


def test_session_with_empty_pool_has_no_pose(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    body = client.post(
        "/sessions", json={"pose_length_seconds": 30, "autostart": True}
    ).json()

    assert body["total"] == 0
    assert body["current_pose"] is None
    assert body["is_running"] is False
