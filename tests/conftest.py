"""Shared test fixtures."""

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from pose_timer.config import Settings
from pose_timer.containers import AppContainer
from pose_timer.domain.poses import Difficulty, Pose, unique_keywords
from pose_timer.services.keywords import ImageFetcher, KeywordClient, KeywordService
from pose_timer.services.notifier import SessionNotifier
from pose_timer.services.poses import PoseLibraryService, PoseRepository
from pose_timer.services.registry import SessionRegistry


@dataclass
class FakeTime:
    """Manually advanced time source."""

    current: float = 1000.0

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@dataclass
class FakeHandle:
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class FakeScheduler:
    """Scheduler driven by a FakeTime; callbacks run when time is advanced."""

    time: FakeTime
    _queue: list[tuple[float, int, FakeHandle, Callable[[], None]]] = field(
        default_factory=list
    )
    _counter: itertools.count = field(default_factory=itertools.count)

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle()
        heapq.heappush(
            self._queue,
            (self.time.current + delay, next(self._counter), handle, callback),
        )
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, firing due callbacks in order."""
        target = self.time.current + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.time.current = max(self.time.current, due)
            if not handle.cancelled:
                callback()
        self.time.current = target

    def fire_all_pending(self) -> None:
        """Run every queued callback regardless of cancellation."""
        queued, self._queue = self._queue, []
        for _, _, _, callback in queued:
            callback()


@dataclass
class RecordingNotifier(SessionNotifier):
    """Notifier that records every event."""

    events: list[tuple[str, object]] = field(default_factory=list)

    def pose_changed(self, position: int, pose: Pose) -> None:
        self.events.append(("pose_changed", position))

    def countdown(self, seconds_left: int) -> None:
        self.events.append(("countdown", seconds_left))

    def session_completed(self) -> None:
        self.events.append(("session_completed", None))


@dataclass
class InMemoryPoseRepository(PoseRepository):
    """In-memory pose repository for tests."""

    poses: dict[int, Pose] = field(default_factory=dict)
    _next_id: int = 1

    def list_poses(self) -> list[Pose]:
        return [self.poses[pose_id] for pose_id in sorted(self.poses)]

    def get_pose(self, pose_id: int) -> Pose | None:
        return self.poses.get(pose_id)

    def create_pose(self, image_url: str, keywords: list[str]) -> Pose:
        pose = Pose(id=self._next_id, image_url=image_url, keywords=tuple(keywords))
        self.poses[pose.id] = pose
        self._next_id += 1
        return pose

    def update_keywords(self, pose_id: int, keywords: list[str]) -> Pose | None:
        pose = self.poses.get(pose_id)
        if pose is None:
            return None
        updated = Pose(
            id=pose.id,
            image_url=pose.image_url,
            keywords=tuple(keywords),
            difficulty=pose.difficulty,
            difficulty_reason=pose.difficulty_reason,
        )
        self.poses[pose_id] = updated
        return updated

    def update_difficulty(
        self, pose_id: int, difficulty: Difficulty, reason: str | None
    ) -> Pose | None:
        pose = self.poses.get(pose_id)
        if pose is None:
            return None
        updated = Pose(
            id=pose.id,
            image_url=pose.image_url,
            keywords=pose.keywords,
            difficulty=difficulty,
            difficulty_reason=reason,
        )
        self.poses[pose_id] = updated
        return updated

    def list_by_difficulty(self, difficulty: Difficulty) -> list[Pose]:
        return [pose for pose in self.list_poses() if pose.difficulty == difficulty]

    def delete_pose(self, pose_id: int) -> bool:
        return self.poses.pop(pose_id, None) is not None


@dataclass
class FakeKeywordClient(KeywordClient):
    """Fake analysis client returning payloads keyed by schema name."""

    payloads: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "pose_description": {
                "keywords": ["standing", "contrapposto", "standing"],
                "description": "Relaxed standing pose",
            },
            "pose_keywords": {"keywords": ["seated", " twisting ", "", "seated"]},
            "pose_difficulty": {
                "difficulty_level": 3,
                "difficulty_reason": "Strong foreshortening",
            },
        }
    )
    calls: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append(
            {"schema_name": schema_name, "image_data_url": image_data_url}
        )
        if self.error is not None:
            raise self.error
        return self.payloads[schema_name]


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Fake image fetcher that returns static PNG bytes."""

    content: bytes = b"\x89PNG\r\n\x1a\nfake"
    fetched: list[str] = field(default_factory=list)

    async def fetch_bytes(self, image_url: str) -> bytes:
        self.fetched.append(image_url)
        return self.content


def make_pose(pose_id: int, *keywords: str) -> Pose:
    return Pose(
        id=pose_id,
        image_url=f"https://images.example/poses/{pose_id}.jpg",
        keywords=tuple(unique_keywords(keywords)),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
    )


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def scheduler(fake_time: FakeTime) -> FakeScheduler:
    return FakeScheduler(fake_time)


@pytest.fixture
def keyword_client() -> FakeKeywordClient:
    return FakeKeywordClient()


@pytest.fixture
def keyword_service(keyword_client: FakeKeywordClient) -> KeywordService:
    return KeywordService(
        client=keyword_client,
        image_fetcher=FakeImageFetcher(),
        model="gpt-5.2",
        reasoning_effort=None,
        store=False,
    )


@pytest.fixture
def pose_repository() -> InMemoryPoseRepository:
    return InMemoryPoseRepository()


@pytest.fixture
def container(
    settings: Settings,
    fake_time: FakeTime,
    pose_repository: InMemoryPoseRepository,
    keyword_service: KeywordService,
) -> AppContainer:
    session_registry = SessionRegistry(
        ttl_seconds=settings.session_ttl_seconds,
        completed_ttl_seconds=settings.completed_session_ttl_seconds,
        now=fake_time,
    )

    async def close_resources() -> None:
        session_registry.close_all()

    return AppContainer(
        settings=settings,
        keyword_service=keyword_service,
        pose_library_service=PoseLibraryService(
            repository=pose_repository,
            keyword_service=keyword_service,
        ),
        session_registry=session_registry,
        close_resources=close_resources,
        now=fake_time,
        schedule_ticks=False,
    )
