"""Session controller that steps through poses on a countdown clock."""

import logging
import random
import time
from collections.abc import Callable, Sequence

from pose_timer.domain.poses import Pose
from pose_timer.domain.sessions import SessionConfiguration, SessionSnapshot
from pose_timer.services.clock import DEFAULT_TICK_INTERVAL, Clock, Scheduler
from pose_timer.services.notifier import NullNotifier, SessionNotifier
from pose_timer.services.selection import select_session

logger = logging.getLogger(__name__)

DEFAULT_COUNTDOWN_WARNING_SECONDS = 5


class SessionController:
    """Navigable session over a fixed pose sequence.

    ``position == len(poses)`` marks the completed state; there is no current
    pose then and every control is a no-op except ``restart``.
    """

    def __init__(  # noqa: PLR0913
        self,
        poses: Sequence[Pose],
        pose_length_seconds: float,
        *,
        notifier: SessionNotifier | None = None,
        now: Callable[[], float] = time.monotonic,
        scheduler: Scheduler | None = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        countdown_warning_seconds: int = DEFAULT_COUNTDOWN_WARNING_SECONDS,
    ) -> None:
        self._poses = tuple(poses)
        self._pose_length = pose_length_seconds
        self._notifier = notifier or NullNotifier()
        self._countdown_warning = countdown_warning_seconds
        self._position = 0
        self._last_countdown: int | None = None
        self._closed = False
        self._clock = Clock(
            pose_length_seconds,
            now=now,
            scheduler=scheduler,
            tick_interval=tick_interval,
            on_tick=self._handle_tick,
            on_expire=self._handle_expire,
        )

    @property
    def poses(self) -> tuple[Pose, ...]:
        return self._poses

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def index(self) -> int:
        """0-based position; equals ``total`` once completed."""
        return self._position

    @property
    def position(self) -> int:
        """1-based position for "Pose N of M" display."""
        return min(self._position + 1, len(self._poses))

    @property
    def total(self) -> int:
        return len(self._poses)

    @property
    def is_completed(self) -> bool:
        return self._position >= len(self._poses)

    @property
    def current_pose(self) -> Pose | None:
        if self.is_completed:
            return None
        return self._poses[self._position]

    @property
    def remaining_seconds(self) -> int:
        return self._clock.remaining_seconds

    @property
    def progress_percent(self) -> float:
        return self._clock.progress_percent

    @property
    def is_running(self) -> bool:
        return self._clock.is_running

    def start(self) -> None:
        """Start or resume the countdown for the current pose."""
        if self._closed or self.is_completed:
            return
        self._clock.start()

    def pause(self) -> None:
        if self._closed:
            return
        self._clock.pause()

    def tick(self) -> None:
        """Observe the clock; hosts without a scheduler call this periodically."""
        if self._closed:
            return
        self._clock.tick()

    def next(self) -> None:
        """Skip to the next pose, or finish the session on the last one."""
        if self._closed or self.is_completed:
            return
        self._advance()

    def previous(self) -> None:
        """Go back one pose and restart its countdown."""
        if self._closed or self._position == 0 or not self._poses:
            return
        self._position = min(self._position, len(self._poses)) - 1
        self._play_current()

    def restart(self) -> None:
        """Jump back to the first pose and start playing."""
        if self._closed or not self._poses:
            return
        self._position = 0
        self._play_current()

    def close(self) -> None:
        """Tear the session down; pending clock callbacks become no-ops."""
        self._closed = True
        self._clock.close()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_pose=self.current_pose,
            position=self.position,
            total=self.total,
            remaining_seconds=self.remaining_seconds,
            progress_percent=self.progress_percent,
            is_running=self.is_running,
            is_completed=self.is_completed,
        )

    def _advance(self, started_at: float | None = None) -> None:
        if self._position < len(self._poses) - 1:
            self._position += 1
            self._play_current(started_at)
            return
        self._position = len(self._poses)
        self._clock.pause()
        logger.debug("Session completed after %d poses", len(self._poses))
        self._notifier.session_completed()

    def _play_current(self, started_at: float | None = None) -> None:
        self._last_countdown = None
        self._clock.reset(self._pose_length)
        pose = self.current_pose
        if pose is not None:
            self._notifier.pose_changed(self._position, pose)
        self._clock.start(started_at)

    def _handle_tick(self) -> None:
        if self._closed or not self._clock.is_running:
            return
        seconds_left = self._clock.remaining_seconds
        if (
            0 < seconds_left <= self._countdown_warning
            and seconds_left < self._clock.duration
            and seconds_left != self._last_countdown
        ):
            self._last_countdown = seconds_left
            self._notifier.countdown(seconds_left)

    def _handle_expire(self) -> None:
        if self._closed or self.is_completed:
            return
        # The next pose starts when this one ran out, not when it was observed.
        self._advance(started_at=self._clock.expired_at)


def build_session(  # noqa: PLR0913
    config: SessionConfiguration,
    pool: Sequence[Pose],
    *,
    randomize: bool = True,
    rng: random.Random | None = None,
    notifier: SessionNotifier | None = None,
    now: Callable[[], float] = time.monotonic,
    scheduler: Scheduler | None = None,
    tick_interval: float = DEFAULT_TICK_INTERVAL,
    countdown_warning_seconds: int = DEFAULT_COUNTDOWN_WARNING_SECONDS,
) -> SessionController:
    """Select poses for ``config`` and wrap them in a ready controller."""
    poses = select_session(
        pool,
        config.match_terms,
        config.resolved_pose_count,
        randomize=randomize,
        rng=rng,
    )
    logger.info(
        "Built session with %d poses of %ss from a pool of %d",
        len(poses),
        config.pose_length_seconds,
        len(pool),
    )
    return SessionController(
        poses,
        config.pose_length_seconds,
        notifier=notifier,
        now=now,
        scheduler=scheduler,
        tick_interval=tick_interval,
        countdown_warning_seconds=countdown_warning_seconds,
    )
