"""Pose selection and keyword ranking for drawing sessions."""

import logging
import random
from collections.abc import Iterable, Sequence
from itertools import groupby

from pose_timer.domain.poses import Pose, ScoredPose

logger = logging.getLogger(__name__)

EXACT_MATCH_SCORE = 2
PARTIAL_MATCH_SCORE = 1


def score_pose(keywords: Iterable[str], match_terms: Sequence[str]) -> int:
    """Sum keyword relevance over every (keyword, term) pair."""
    terms = [term.lower() for term in match_terms]
    score = 0
    for keyword in keywords:
        word = keyword.lower()
        for term in terms:
            if word == term:
                score += EXACT_MATCH_SCORE
            elif term in word or word in term:
                score += PARTIAL_MATCH_SCORE
    return score


def rank_poses(pool: Sequence[Pose], match_terms: Sequence[str]) -> list[ScoredPose]:
    """Return eligible poses ordered by score, keeping pool order for ties.

    Poses that match no term are dropped. When nothing matches at all, the
    whole pool is returned with a score of zero.
    """
    if not match_terms:
        return [ScoredPose(pose=pose) for pose in pool]
    scored = [
        ScoredPose(pose=pose, score=score_pose(pose.keywords, match_terms))
        for pose in pool
    ]
    matched = [item for item in scored if item.score > 0]
    if not matched:
        logger.info(
            "No poses matched %d match terms, using all %d poses",
            len(match_terms),
            len(pool),
        )
        return [ScoredPose(pose=pose) for pose in pool]
    # sorted() is stable, so pool order survives within a score group
    return sorted(matched, key=lambda item: item.score, reverse=True)


def select_session(
    pool: Sequence[Pose],
    match_terms: Sequence[str],
    count: int,
    randomize: bool = True,
    rng: random.Random | None = None,
) -> list[Pose]:
    """Build an ordered session of exactly ``count`` poses.

    Higher-scoring poses come first. With ``randomize`` the order inside each
    equal-score group is shuffled; the resulting cycle is repeated until the
    session is long enough.
    """
    if not pool or count <= 0:
        return []
    ranked = rank_poses(pool, match_terms)
    shuffler = rng or random.Random()
    cycle: list[Pose] = []
    for _score, group in groupby(ranked, key=lambda item: item.score):
        poses = [item.pose for item in group]
        if randomize:
            shuffler.shuffle(poses)
        cycle.extend(poses)

    session: list[Pose] = []
    while len(session) < count:
        session.extend(cycle)
    return session[:count]
