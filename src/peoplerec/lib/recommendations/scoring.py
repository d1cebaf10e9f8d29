"""Scoring and ranking of merged candidates.

The score is a sum of independent, non-negative terms:

* **social** – flat bonus if the candidate was reached through the
  friend-of-friend traversal,
* **interest** – per interest tag shared with the requester,
* **community** – per community shared with the requester,
* **status** – flat bonus if both have the same relationship status,
* **popularity** – ``log10(followers_count)`` times the weight.

Every non-zero term appends a short reason for diagnostics.
"""

import math

from ...config import ScoringWeights
from ...models import Candidate, Profile, ScoredCandidate

DEFAULT_RESULT_SIZE = 20


def score_candidate(
    candidate: Candidate,
    requester: Profile,
    social_uids: set[str],
    weights: ScoringWeights,
) -> ScoredCandidate:
    score = 0.0
    reasons: list[str] = []

    if candidate.uid in social_uids:
        score += weights.social
        reasons.append("Mutual/FoF")

    shared_tags = len(set(candidate.tags) & set(requester.tags))
    if shared_tags > 0:
        score += shared_tags * weights.interest
        reasons.append(f"Interests: {shared_tags}")

    shared_communities = len(
        set(candidate.joined_communities) & set(requester.joined_communities)
    )
    if shared_communities > 0:
        score += shared_communities * weights.community
        reasons.append(f"Communities: {shared_communities}")

    # exact, case-sensitive match; an unset requester status never matches
    if requester.relationship_status and candidate.relationship_status == requester.relationship_status:
        score += weights.status
        reasons.append("Status")

    if candidate.followers_count > 0:
        popularity = math.log10(candidate.followers_count) * weights.popularity
        if popularity > 0:
            score += popularity
            reasons.append(f"Popularity: {candidate.followers_count} followers")

    return ScoredCandidate(
        **candidate.model_dump(exclude={"retrieved_by"}),
        score=score,
        reasons=reasons,
    )


def score_candidates(
    candidates: list[Candidate],
    requester: Profile,
    social_candidates: list[Candidate],
    weights: ScoringWeights,
) -> list[ScoredCandidate]:
    """Score every candidate.

    Social reachability is decided by membership in the raw social-graph
    output, not by which retriever produced the merged entry.
    """
    social_uids = {c.uid for c in social_candidates}
    return [score_candidate(c, requester, social_uids, weights) for c in candidates]


def rank(
    scored: list[ScoredCandidate],
    limit: int = DEFAULT_RESULT_SIZE,
) -> list[ScoredCandidate]:
    """Highest score first, ties by uid ascending, truncated to *limit*."""
    return sorted(scored, key=lambda c: (-c.score, c.uid))[:limit]
