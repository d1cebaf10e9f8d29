"""People-you-may-know pipeline.

Pipeline:
    requester profile → (social graph | interest graph | community graph |
    exclusion set, concurrently) → merge → score → rank
"""

import asyncio
import logging
import random

from ...config import RecommendationConfig
from ...models import Profile, ScoredCandidate
from ..candidates import (
    CommunityGraphRetriever,
    InterestGraphRetriever,
    SocialGraphSampler,
)
from ..store import ProfileStore
from .errors import ProfileNotFoundError
from .merge import fetch_exclusion_set, merge_candidates
from .scoring import rank, score_candidates

logger = logging.getLogger(__name__)


async def load_requester_profile(store: ProfileStore, uid: str) -> Profile:
    """Fetch the requester's profile or raise :class:`ProfileNotFoundError`."""
    profile = await store.get_profile(uid)
    if profile is None:
        logger.error("User profile not found for %s", uid)
        raise ProfileNotFoundError("User profile not found")
    return profile


async def recommend(
    store: ProfileStore,
    requester_uid: str,
    config: RecommendationConfig | None = None,
    rng: random.Random | None = None,
) -> list[ScoredCandidate]:
    """Compute ranked recommendations for *requester_uid*.

    Retriever failures shrink the candidate pool but never fail the request.
    A failure to read the requester's following list does, and the remaining
    branches are cancelled before the error propagates.
    """
    config = config or RecommendationConfig()
    limits = config.limits
    timeout = config.branch_timeout_seconds

    requester = await load_requester_profile(store, requester_uid)
    logger.info(
        "Generating recommendations for %s (tags=%d, communities=%d)",
        requester_uid, len(requester.tags), len(requester.joined_communities),
    )

    social = SocialGraphSampler(
        hop1_limit=limits.hop1_limit,
        hop1_sample_size=limits.hop1_sample_size,
        hop2_limit=limits.hop2_limit,
        max_candidates=limits.social_max_candidates,
        rng=rng,
    )
    interest = InterestGraphRetriever(
        max_query_keys=limits.max_query_keys, limit=limits.shared_membership_limit,
    )
    community = CommunityGraphRetriever(
        max_query_keys=limits.max_query_keys, limit=limits.shared_membership_limit,
    )

    tasks = [
        asyncio.ensure_future(social.retrieve_or_empty(store, requester, timeout)),
        asyncio.ensure_future(interest.retrieve_or_empty(store, requester, timeout)),
        asyncio.ensure_future(community.retrieve_or_empty(store, requester, timeout)),
        asyncio.ensure_future(fetch_exclusion_set(store, requester_uid, timeout)),
    ]
    try:
        social_candidates, interest_candidates, community_candidates, excluded = (
            await asyncio.gather(*tasks)
        )
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    candidates = merge_candidates(
        social_candidates,
        interest_candidates,
        community_candidates,
        excluded=excluded,
    )
    logger.info(
        "User %s: %d unique candidates after deduplication", requester_uid, len(candidates)
    )

    scored = score_candidates(candidates, requester, social_candidates, config.weights)
    top = rank(scored, limit=config.result_size)
    logger.info("Returning %d recommendations for %s", len(top), requester_uid)
    return top
