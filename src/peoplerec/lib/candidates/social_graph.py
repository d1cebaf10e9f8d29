"""Social-graph candidate retriever ("friends of friends").

Approximates the requester's two-hop neighbourhood without scanning the
whole follow graph:

1. Read up to ``hop1_limit`` users the requester follows (hop 1).
2. Shuffle them and keep the first ``hop1_sample_size``.
3. Read up to ``hop2_limit`` followed users of each sampled user, concurrently
   (hop 2).
4. Union the hop-2 uids in traversal order and keep the first
   ``max_candidates``.
5. Fetch their profiles in store-sized batches.

Sampling makes the output intentionally non-deterministic; pass a seeded
``random.Random`` to pin it.
"""

import asyncio
import logging
import random

from ...models import Candidate, Profile
from ..store import ProfileStore
from .base import CandidateRetriever

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tunables
# ---------------------------------------------------------------------------

HOP1_LIMIT = 50
HOP1_SAMPLE_SIZE = 5
HOP2_LIMIT = 10
MAX_CANDIDATES = 30


def sample_uids(uids: list[str], k: int, rng: random.Random) -> list[str]:
    """Uniformly shuffle a copy of *uids* and return its first *k* entries."""
    shuffled = list(uids)
    rng.shuffle(shuffled)
    return shuffled[:k]


class SocialGraphSampler(CandidateRetriever):
    """Friend-of-friend candidates from a bounded two-hop traversal."""

    def __init__(
        self,
        hop1_limit: int = HOP1_LIMIT,
        hop1_sample_size: int = HOP1_SAMPLE_SIZE,
        hop2_limit: int = HOP2_LIMIT,
        max_candidates: int = MAX_CANDIDATES,
        rng: random.Random | None = None,
    ):
        self.hop1_limit = hop1_limit
        self.hop1_sample_size = hop1_sample_size
        self.hop2_limit = hop2_limit
        self.max_candidates = max_candidates
        self.rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "social_graph"

    async def hop2_uids(self, store: ProfileStore, uid: str) -> list[str]:
        """Return up to ``max_candidates`` distinct uids two hops from *uid*."""
        hop1 = await store.list_following(uid, limit=self.hop1_limit)
        if not hop1:
            return []

        sampled = sample_uids(hop1, self.hop1_sample_size, self.rng)
        hop2_lists = await asyncio.gather(
            *(store.list_following(friend, limit=self.hop2_limit) for friend in sampled)
        )

        # dict keeps traversal order while removing repeats
        reachable = dict.fromkeys(u for hop2 in hop2_lists for u in hop2)
        logger.debug(
            "User %s: %d hop-1, %d sampled, %d distinct hop-2",
            uid, len(hop1), len(sampled), len(reachable),
        )
        return list(reachable)[:self.max_candidates]

    async def retrieve(
        self,
        store: ProfileStore,
        requester: Profile,
    ) -> list[Candidate]:
        uids = await self.hop2_uids(store, requester.uid)
        if not uids:
            return []

        profiles = await store.get_profiles(uids)
        return self._as_candidates(profiles)
