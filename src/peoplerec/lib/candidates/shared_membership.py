"""Interest- and community-graph candidate retrievers.

Both find users that share at least one value of a keyword list field with
the requester: interest ``tags`` or ``joined_communities``.  Only the first
``max_query_keys`` values of the requester are used in the query, and at
most ``limit`` profiles are returned.  A requester with no values yields no
candidates and no query is issued.
"""

from ...models import Candidate, Profile
from ..store import ProfileStore
from .base import CandidateRetriever

MAX_QUERY_KEYS = 10
SHARED_MEMBERSHIP_LIMIT = 20


class SharedMembershipRetriever(CandidateRetriever):
    """Candidates sharing any value of ``field`` with the requester."""

    field: str

    def __init__(
        self,
        max_query_keys: int = MAX_QUERY_KEYS,
        limit: int = SHARED_MEMBERSHIP_LIMIT,
    ):
        self.max_query_keys = max_query_keys
        self.limit = limit

    async def retrieve(
        self,
        store: ProfileStore,
        requester: Profile,
    ) -> list[Candidate]:
        values = getattr(requester, self.field)
        if not values:
            return []

        profiles = await store.find_profiles_sharing(
            self.field, values[:self.max_query_keys], limit=self.limit,
        )
        return self._as_candidates(profiles)


class InterestGraphRetriever(SharedMembershipRetriever):
    field = "tags"

    @property
    def name(self) -> str:
        return "interest_graph"


class CommunityGraphRetriever(SharedMembershipRetriever):
    field = "joined_communities"

    @property
    def name(self) -> str:
        return "community_graph"
