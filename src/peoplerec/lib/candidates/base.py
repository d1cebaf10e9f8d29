"""Base abstraction for candidate retrievers.

Each retriever has a unique name and an async `retrieve` method that returns
the profiles it considers worth recommending to the requester.  Retrievers
are independent: a broken retriever must never fail the whole request, so
callers go through `retrieve_or_empty`, which turns errors and timeouts into
an empty result.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from ...models import Candidate, Profile
from ..store import ProfileStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class CandidateRetriever(ABC):
    """Abstract base class for named candidate retrievers.

    Subclasses must implement `name` (property) and `retrieve`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name identifying this retriever (e.g. ``social_graph``)."""
        ...

    @abstractmethod
    async def retrieve(
        self,
        store: ProfileStore,
        requester: Profile,
    ) -> list[Candidate]:
        """Produce candidate profiles for the given requester.

        Parameters
        ----------
        store:
            The profile store to query.
        requester:
            The profile of the user asking for recommendations.

        Returns
        -------
        list[Candidate]
            May contain duplicates and excluded users; the merger handles both.
        """
        ...

    async def retrieve_or_empty(
        self,
        store: ProfileStore,
        requester: Profile,
        timeout: float | None = None,
    ) -> list[Candidate]:
        """Run `retrieve`, converting any failure or timeout into ``[]``.

        Cancellation is not a failure and still propagates.
        """
        try:
            candidates = await asyncio.wait_for(self.retrieve(store, requester), timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Retriever '%s' timed out after %ss for user %s",
                self.name, timeout, requester.uid,
            )
            return []
        except Exception:
            logger.exception("Retriever '%s' failed for user %s", self.name, requester.uid)
            return []

        logger.info(
            "Retriever '%s' produced %d candidates for user %s",
            self.name, len(candidates), requester.uid,
        )
        return candidates

    def _as_candidates(self, profiles: list[Profile]) -> list[Candidate]:
        return [
            Candidate(**profile.model_dump(), retrieved_by=self.name)
            for profile in profiles
        ]
