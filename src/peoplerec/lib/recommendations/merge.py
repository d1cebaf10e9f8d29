"""Exclusion set construction and candidate merging."""

import asyncio
import logging

from ...models import Candidate
from ..store import ProfileStore
from .errors import ExclusionFetchError

logger = logging.getLogger(__name__)


async def fetch_exclusion_set(
    store: ProfileStore,
    requester_uid: str,
    timeout: float | None = None,
) -> set[str]:
    """Return the requester's uid plus every uid they already follow.

    The following list is read exhaustively.  Any failure raises
    :class:`ExclusionFetchError`, since a partial list would let already
    followed users through.
    """
    try:
        following = await asyncio.wait_for(store.list_following(requester_uid), timeout)
    except asyncio.TimeoutError as exc:
        logger.error("Timed out reading following list of user %s", requester_uid)
        raise ExclusionFetchError("Failed to generate recommendations") from exc
    except Exception as exc:
        logger.exception("Failed to read following list of user %s", requester_uid)
        raise ExclusionFetchError("Failed to generate recommendations") from exc

    excluded = set(following)
    excluded.add(requester_uid)
    return excluded


def merge_candidates(
    *sources: list[Candidate],
    excluded: set[str],
) -> list[Candidate]:
    """Union candidate lists, first occurrence wins, then drop excluded uids.

    Sources are consumed in the order given; a uid already seen keeps its
    first profile snapshot.  Output is in first-seen order.
    """
    merged: dict[str, Candidate] = {}
    for candidates in sources:
        for candidate in candidates:
            if not candidate.uid or candidate.uid in merged:
                continue
            merged[candidate.uid] = candidate

    return [c for uid, c in merged.items() if uid not in excluded]
