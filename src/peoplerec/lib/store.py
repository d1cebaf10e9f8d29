"""Read-only profile store backed by Elasticsearch.

The recommendation engine needs only four primitive operations from the
document store:

* point lookup of a profile by uid,
* batched lookup of profiles by uid (chunked to the store's batch limit),
* "shares any of" membership queries on keyword array fields,
* enumeration of the users somebody follows, optionally capped.

Profiles live in the ``users`` index (``_id`` is the uid).  Follow edges live
in the ``follows`` index as ``{"follower_uid": ..., "followed_uid": ...}``.
"""

import asyncio
import logging

from pydantic import ValidationError

from ..models import Profile
from .elasticsearch import iter_hits

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_SIZE = 10
DEFAULT_PAGE_SIZE = 1000


def chunk(items: list, size: int) -> list[list]:
    """Split *items* into consecutive slices of at most *size* elements."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    return [items[i:i + size] for i in range(0, len(items), size)]


def _keyword_list(value) -> list:
    # a keyword field holding a single value comes back as a bare string
    if isinstance(value, str):
        return [value]
    return list(value or [])


def profile_from_hit(hit: dict) -> Profile | None:
    """Build a :class:`Profile` from a ``users`` hit.

    Returns ``None`` for documents that carry no usable uid.  A single
    keyword value is read as a one-element list.  Raises
    :class:`pydantic.ValidationError` for documents with mistyped fields.
    """
    src = hit.get("_source") or {}
    uid = src.get("uid") or hit.get("_id")
    if not uid:
        return None

    followers = src.get("followers_count") or 0
    if isinstance(followers, float) and followers.is_integer():
        followers = int(followers)
    if isinstance(followers, bool) or not isinstance(followers, int) or followers < 0:
        followers = 0

    return Profile(
        uid=uid,
        username=src.get("username"),
        display_name=src.get("display_name"),
        profile_picture=src.get("profile_picture"),
        tags=_keyword_list(src.get("tags")),
        joined_communities=_keyword_list(src.get("joined_communities")),
        relationship_status=src.get("relationship_status") or None,
        followers_count=followers,
    )


def _profiles_from_hits(hits: list[dict]) -> list[Profile]:
    profiles = []
    for hit in hits:
        try:
            profile = profile_from_hit(hit)
        except ValidationError as exc:
            logger.warning("Skipping malformed profile %s: %s", hit.get("_id"), exc)
            continue
        if profile is not None:
            profiles.append(profile)
    return profiles


def _followed_uids(hits: list[dict]) -> list[str]:
    uids: list[str] = []
    for hit in hits:
        followed = (hit.get("_source") or {}).get("followed_uid")
        if followed:
            uids.append(followed)
    return uids


class ProfileStore:
    """Thin query layer over an ``AsyncElasticsearch`` client."""

    def __init__(
        self,
        es,
        users_index: str = "users",
        follows_index: str = "follows",
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.es = es
        self.users_index = users_index
        self.follows_index = follows_index
        self.max_batch_size = max_batch_size
        self.page_size = page_size

    async def get_profile(self, uid: str) -> Profile | None:
        """Point lookup of a single profile.  ``None`` if it does not exist."""
        resp = await self.es.search(
            index=self.users_index,
            query={"ids": {"values": [uid]}},
            size=1,
        )
        profiles = _profiles_from_hits(iter_hits(resp))
        return profiles[0] if profiles else None

    async def _get_profile_batch(self, uids: list[str]) -> list[Profile]:
        resp = await self.es.search(
            index=self.users_index,
            query={"ids": {"values": uids}},
            size=len(uids),
        )
        return _profiles_from_hits(iter_hits(resp))

    async def get_profiles(self, uids: list[str]) -> list[Profile]:
        """Fetch profiles for *uids*, at most ``max_batch_size`` ids per query.

        Batches are issued concurrently and the results flattened in batch
        order.  Unknown ids are skipped.
        """
        if not uids:
            return []

        batches = chunk(list(uids), self.max_batch_size)
        results = await asyncio.gather(*(self._get_profile_batch(b) for b in batches))
        return [profile for batch in results for profile in batch]

    async def find_profiles_sharing(
        self,
        field: str,
        values: list[str],
        limit: int,
    ) -> list[Profile]:
        """Return up to *limit* profiles whose *field* contains any of *values*."""
        if not values:
            return []

        resp = await self.es.search(
            index=self.users_index,
            query={"terms": {field: list(values)}},
            size=limit,
        )
        return _profiles_from_hits(iter_hits(resp))

    async def list_following(self, uid: str, limit: int | None = None) -> list[str]:
        """Return the uids that *uid* follows, ordered by uid.

        With a *limit* a single query is issued.  Without one every edge is
        read, paging with ``search_after`` until a short page is returned.
        """
        query = {"bool": {"filter": [{"term": {"follower_uid": uid}}]}}
        sort = [{"followed_uid": "asc"}]

        if limit is not None:
            resp = await self.es.search(
                index=self.follows_index,
                query=query,
                size=limit,
                sort=sort,
                _source=["followed_uid"],
            )
            return _followed_uids(iter_hits(resp))

        following: list[str] = []
        search_after = None
        while True:
            kwargs = {"search_after": search_after} if search_after is not None else {}
            resp = await self.es.search(
                index=self.follows_index,
                query=query,
                size=self.page_size,
                sort=sort,
                _source=["followed_uid"],
                **kwargs,
            )
            hits = iter_hits(resp)
            following.extend(_followed_uids(hits))

            if len(hits) < self.page_size:
                break
            search_after = hits[-1].get("sort")
            if not search_after:
                raise ValueError("follows hits are missing sort values; cannot page")

        logger.debug("User %s follows %d users", uid, len(following))
        return following
