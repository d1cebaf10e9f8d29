"""Shared test fixtures: an in-memory stand-in for ``AsyncElasticsearch``.

Lives at the repository root so it is never packaged with ``peoplerec``.
"""

import asyncio

import pytest


class FakeEs:
    """In-memory fake Elasticsearch client for unit tests.

    Understands the handful of queries the profile store issues: ``ids`` and
    ``terms`` lookups on the ``users`` index, and ``follower_uid`` filters on
    the ``follows`` index (with ``sort`` and ``search_after``).
    """

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.follows: list[dict] = []
        self.calls: list[dict] = []
        self._faults: list = []
        self._delays: list = []

    # -- population ---------------------------------------------------------

    def add_user(self, uid: str, **fields) -> None:
        self.users[uid] = {"uid": uid, **fields}

    def add_follow(self, follower_uid: str, followed_uid: str) -> None:
        self.follows.append({"follower_uid": follower_uid, "followed_uid": followed_uid})

    def fail_when(self, predicate) -> None:
        """Raise a store fault for every call where ``predicate(index, query)``."""
        self._faults.append(predicate)

    def delay_when(self, predicate, seconds: float) -> None:
        self._delays.append((predicate, seconds))

    # -- client API -----------------------------------------------------------

    async def search(self, *, index=None, query=None, size=10, sort=None,
                     search_after=None, _source=None, **kwargs):
        self.calls.append({
            "index": index,
            "query": query,
            "size": size,
            "sort": sort,
            "search_after": search_after,
        })
        for predicate, seconds in self._delays:
            if predicate(index, query):
                await asyncio.sleep(seconds)
        for predicate in self._faults:
            if predicate(index, query):
                raise ConnectionError("simulated store fault")

        if index == "users":
            hits = self._search_users(query)
        elif index == "follows":
            hits = self._search_follows(query, sort, search_after)
        else:
            hits = []
        return {"hits": {"hits": hits[:size]}}

    def _search_users(self, query):
        if "ids" in query:
            wanted = set(query["ids"]["values"])
            docs = [doc for uid, doc in self.users.items() if uid in wanted]
        elif "terms" in query:
            ((field, values),) = query["terms"].items()
            docs = [
                doc for doc in self.users.values()
                if set(doc.get(field) or []) & set(values)
            ]
        else:
            docs = list(self.users.values())
        return [{"_id": doc["uid"], "_source": doc} for doc in docs]

    def _search_follows(self, query, sort, search_after):
        follower = query["bool"]["filter"][0]["term"]["follower_uid"]
        edges = [e for e in self.follows if e["follower_uid"] == follower]
        if sort:
            edges.sort(key=lambda e: e["followed_uid"])
        if search_after:
            edges = [e for e in edges if e["followed_uid"] > search_after[0]]
        return [
            {"_source": {"followed_uid": e["followed_uid"]}, "sort": [e["followed_uid"]]}
            for e in edges
        ]

    def calls_to(self, index: str) -> list[dict]:
        return [c for c in self.calls if c["index"] == index]

    # -- fault predicates -----------------------------------------------------

    @staticmethod
    def follows_of(uid):
        """Predicate matching ``follows`` queries for the edges of *uid*."""
        def predicate(index, query):
            return (
                index == "follows"
                and query["bool"]["filter"][0]["term"]["follower_uid"] == uid
            )
        return predicate

    @staticmethod
    def terms_on(field):
        """Predicate matching ``users`` membership queries on *field*."""
        def predicate(index, query):
            return index == "users" and field in query.get("terms", {})
        return predicate


@pytest.fixture
def fake_es():
    return FakeEs()
