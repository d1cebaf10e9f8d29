"""Tests for the social-graph (friends of friends) retriever."""

import random

import pytest

from ...models import Profile
from ..store import ProfileStore
from .social_graph import SocialGraphSampler, sample_uids


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

REQUESTER = Profile(uid="me")


@pytest.fixture
def sampler():
    return SocialGraphSampler(rng=random.Random(7))


def follow_all(es, follower, targets):
    for target in targets:
        es.add_follow(follower, target)


# ---------------------------------------------------------------------------
# Unit tests – sample_uids
# ---------------------------------------------------------------------------

class TestSampleUids:
    def test_takes_prefix_of_shuffle(self):
        uids = [f"u{i}" for i in range(20)]
        sampled = sample_uids(uids, 5, random.Random(1))
        assert len(sampled) == 5
        assert len(set(sampled)) == 5
        assert set(sampled) <= set(uids)

    def test_does_not_mutate_input(self):
        uids = ["a", "b", "c"]
        sample_uids(uids, 2, random.Random(1))
        assert uids == ["a", "b", "c"]

    def test_fewer_than_k(self):
        assert sorted(sample_uids(["a", "b"], 5, random.Random(1))) == ["a", "b"]

    def test_same_seed_same_sample(self):
        uids = [f"u{i}" for i in range(50)]
        assert sample_uids(uids, 5, random.Random(3)) == sample_uids(uids, 5, random.Random(3))


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

class TestHop2Uids:
    @pytest.mark.asyncio
    async def test_no_following_returns_empty(self, fake_es, sampler):
        assert await sampler.hop2_uids(ProfileStore(fake_es), "me") == []
        # only the hop-1 query was issued
        assert len(fake_es.calls) == 1

    @pytest.mark.asyncio
    async def test_hop1_query_capped(self, fake_es, sampler):
        follow_all(fake_es, "me", [f"f{i:02d}" for i in range(60)])
        await sampler.hop2_uids(ProfileStore(fake_es), "me")
        assert fake_es.calls[0]["size"] == 50

    @pytest.mark.asyncio
    async def test_samples_at_most_five_friends(self, fake_es, sampler):
        friends = [f"f{i:02d}" for i in range(12)]
        follow_all(fake_es, "me", friends)
        for friend in friends:
            fake_es.add_follow(friend, f"fof-of-{friend}")

        uids = await sampler.hop2_uids(ProfileStore(fake_es), "me")

        hop2_calls = fake_es.calls_to("follows")[1:]
        assert len(hop2_calls) == 5
        assert all(c["size"] == 10 for c in hop2_calls)
        assert len(uids) == 5

    @pytest.mark.asyncio
    async def test_unions_and_caps_in_traversal_order(self, fake_es):
        friends = ["f1", "f2", "f3", "f4"]
        follow_all(fake_es, "me", friends)
        for friend in friends:
            # every friend follows the shared user plus ten of their own
            follow_all(fake_es, friend, ["aaa-shared"] + [f"{friend}-x{i}" for i in range(10)])

        sampler = SocialGraphSampler(rng=random.Random(0), max_candidates=30)
        uids = await sampler.hop2_uids(ProfileStore(fake_es), "me")

        assert len(uids) == len(set(uids))
        assert len(uids) == 30
        # the shared user is first seen in the first expansion
        assert uids[0] == "aaa-shared"

    @pytest.mark.asyncio
    async def test_hop2_limit_applies_per_friend(self, fake_es):
        follow_all(fake_es, "me", ["f1"])
        follow_all(fake_es, "f1", [f"x{i:02d}" for i in range(25)])

        uids = await SocialGraphSampler(rng=random.Random(0)).hop2_uids(
            ProfileStore(fake_es), "me"
        )
        assert uids == [f"x{i:02d}" for i in range(10)]


class TestSocialGraphSampler:
    @pytest.mark.asyncio
    async def test_name(self, sampler):
        assert sampler.name == "social_graph"

    @pytest.mark.asyncio
    async def test_retrieve_fetches_profiles_in_batches(self, fake_es):
        friends = [f"f{i}" for i in range(5)]
        follow_all(fake_es, "me", friends)
        for friend in friends:
            fofs = [f"{friend}-x{i}" for i in range(10)]
            follow_all(fake_es, friend, fofs)
            for fof in fofs:
                fake_es.add_user(fof, followers_count=1)

        candidates = await SocialGraphSampler(rng=random.Random(0)).retrieve(
            ProfileStore(fake_es), REQUESTER
        )

        assert len(candidates) == 30
        assert all(c.retrieved_by == "social_graph" for c in candidates)
        batch_sizes = [len(c["query"]["ids"]["values"]) for c in fake_es.calls_to("users")]
        assert batch_sizes == [10, 10, 10]

    @pytest.mark.asyncio
    async def test_seeded_sampler_is_reproducible(self, fake_es):
        friends = [f"f{i:02d}" for i in range(20)]
        follow_all(fake_es, "me", friends)
        for friend in friends:
            fake_es.add_follow(friend, f"{friend}-x")
            fake_es.add_user(f"{friend}-x")

        store = ProfileStore(fake_es)
        first = await SocialGraphSampler(rng=random.Random(42)).retrieve(store, REQUESTER)
        second = await SocialGraphSampler(rng=random.Random(42)).retrieve(store, REQUESTER)
        assert [c.uid for c in first] == [c.uid for c in second]

    @pytest.mark.asyncio
    async def test_store_fault_yields_empty(self, fake_es, sampler):
        follow_all(fake_es, "me", ["f1"])
        fake_es.add_follow("f1", "x1")
        fake_es.add_user("x1")
        fake_es.fail_when(fake_es.follows_of("f1"))

        result = await sampler.retrieve_or_empty(ProfileStore(fake_es), REQUESTER)
        assert result == []

    @pytest.mark.asyncio
    async def test_timeout_yields_empty(self, fake_es, sampler):
        follow_all(fake_es, "me", ["f1"])
        fake_es.delay_when(fake_es.follows_of("me"), 1.0)

        result = await sampler.retrieve_or_empty(
            ProfileStore(fake_es), REQUESTER, timeout=0.01
        )
        assert result == []
