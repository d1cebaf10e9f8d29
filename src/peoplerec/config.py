"""Recommendation tunables.

Every knob has a documented default and can be overridden through the
environment (``.env`` is loaded on package import).  The router receives the
configuration through :func:`get_recommendation_config`, which tests can
replace with ``app.dependency_overrides``.
"""

import os
from functools import lru_cache
from typing import Mapping

from pydantic import BaseModel, Field


class ScoringWeights(BaseModel):
    """Weights of the linear scoring formula."""

    social: float = Field(40.0, ge=0, description="Bonus for friend-of-friend reachability")
    community: float = Field(25.0, ge=0, description="Per shared community")
    interest: float = Field(20.0, ge=0, description="Per shared interest tag")
    status: float = Field(10.0, ge=0, description="Bonus for matching relationship status")
    popularity: float = Field(10.0, ge=0, description="Per decade of followers")


class RetrievalLimits(BaseModel):
    """Caps bounding the cost of candidate retrieval."""

    # Social graph sampling
    hop1_limit: int = Field(50, ge=1, description="Followed users read at hop 1")
    hop1_sample_size: int = Field(5, ge=1, description="Hop-1 users expanded at hop 2")
    hop2_limit: int = Field(10, ge=1, description="Followed users read per hop-2 expansion")
    social_max_candidates: int = Field(30, ge=1, description="Friend-of-friend profiles fetched")

    # Shared interest / community queries
    max_query_keys: int = Field(10, ge=1, description="Tags or communities used in a query")
    shared_membership_limit: int = Field(20, ge=1, description="Profiles returned per query")

    # Store limits
    max_batch_size: int = Field(10, ge=1, description="Ids per batched profile lookup")
    following_page_size: int = Field(1000, ge=1, description="Edges per page when enumerating follows")


class RecommendationConfig(BaseModel):
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    limits: RetrievalLimits = Field(default_factory=RetrievalLimits)
    result_size: int = Field(20, ge=1, description="Recommendations returned per request")
    branch_timeout_seconds: float = Field(
        5.0, gt=0, description="Timeout applied to each concurrent retrieval branch"
    )
    users_index: str = "users"
    follows_index: str = "follows"
    rate_limit: int = Field(
        0, ge=0, description="Requests per window per user; 0 (the default) disables"
    )
    rate_limit_window_seconds: float = Field(60.0, gt=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RecommendationConfig":
        """Build a config from ``PYMK_*`` environment variables."""
        env = os.environ if environ is None else environ

        weights = {
            name: env[f"PYMK_WEIGHT_{name.upper()}"]
            for name in ScoringWeights.model_fields
            if f"PYMK_WEIGHT_{name.upper()}" in env
        }
        overrides = {
            field: env[var]
            for field, var in (
                ("result_size", "PYMK_RESULT_SIZE"),
                ("branch_timeout_seconds", "PYMK_BRANCH_TIMEOUT_SECONDS"),
                ("users_index", "PYMK_USERS_INDEX"),
                ("follows_index", "PYMK_FOLLOWS_INDEX"),
                ("rate_limit", "PYMK_RATE_LIMIT"),
                ("rate_limit_window_seconds", "PYMK_RATE_LIMIT_WINDOW_SECONDS"),
            )
            if var in env
        }
        # pydantic coerces the string values and validates the bounds
        return cls(weights=ScoringWeights(**weights), **overrides)


@lru_cache
def get_recommendation_config() -> RecommendationConfig:
    return RecommendationConfig.from_env()
