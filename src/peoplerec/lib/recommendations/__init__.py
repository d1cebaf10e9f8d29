"""Merge, score and rank "people you may know" candidates."""

from .errors import ExclusionFetchError, ProfileNotFoundError, RecommendationError
from .merge import fetch_exclusion_set, merge_candidates
from .pipeline import load_requester_profile, recommend
from .scoring import rank, score_candidate, score_candidates

__all__ = [
    "ExclusionFetchError",
    "ProfileNotFoundError",
    "RecommendationError",
    "fetch_exclusion_set",
    "load_requester_profile",
    "merge_candidates",
    "rank",
    "recommend",
    "score_candidate",
    "score_candidates",
]
