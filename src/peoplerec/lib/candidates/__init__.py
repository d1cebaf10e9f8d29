"""Candidate retrieval for "people you may know".

Provides the retriever abstraction and the three relationship graphs the
recommendation pipeline fans out to.
"""

from .base import CandidateRetriever
from .shared_membership import (
    CommunityGraphRetriever,
    InterestGraphRetriever,
    SharedMembershipRetriever,
)
from .social_graph import SocialGraphSampler

__all__ = [
    "CandidateRetriever",
    "CommunityGraphRetriever",
    "InterestGraphRetriever",
    "SharedMembershipRetriever",
    "SocialGraphSampler",
]
