from pydantic import BaseModel, Field


class Profile(BaseModel):
    """A user profile as stored in the ``users`` index."""

    uid: str = Field(..., description="Opaque unique identity of the user")
    username: str | None = Field(None, description="Display handle")
    display_name: str | None = Field(None, description="Human readable name")
    profile_picture: str | None = Field(
        None, description="Reference to the user's profile photo")
    tags: list[str] = Field(default_factory=list, description="Interest tags")
    joined_communities: list[str] = Field(
        default_factory=list, description="Ids of communities the user joined"
    )
    relationship_status: str | None = Field(
        None, description="Relationship status label, if the user set one"
    )
    followers_count: int = Field(0, ge=0, description="Number of followers")


class Candidate(Profile):
    """A profile being considered for recommendation to a requester."""

    retrieved_by: str = Field(
        ..., description="Name of the retriever that first produced this candidate"
    )


class ScoredCandidate(Profile):
    """A recommended profile with its relevance score."""

    score: float = Field(..., ge=0, description="Weighted relevance score")
    reasons: list[str] = Field(
        default_factory=list,
        description="Diagnostic, human-readable score contributions",
    )
