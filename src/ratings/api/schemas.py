"""Pydantic request/response schemas for the Ratings API.

These are separate from Protean commands (anti-corruption pattern). Caller
identity is never part of a request body; it arrives through the
authenticated ``X-Actor-Id`` header.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitRatingRequest(BaseModel):
    problem_report_id: str
    provider_id: str
    offer_record_id: str
    authorized_by: str
    quality_score: int
    timeliness_score: int
    budget_adherence_score: int
    overall_score: int | None = None
    comment: str
    photo_refs: list[str] | None = None
    invoice_url: str | None = None


class AttachReplyRequest(BaseModel):
    text: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class RatingResponse(BaseModel):
    id: str
    problem_report_id: str
    provider_id: str
    community_id: str
    submitted_by: str
    authorized_by: str
    offer_record_id: str
    is_verified: bool
    overall_score: int
    quality_score: int
    timeliness_score: int
    budget_adherence_score: int
    comment: str
    photo_refs: list[str] = Field(default_factory=list)
    invoice_url: str | None = None
    provider_reply: str | None = None
    provider_reply_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_rating(cls, rating) -> RatingResponse:
        return cls(
            id=str(rating.id),
            problem_report_id=str(rating.problem_report_id),
            provider_id=str(rating.provider_id),
            community_id=str(rating.community_id),
            submitted_by=str(rating.submitted_by),
            authorized_by=str(rating.authorized_by),
            offer_record_id=str(rating.offer_record_id),
            is_verified=bool(rating.is_verified),
            overall_score=rating.overall_score.value,
            quality_score=rating.quality_score.value,
            timeliness_score=rating.timeliness_score.value,
            budget_adherence_score=rating.budget_adherence_score.value,
            comment=rating.comment,
            photo_refs=rating.photos,
            invoice_url=rating.invoice_url,
            provider_reply=rating.provider_reply,
            provider_reply_at=rating.provider_reply_at,
            created_at=rating.created_at,
        )


class ProviderStatisticsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    average_overall: float = Field(alias="averageOverall")
    average_quality: float = Field(alias="averageQuality")
    average_timeliness: float = Field(alias="averageTimeliness")
    average_budget_adherence: float = Field(alias="averageBudgetAdherence")
    total_ratings: int = Field(alias="totalRatings")


class ErrorResponse(BaseModel):
    kind: str
    message: str
