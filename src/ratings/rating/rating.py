"""Rating aggregate (CQRS) — a verified review of a provider's work on a resolved report.

A Rating is created exactly once per problem report, after every admissibility
check has passed, and is never deleted. The only later mutation is the rated
provider's single reply.
"""

import json
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text, ValueObject

from ratings.domain import ratings
from ratings.errors import Conflict, InvalidInput, Unauthorized
from ratings.rating.events import ProviderReplyAttached, RatingSubmitted

MIN_SCORE = 1
MAX_SCORE = 5


def overall_score_for(quality, timeliness, budget_adherence):
    """Rounded (half up) mean of the three category scores."""
    mean = Decimal(quality + timeliness + budget_adherence) / Decimal(3)
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ratings.value_object(part_of="Rating")
class Score:
    """A star score from 1 to 5."""

    value = Integer(required=True)

    @invariant.post
    def value_must_be_in_range(self):
        if self.value is not None and not MIN_SCORE <= self.value <= MAX_SCORE:
            raise ValidationError({"value": [f"Score must be between {MIN_SCORE} and {MAX_SCORE}"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ratings.aggregate
class Rating:
    # Chain of custody
    problem_report_id = Identifier(required=True, unique=True)
    provider_id = Identifier(required=True)
    community_id = Identifier(required=True)
    submitted_by = Identifier(required=True)
    authorized_by = Identifier(required=True)
    offer_record_id = Identifier(required=True)
    is_verified = Boolean(default=True)

    # Scores
    overall_score = ValueObject(Score, required=True)
    quality_score = ValueObject(Score, required=True)
    timeliness_score = ValueObject(Score, required=True)
    budget_adherence_score = ValueObject(Score, required=True)

    # Content
    comment = Text(required=True)
    photo_refs = Text()  # JSON array of object-storage keys
    invoice_url = String(max_length=2048)  # Informational only, never verified

    # Provider engagement
    provider_reply = Text()
    provider_reply_at = DateTime()

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def comment_must_not_be_blank(self):
        if self.comment is not None and not self.comment.strip():
            raise ValidationError({"comment": ["Rating comment cannot be empty"]})

    @property
    def photos(self):
        return json.loads(self.photo_refs) if self.photo_refs else []

    @property
    def has_reply(self) -> bool:
        return bool(self.provider_reply)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        problem_report_id,
        provider_id,
        community_id,
        submitted_by,
        authorized_by,
        offer_record_id,
        quality_score,
        timeliness_score,
        budget_adherence_score,
        comment,
        photo_refs=None,
        invoice_url=None,
    ):
        """Create a verified rating. The overall score is always derived here."""
        now = datetime.now(UTC)
        overall = overall_score_for(quality_score, timeliness_score, budget_adherence_score)

        rating = cls(
            problem_report_id=problem_report_id,
            provider_id=provider_id,
            community_id=community_id,
            submitted_by=submitted_by,
            authorized_by=authorized_by,
            offer_record_id=offer_record_id,
            is_verified=True,
            overall_score=Score(value=overall),
            quality_score=Score(value=quality_score),
            timeliness_score=Score(value=timeliness_score),
            budget_adherence_score=Score(value=budget_adherence_score),
            comment=comment,
            photo_refs=json.dumps(photo_refs) if photo_refs else None,
            invoice_url=invoice_url or None,
            created_at=now,
            updated_at=now,
        )

        rating.raise_(
            RatingSubmitted(
                rating_id=str(rating.id),
                problem_report_id=str(problem_report_id),
                provider_id=str(provider_id),
                community_id=str(community_id),
                submitted_by=str(submitted_by),
                authorized_by=str(authorized_by),
                offer_record_id=str(offer_record_id),
                overall_score=overall,
                quality_score=quality_score,
                timeliness_score=timeliness_score,
                budget_adherence_score=budget_adherence_score,
                submitted_at=now,
            )
        )

        return rating

    # -------------------------------------------------------------------
    # Provider reply
    # -------------------------------------------------------------------
    def attach_reply(self, provider_id, text):
        """Attach the rated provider's reply. One reply per rating."""
        if str(provider_id) != str(self.provider_id):
            raise Unauthorized(
                "Only the rated provider can reply to this rating",
                rating_id=str(self.id),
            )

        if text is None or not text.strip():
            raise InvalidInput("Reply text cannot be empty", rating_id=str(self.id))

        if self.has_reply:
            raise Conflict("This rating already has a provider reply", rating_id=str(self.id))

        now = datetime.now(UTC)
        self.provider_reply = text.strip()
        self.provider_reply_at = now
        self.updated_at = now

        self.raise_(
            ProviderReplyAttached(
                rating_id=str(self.id),
                provider_id=str(self.provider_id),
                reply=self.provider_reply,
                replied_at=now,
            )
        )
