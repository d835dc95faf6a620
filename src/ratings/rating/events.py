"""Domain events for the Rating aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from ratings.domain import ratings


@ratings.event(part_of="Rating")
class RatingSubmitted:
    """A verified rating was accepted for a resolved problem report."""

    __version__ = 1

    rating_id = Identifier(required=True)
    problem_report_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    community_id = Identifier(required=True)
    submitted_by = Identifier(required=True)
    authorized_by = Identifier(required=True)
    offer_record_id = Identifier(required=True)
    overall_score = Integer(required=True)
    quality_score = Integer(required=True)
    timeliness_score = Integer(required=True)
    budget_adherence_score = Integer(required=True)
    submitted_at = DateTime(required=True)


@ratings.event(part_of="Rating")
class ProviderReplyAttached:
    """The rated provider replied to a rating."""

    __version__ = 1

    rating_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    reply = Text(required=True)
    replied_at = DateTime(required=True)
