"""SubmitRating — accept a verified rating for a resolved problem report.

The submitter and community come from the authenticated caller's Actor record,
never from the request body. The checks run in a fixed order and the first
failure aborts the submission; the single insert happens only after all of
them pass.
"""

import json

from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.accessor import get_actor, get_rating, insert_rating
from ratings.domain import logger, ratings
from ratings.errors import CommunityMismatch, InvalidInput, NotFound
from ratings.rating.authorization import check_authorization
from ratings.rating.correspondence import check_offer_correspondence
from ratings.rating.eligibility import check_eligibility
from ratings.rating.rating import MAX_SCORE, MIN_SCORE, Rating, overall_score_for
from ratings.rating.uniqueness import ensure_unique, storage_conflict


@ratings.command(part_of="Rating")
class SubmitRating:
    problem_report_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    offer_record_id = Identifier(required=True)
    authorized_by = Identifier(required=True)
    submitted_by = Identifier(required=True)  # Authenticated caller, set by the API layer
    quality_score = Integer(required=True)
    timeliness_score = Integer(required=True)
    budget_adherence_score = Integer(required=True)
    overall_score = Integer()  # Optional; must match the derived score when present
    comment = Text(required=True)
    photo_refs = Text()  # JSON array of strings
    invoice_url = String(max_length=2048)


def _validate_input(command):
    categories = {
        "quality_score": command.quality_score,
        "timeliness_score": command.timeliness_score,
        "budget_adherence_score": command.budget_adherence_score,
    }
    for name, value in categories.items():
        if not MIN_SCORE <= value <= MAX_SCORE:
            raise InvalidInput(f"{name} must be between {MIN_SCORE} and {MAX_SCORE}")

    if command.overall_score is not None:
        expected = overall_score_for(*categories.values())
        if command.overall_score != expected:
            raise InvalidInput(
                f"overall_score must equal the rounded mean of the category scores ({expected})",
                overall_score=command.overall_score,
            )

    if not command.comment or not command.comment.strip():
        raise InvalidInput("Rating comment cannot be empty")


@ratings.command_handler(part_of=Rating)
class SubmitRatingHandler:
    @handle(SubmitRating)
    def submit_rating(self, command):
        submitter = get_actor(command.submitted_by)
        if submitter is None:
            raise NotFound("Submitting actor not found", submitted_by=str(command.submitted_by))
        if not submitter.community_id:
            raise CommunityMismatch(
                "Submitting actor does not belong to a community",
                submitted_by=str(command.submitted_by),
            )
        community_id = str(submitter.community_id)

        _validate_input(command)

        check_eligibility(command.problem_report_id, community_id)
        check_offer_correspondence(
            command.offer_record_id,
            command.problem_report_id,
            command.provider_id,
        )
        check_authorization(command.authorized_by, community_id)
        ensure_unique(command.problem_report_id)

        rating = Rating.submit(
            problem_report_id=command.problem_report_id,
            provider_id=command.provider_id,
            community_id=community_id,
            submitted_by=command.submitted_by,
            authorized_by=command.authorized_by,
            offer_record_id=command.offer_record_id,
            quality_score=command.quality_score,
            timeliness_score=command.timeliness_score,
            budget_adherence_score=command.budget_adherence_score,
            comment=command.comment.strip(),
            photo_refs=json.loads(command.photo_refs) if command.photo_refs else None,
            invoice_url=command.invoice_url,
        )

        with storage_conflict(command.problem_report_id):
            insert_rating(rating)

        logger.info(
            "Verified rating accepted",
            rating_id=str(rating.id),
            problem_report_id=str(command.problem_report_id),
            provider_id=str(command.provider_id),
            community_id=community_id,
        )
        return str(rating.id)


def submit_rating(command):
    """Process ``command`` synchronously and return the persisted Rating.

    A duplicate that slips past the fast-path check surfaces when the unit of
    work commits; it is reported as ``Conflict`` and never retried.
    """
    with storage_conflict(command.problem_report_id):
        rating_id = current_domain.process(command, asynchronous=False)
    return get_rating(rating_id)
