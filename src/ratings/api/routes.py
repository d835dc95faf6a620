"""FastAPI routes for the Ratings bounded context.

Each route translates between Pydantic schemas (external contract) and the
rating commands and queries (internal domain concepts). Error kinds are
rendered by ``register_error_handlers``.
"""

import json

from fastapi import APIRouter, FastAPI, Header, Request
from fastapi.responses import JSONResponse

from ratings.accessor import get_actor, get_rating, list_ratings
from ratings.api.schemas import (
    AttachReplyRequest,
    ErrorResponse,
    ProviderStatisticsResponse,
    RatingResponse,
    SubmitRatingRequest,
)
from ratings.domain import logger
from ratings.errors import NotFound, RatingIntegrityError, Unauthorized
from ratings.rating.reply import attach_reply
from ratings.rating.submission import SubmitRating, submit_rating
from ratings.statistics.aggregation import provider_statistics
from ratings.utils.logging import add_context

rating_router = APIRouter(prefix="/ratings", tags=["ratings"])


def _errors(*status_codes: int) -> dict:
    return {code: {"model": ErrorResponse} for code in status_codes}


def _caller(x_actor_id: str | None) -> str:
    if not x_actor_id:
        raise Unauthorized("Missing authenticated caller identity")
    add_context(actor_id=x_actor_id)
    return x_actor_id


@rating_router.post(
    "",
    status_code=201,
    response_model=RatingResponse,
    responses=_errors(400, 403, 404, 409, 422),
)
async def create_rating(
    body: SubmitRatingRequest,
    x_actor_id: str | None = Header(default=None),
) -> RatingResponse:
    """Submit a verified rating for a resolved problem report."""
    command = SubmitRating(
        problem_report_id=body.problem_report_id,
        provider_id=body.provider_id,
        offer_record_id=body.offer_record_id,
        authorized_by=body.authorized_by,
        submitted_by=_caller(x_actor_id),
        quality_score=body.quality_score,
        timeliness_score=body.timeliness_score,
        budget_adherence_score=body.budget_adherence_score,
        overall_score=body.overall_score,
        comment=body.comment,
        photo_refs=json.dumps(body.photo_refs) if body.photo_refs else None,
        invoice_url=body.invoice_url,
    )
    rating = submit_rating(command)
    return RatingResponse.from_rating(rating)


@rating_router.post(
    "/{rating_id}/reply",
    response_model=RatingResponse,
    responses=_errors(400, 403, 404, 409),
)
async def create_reply(
    rating_id: str,
    body: AttachReplyRequest,
    x_actor_id: str | None = Header(default=None),
) -> RatingResponse:
    """Attach the rated provider's reply to a rating."""
    rating = attach_reply(rating_id, replied_by=_caller(x_actor_id), text=body.text)
    return RatingResponse.from_rating(rating)


@rating_router.get("", response_model=list[RatingResponse], responses=_errors(403, 404))
async def get_ratings(
    provider_id: str | None = None,
    x_actor_id: str | None = Header(default=None),
) -> list[RatingResponse]:
    """List ratings visible to the caller, newest first.

    Community members only see their own community's ratings. Callers with no
    community (provider operators) are not narrowed by community.
    """
    caller_id = _caller(x_actor_id)
    caller = get_actor(caller_id)
    if caller is None:
        raise NotFound("Requesting actor not found", actor_id=caller_id)

    ratings = list_ratings(provider_id, caller.community_id)
    return [RatingResponse.from_rating(r) for r in ratings]


@rating_router.get("/providers/{provider_id}/statistics", response_model=ProviderStatisticsResponse)
async def get_provider_statistics(
    provider_id: str,
    community_id: str | None = None,
) -> ProviderStatisticsResponse:
    """Reputation statistics computed from the provider's ratings."""
    stats = provider_statistics(provider_id, community_id)
    return ProviderStatisticsResponse(**stats.to_dict())


@rating_router.get("/{rating_id}", response_model=RatingResponse, responses=_errors(404))
async def get_rating_detail(rating_id: str) -> RatingResponse:
    rating = get_rating(rating_id)
    if rating is None:
        raise NotFound("Rating not found", rating_id=rating_id)
    return RatingResponse.from_rating(rating)


async def _rating_integrity_error_handler(request: Request, exc: RatingIntegrityError) -> JSONResponse:
    logger.warning(
        "Rating request rejected",
        kind=exc.kind,
        reason=exc.message,
        path=request.url.path,
        **exc.context,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Render every rating error kind as ``{"kind", "message"}`` with its status."""
    app.add_exception_handler(RatingIntegrityError, _rating_integrity_error_handler)
