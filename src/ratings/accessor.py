"""Entity accessor — storage lookups shared by every rating check.

Lookups return ``None`` for a missing entity; deciding whether absence is an
error is left to the caller. Every call goes to the repository, nothing is
cached between requests.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ratings.community.actor import Actor
from ratings.community.provider import Provider
from ratings.incident.offer import OfferRecord
from ratings.incident.problem_report import ProblemReport, ProblemReportStatus
from ratings.rating.rating import Rating

PAGE_SIZE = 100


def _get(aggregate_cls, identifier):
    if not identifier:
        return None
    try:
        return current_domain.repository_for(aggregate_cls).get(str(identifier))
    except ObjectNotFoundError:
        return None


def _all(aggregate_cls, **filters):
    """Every record matching ``filters``, paging past the default query limit."""
    query = current_domain.repository_for(aggregate_cls)._dao.query
    if filters:
        query = query.filter(**filters)

    items = []
    offset = 0
    while True:
        result = query.limit(PAGE_SIZE).offset(offset).all()
        items.extend(result.items)
        offset += len(result.items)
        if not result.items or offset >= result.total:
            return items


def get_problem_report(problem_report_id):
    return _get(ProblemReport, problem_report_id)


def get_offer_record(offer_record_id):
    return _get(OfferRecord, offer_record_id)


def get_actor(actor_id):
    return _get(Actor, actor_id)


def get_provider(provider_id):
    return _get(Provider, provider_id)


def get_provider_by_actor_id(actor_id):
    """Resolve the provider operated by an actor account, if any."""
    if not actor_id:
        return None
    providers = _all(Provider, actor_id=str(actor_id))
    return providers[0] if providers else None


def get_rating(rating_id):
    return _get(Rating, rating_id)


def find_rating_by_problem_report_id(problem_report_id):
    found = _all(Rating, problem_report_id=str(problem_report_id))
    return found[0] if found else None


def insert_rating(rating):
    current_domain.repository_for(Rating).add(rating)
    return rating


def update_rating_reply(rating):
    """Persist a rating whose reply text and timestamp have just been set."""
    current_domain.repository_for(Rating).add(rating)
    return rating


def list_ratings_by_provider(provider_id, community_id=None):
    filters = {"provider_id": str(provider_id)}
    if community_id:
        filters["community_id"] = str(community_id)
    return _all(Rating, **filters)


def list_ratings(provider_id=None, community_id=None):
    """Ratings newest first, optionally narrowed to a provider and/or community."""
    filters = {}
    if provider_id:
        filters["provider_id"] = str(provider_id)
    if community_id:
        filters["community_id"] = str(community_id)
    return sorted(_all(Rating, **filters), key=lambda r: r.created_at, reverse=True)


def count_completed_jobs(provider_id):
    """Resolved problem reports assigned to the provider."""
    return len(
        _all(
            ProblemReport,
            assigned_provider_id=str(provider_id),
            status=ProblemReportStatus.RESOLVED.value,
        )
    )
