"""Provider reputation refresh — keeps the Provider summary in step with its ratings.

Reacts to RatingSubmitted by recomputing the provider's statistics from
scratch and storing them on the Provider aggregate. Runs in the same unit of
work in sync mode and from the Engine in async mode.
"""

from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.accessor import count_completed_jobs, get_provider
from ratings.community.provider import Provider
from ratings.domain import logger, ratings
from ratings.rating.events import RatingSubmitted
from ratings.rating.rating import Rating
from ratings.statistics.aggregation import provider_statistics


@ratings.event_handler(part_of=Rating)
class ProviderReputationHandler:
    @handle(RatingSubmitted)
    def on_rating_submitted(self, event: RatingSubmitted) -> None:
        provider = get_provider(event.provider_id)
        if provider is None:
            logger.warning(
                "Rated provider not found, reputation not refreshed",
                provider_id=str(event.provider_id),
                rating_id=str(event.rating_id),
            )
            return

        stats = provider_statistics(provider.id)
        provider.refresh_reputation(
            average_rating=stats.average_overall,
            total_ratings=stats.total_ratings,
            total_jobs=count_completed_jobs(provider.id),
        )
        current_domain.repository_for(Provider).add(provider)

        logger.info(
            "Provider reputation refreshed",
            provider_id=str(provider.id),
            average_rating=stats.average_overall,
            total_ratings=stats.total_ratings,
        )
