"""Provider aggregate — a company that quotes for and resolves problem reports.

The reputation fields are a denormalized cache of the statistics computed
from the provider's ratings. They are refreshed after every accepted rating
by ``ratings.statistics.reputation``.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, Integer, String

from ratings.domain import ratings


@ratings.aggregate
class Provider:
    actor_id = Identifier(required=True)
    company_name = String(required=True, max_length=255)
    category = String(max_length=50)

    # Reputation summary
    average_rating = Float(default=0.0)
    total_ratings = Integer(default=0)
    total_jobs = Integer(default=0)

    updated_at = DateTime()

    def refresh_reputation(self, average_rating, total_ratings, total_jobs):
        self.average_rating = average_rating
        self.total_ratings = total_ratings
        self.total_jobs = total_jobs
        self.updated_at = datetime.now(UTC)
