"""Aggregation engine — reputation statistics recomputed from the full rating set.

Nothing here is incremental: every call reads all of the provider's ratings
and averages them, so the figures cannot drift from the stored ratings.
"""

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from ratings.accessor import list_ratings_by_provider

_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class ProviderStatistics:
    average_overall: float = 0.0
    average_quality: float = 0.0
    average_timeliness: float = 0.0
    average_budget_adherence: float = 0.0
    total_ratings: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _mean(values) -> float:
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def compute_statistics(ratings) -> ProviderStatistics:
    """Average each score over ``ratings``, one decimal place, half up."""
    ratings = list(ratings)
    if not ratings:
        return ProviderStatistics()

    return ProviderStatistics(
        average_overall=_mean([r.overall_score.value for r in ratings]),
        average_quality=_mean([r.quality_score.value for r in ratings]),
        average_timeliness=_mean([r.timeliness_score.value for r in ratings]),
        average_budget_adherence=_mean([r.budget_adherence_score.value for r in ratings]),
        total_ratings=len(ratings),
    )


def provider_statistics(provider_id, community_id=None) -> ProviderStatistics:
    """Statistics for a provider, optionally limited to ratings from one community."""
    return compute_statistics(list_ratings_by_provider(provider_id, community_id))
