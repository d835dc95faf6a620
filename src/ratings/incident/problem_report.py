"""ProblemReport aggregate — an incident reported within a community.

Reports move through open → quoted → approved → in_progress → resolved.
The transition flow is owned elsewhere; only a resolved report has a
verifiable outcome and may be rated.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from ratings.domain import ratings


class ProblemReportStatus(Enum):
    OPEN = "open"
    QUOTED = "quoted"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


@ratings.aggregate
class ProblemReport:
    community_id = Identifier(required=True)
    title = String(max_length=255)
    status = String(choices=ProblemReportStatus, default=ProblemReportStatus.OPEN.value)

    assigned_provider_id = Identifier()
    approved_offer_id = Identifier()

    final_cost = Float()
    resolved_at = DateTime()
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @property
    def is_resolved(self) -> bool:
        return ProblemReportStatus(self.status) == ProblemReportStatus.RESOLVED

    def resolve(self, final_cost=None):
        """Close the report. Resolution is terminal."""
        if self.is_resolved:
            raise ValidationError({"status": ["Problem report is already resolved"]})

        self.status = ProblemReportStatus.RESOLVED.value
        self.final_cost = final_cost
        self.resolved_at = datetime.now(UTC)
