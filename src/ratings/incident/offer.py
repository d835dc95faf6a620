"""OfferRecord aggregate — a provider's priced proposal against a problem report.

An approved offer is the money trail behind a verified rating: the rating
must name the report and provider the approved offer was issued for.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from ratings.domain import ratings


@ratings.entity(part_of="OfferRecord")
class OfferLineItem:
    description = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    line_total = Float(default=0.0)


@ratings.aggregate
class OfferRecord:
    problem_report_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    description = Text()

    line_items = HasMany(OfferLineItem)
    total_cost = Float(default=0.0)

    is_approved = Boolean(default=False)
    approved_by = Identifier()
    approved_at = DateTime()

    @classmethod
    def quote(cls, problem_report_id, provider_id, line_items=None, description=None, total_cost=None):
        """Record a quote. The total is derived from line items when any are given."""
        offer = cls(
            problem_report_id=problem_report_id,
            provider_id=provider_id,
            description=description,
            is_approved=False,
        )

        for item in line_items or []:
            quantity = item["quantity"]
            unit_price = item["unit_price"]
            offer.add_line_items(
                OfferLineItem(
                    description=item["description"],
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=round(quantity * unit_price, 2),
                )
            )

        if offer.line_items:
            offer.total_cost = round(sum(li.line_total for li in offer.line_items), 2)
        else:
            offer.total_cost = total_cost or 0.0

        return offer

    def approve(self, approved_by):
        if self.is_approved:
            raise ValidationError({"is_approved": ["Offer is already approved"]})

        self.is_approved = True
        self.approved_by = approved_by
        self.approved_at = datetime.now(UTC)
