"""Offer correspondence — a verified rating must trace back to approved money.

The referenced offer has to be approved, issued against the rated problem
report, and quoted by the rated provider. Checks run in that order so the
caller always learns the most fundamental mismatch first.
"""

from ratings.accessor import get_offer_record
from ratings.errors import NotApproved, NotFound, ProviderMismatch, ReportMismatch


def check_offer_correspondence(offer_record_id, problem_report_id, provider_id):
    """Return the offer record if it backs a rating of ``provider_id`` on ``problem_report_id``."""
    offer = get_offer_record(offer_record_id)
    if offer is None:
        raise NotFound("Offer record not found", offer_record_id=str(offer_record_id))

    if not offer.is_approved:
        raise NotApproved(
            "Offer record has not been approved",
            offer_record_id=str(offer_record_id),
        )

    if str(offer.problem_report_id) != str(problem_report_id):
        raise ReportMismatch(
            "Offer record was issued for a different problem report",
            offer_record_id=str(offer_record_id),
            problem_report_id=str(problem_report_id),
        )

    if str(offer.provider_id) != str(provider_id):
        raise ProviderMismatch(
            "Offer record was quoted by a different provider",
            offer_record_id=str(offer_record_id),
            provider_id=str(provider_id),
        )

    return offer
