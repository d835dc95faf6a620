"""Verified Ratings bounded context — rating admissibility and provider reputation.

Decides whether a review of a service provider may be accepted as a
verified rating (resolved problem report, approved matching offer,
administrator co-signature, one rating per report) and derives reputation
statistics from the accepted ratings.
"""

from protean.domain import Domain

from ratings.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
ratings = Domain(name="ratings")
