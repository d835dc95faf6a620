"""Authorization — every rating is co-signed by an administrator of the submitter's community.

The role is read from storage on each call, never from the caller's session.
"""

from ratings.accessor import get_actor
from ratings.errors import CommunityMismatch, NotFound, Unauthorized


def check_authorization(authorized_by, community_id):
    """Return the authorizing actor if it administers ``community_id``."""
    actor = get_actor(authorized_by)
    if actor is None:
        raise NotFound("Authorizing actor not found", authorized_by=str(authorized_by))

    if not actor.is_administrator:
        raise Unauthorized(
            "Ratings must be authorized by a community administrator",
            authorized_by=str(authorized_by),
        )

    if str(actor.community_id) != str(community_id):
        raise CommunityMismatch(
            "Authorizing administrator belongs to a different community",
            authorized_by=str(authorized_by),
        )

    return actor
