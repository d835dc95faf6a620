"""AttachProviderReply — the rated provider answers a rating.

The caller must operate the provider named on the rating. One reply per
rating; a second attempt is a conflict, not an overwrite.
"""

from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.accessor import get_provider_by_actor_id, get_rating, update_rating_reply
from ratings.domain import logger, ratings
from ratings.errors import NotFound, Unauthorized
from ratings.rating.rating import Rating


@ratings.command(part_of="Rating")
class AttachProviderReply:
    rating_id = Identifier(required=True)
    replied_by = Identifier(required=True)  # Authenticated caller, set by the API layer
    text = Text()


@ratings.command_handler(part_of=Rating)
class AttachProviderReplyHandler:
    @handle(AttachProviderReply)
    def attach_provider_reply(self, command):
        rating = get_rating(command.rating_id)
        if rating is None:
            raise NotFound("Rating not found", rating_id=str(command.rating_id))

        provider = get_provider_by_actor_id(command.replied_by)
        if provider is None:
            raise Unauthorized(
                "Only provider accounts can reply to ratings",
                replied_by=str(command.replied_by),
            )

        rating.attach_reply(provider_id=provider.id, text=command.text)
        update_rating_reply(rating)

        logger.info(
            "Provider reply attached",
            rating_id=str(rating.id),
            provider_id=str(provider.id),
        )


def attach_reply(rating_id, replied_by, text):
    """Attach a reply and return the updated Rating."""
    current_domain.process(
        AttachProviderReply(rating_id=rating_id, replied_by=replied_by, text=text),
        asynchronous=False,
    )
    return get_rating(rating_id)
