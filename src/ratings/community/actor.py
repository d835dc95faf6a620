"""Actor aggregate — an account acting within a community.

Only the attributes the rating checks read are modelled here. Registration,
sessions and role changes belong to the identity service.
"""

from enum import Enum

from protean.fields import Identifier, String

from ratings.domain import ratings


class ActorRole(Enum):
    ADMINISTRATOR = "administrator"
    MEMBER = "member"
    PROVIDER_OPERATOR = "provider_operator"


@ratings.aggregate
class Actor:
    community_id = Identifier()
    role = String(choices=ActorRole, default=ActorRole.MEMBER.value)
    email = String(max_length=254)
    display_name = String(max_length=255)

    @property
    def is_administrator(self) -> bool:
        return ActorRole(self.role) == ActorRole.ADMINISTRATOR
