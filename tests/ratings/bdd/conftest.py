"""Shared BDD fixtures and step definitions for the ratings domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from ratings.community.actor import ActorRole
from ratings.rating.rating import Rating


@pytest.fixture()
def outcome():
    """Container for the submitted rating and any captured error."""
    return {"rating": None, "errors": [], "successes": []}


@given(
    parsers.cfparse('a community with a problem report in status "{status}"'),
    target_fixture="scene",
)
def community_with_report(status, make_provider, make_actor, make_report):
    provider = make_provider()
    return {
        "community_id": "comm-bdd",
        "provider": provider,
        "member": make_actor(role=ActorRole.MEMBER.value, community_id="comm-bdd"),
        "report": make_report(community_id="comm-bdd", status=status, provider=provider),
    }


@given("an approved offer from the assigned provider")
def approved_offer(scene, make_offer):
    scene["offer"] = make_offer(scene["report"], scene["provider"])


@given("an administrator of the same community")
def administrator(scene, make_actor):
    scene["admin"] = make_actor(role=ActorRole.ADMINISTRATOR.value, community_id=scene["community_id"])


@then("no rating is persisted")
def no_rating_persisted():
    assert current_domain.repository_for(Rating)._dao.query.all().items == []


@then(parsers.cfparse("exactly {count:d} rating is persisted"))
def n_ratings_persisted(count):
    assert len(current_domain.repository_for(Rating)._dao.query.all().items) == count
