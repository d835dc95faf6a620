from types import SimpleNamespace

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture
from ratings.community.actor import Actor, ActorRole
from ratings.community.provider import Provider
from ratings.incident.offer import OfferRecord
from ratings.incident.problem_report import ProblemReport, ProblemReportStatus
from ratings.rating.submission import SubmitRating, submit_rating


@pytest.fixture(scope="session")
def ratings_bed():
    from ratings.domain import ratings

    bed = DomainFixture(ratings)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ratings_bed):
    with ratings_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


def _persist(obj):
    current_domain.repository_for(type(obj)).add(obj)
    return obj


@pytest.fixture()
def make_actor():
    def _make(role=ActorRole.MEMBER.value, community_id="comm-001", **kwargs):
        return _persist(Actor(role=role, community_id=community_id, **kwargs))

    return _make


@pytest.fixture()
def make_provider(make_actor):
    def _make(company_name="Fontaneria Ruiz", operator=None):
        operator = operator or make_actor(role=ActorRole.PROVIDER_OPERATOR.value, community_id=None)
        return _persist(
            Provider(
                actor_id=str(operator.id),
                company_name=company_name,
                category="fontaneria",
            )
        )

    return _make


@pytest.fixture()
def make_report():
    def _make(community_id="comm-001", status=ProblemReportStatus.RESOLVED.value, provider=None):
        return _persist(
            ProblemReport(
                community_id=community_id,
                title="Leaking pipe in the garage",
                status=status,
                assigned_provider_id=str(provider.id) if provider else None,
            )
        )

    return _make


@pytest.fixture()
def make_offer():
    def _make(report, provider, approved=True):
        offer = OfferRecord.quote(
            problem_report_id=str(report.id),
            provider_id=str(provider.id),
            description="Replace pipe section",
            line_items=[
                {"description": "Copper pipe (m)", "quantity": 3, "unit_price": 12.5},
                {"description": "Labour (h)", "quantity": 2, "unit_price": 35.0},
            ],
        )
        if approved:
            offer.approve(approved_by="admin-approver")
        return _persist(offer)

    return _make


@pytest.fixture()
def make_world(make_actor, make_provider, make_report, make_offer):
    """A community where a resolved report can be rated end to end."""

    def _make(community_id="comm-001", provider=None):
        admin = make_actor(role=ActorRole.ADMINISTRATOR.value, community_id=community_id)
        member = make_actor(role=ActorRole.MEMBER.value, community_id=community_id)
        provider = provider or make_provider()
        report = make_report(community_id=community_id, provider=provider)
        offer = make_offer(report, provider)
        return SimpleNamespace(
            community_id=community_id,
            admin=admin,
            member=member,
            provider=provider,
            report=report,
            offer=offer,
        )

    return _make


@pytest.fixture()
def world(make_world):
    return make_world()


def rating_command(world, **overrides):
    defaults = {
        "problem_report_id": str(world.report.id),
        "provider_id": str(world.provider.id),
        "offer_record_id": str(world.offer.id),
        "authorized_by": str(world.admin.id),
        "submitted_by": str(world.member.id),
        "quality_score": 5,
        "timeliness_score": 4,
        "budget_adherence_score": 4,
        "comment": "Fixed the leak quickly and cleaned up afterwards.",
    }
    defaults.update(overrides)
    return SubmitRating(**defaults)


@pytest.fixture()
def submit():
    def _submit(world, **overrides):
        return submit_rating(rating_command(world, **overrides))

    return _submit
