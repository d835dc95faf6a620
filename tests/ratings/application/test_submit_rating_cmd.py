"""Application tests for SubmitRating — the full admissibility pipeline."""

import json

import pytest
from protean import current_domain
from ratings.community.actor import ActorRole
from ratings.errors import (
    CommunityMismatch,
    Conflict,
    InvalidInput,
    InvalidState,
    NotApproved,
    NotFound,
    ProviderMismatch,
    ReportMismatch,
    Unauthorized,
)
from ratings.incident.problem_report import ProblemReportStatus
from ratings.rating.rating import Rating


def _stored_ratings():
    return current_domain.repository_for(Rating)._dao.query.all().items


class TestAcceptedSubmission:
    def test_returns_persisted_verified_rating(self, world, submit):
        rating = submit(world)
        stored = current_domain.repository_for(Rating).get(str(rating.id))
        assert stored.is_verified is True
        assert str(stored.problem_report_id) == str(world.report.id)
        assert str(stored.provider_id) == str(world.provider.id)
        assert str(stored.offer_record_id) == str(world.offer.id)
        assert str(stored.authorized_by) == str(world.admin.id)

    def test_submitter_and_community_come_from_caller(self, world, submit):
        rating = submit(world)
        assert str(rating.submitted_by) == str(world.member.id)
        assert str(rating.community_id) == world.community_id

    def test_overall_is_derived(self, world, submit):
        rating = submit(world, quality_score=5, timeliness_score=4, budget_adherence_score=4)
        assert rating.overall_score.value == 4

    def test_matching_overall_accepted(self, world, submit):
        rating = submit(world, quality_score=5, timeliness_score=5, budget_adherence_score=4, overall_score=5)
        assert rating.overall_score.value == 5

    def test_photo_refs_persisted(self, world, submit):
        rating = submit(world, photo_refs=json.dumps(["photos/pipe-before.jpg", "photos/pipe-after.jpg"]))
        assert rating.photos == ["photos/pipe-before.jpg", "photos/pipe-after.jpg"]

    def test_comment_is_stripped(self, world, submit):
        rating = submit(world, comment="  Great job.  ")
        assert rating.comment == "Great job."


class TestInputValidation:
    def test_overall_mismatch_rejected(self, world, submit):
        with pytest.raises(InvalidInput) as exc:
            submit(world, quality_score=2, timeliness_score=2, budget_adherence_score=2, overall_score=5)
        assert "rounded mean" in exc.value.message
        assert _stored_ratings() == []

    @pytest.mark.parametrize("field", ["quality_score", "timeliness_score", "budget_adherence_score"])
    @pytest.mark.parametrize("value", [0, 6])
    def test_category_out_of_range(self, world, submit, field, value):
        with pytest.raises(InvalidInput) as exc:
            submit(world, **{field: value})
        assert field in exc.value.message

    def test_blank_comment(self, world, submit):
        with pytest.raises(InvalidInput):
            submit(world, comment="   ")

    def test_unknown_submitter(self, world, submit):
        with pytest.raises(NotFound) as exc:
            submit(world, submitted_by="ghost-actor")
        assert "Submitting actor" in exc.value.message

    def test_submitter_without_community(self, world, submit, make_actor):
        drifter = make_actor(community_id=None)
        with pytest.raises(CommunityMismatch):
            submit(world, submitted_by=str(drifter.id))


class TestEligibilityGate:
    def test_missing_report(self, world, submit):
        with pytest.raises(NotFound) as exc:
            submit(world, problem_report_id="no-such-report")
        assert "Problem report" in exc.value.message

    @pytest.mark.parametrize(
        "status",
        [s.value for s in ProblemReportStatus if s != ProblemReportStatus.RESOLVED],
    )
    def test_unresolved_report(self, world, submit, make_report, status):
        report = make_report(status=status, provider=world.provider)
        with pytest.raises(InvalidState):
            submit(world, problem_report_id=str(report.id))
        assert _stored_ratings() == []

    def test_report_from_other_community(self, world, submit, make_report):
        foreign = make_report(community_id="comm-999", provider=world.provider)
        with pytest.raises(CommunityMismatch):
            submit(world, problem_report_id=str(foreign.id))


class TestOfferCorrespondence:
    def test_missing_offer(self, world, submit):
        with pytest.raises(NotFound) as exc:
            submit(world, offer_record_id="no-such-offer")
        assert "Offer record" in exc.value.message

    def test_unapproved_offer(self, world, submit, make_offer):
        pending = make_offer(world.report, world.provider, approved=False)
        with pytest.raises(NotApproved):
            submit(world, offer_record_id=str(pending.id))

    def test_unapproved_offer_wins_over_other_mismatches(self, world, submit, make_offer, make_report, make_provider):
        other_report = make_report(provider=world.provider)
        pending = make_offer(other_report, make_provider(company_name="Otros SL"), approved=False)
        with pytest.raises(NotApproved):
            submit(world, offer_record_id=str(pending.id))

    def test_offer_for_other_report(self, world, submit, make_offer, make_report):
        other_report = make_report(provider=world.provider)
        offer = make_offer(other_report, world.provider)
        with pytest.raises(ReportMismatch):
            submit(world, offer_record_id=str(offer.id))

    def test_offer_from_other_provider(self, world, submit, make_offer, make_provider):
        rival = make_provider(company_name="Rival Reformas")
        offer = make_offer(world.report, rival)
        with pytest.raises(ProviderMismatch):
            submit(world, offer_record_id=str(offer.id))

    def test_rating_other_provider_than_offer(self, world, submit, make_provider):
        rival = make_provider(company_name="Rival Reformas")
        with pytest.raises(ProviderMismatch):
            submit(world, provider_id=str(rival.id))


class TestAuthorization:
    def test_missing_authorizer(self, world, submit):
        with pytest.raises(NotFound) as exc:
            submit(world, authorized_by="no-such-actor")
        assert "Authorizing actor" in exc.value.message

    @pytest.mark.parametrize("role", [ActorRole.MEMBER.value, ActorRole.PROVIDER_OPERATOR.value])
    def test_non_administrator(self, world, submit, make_actor, role):
        actor = make_actor(role=role, community_id=world.community_id)
        with pytest.raises(Unauthorized):
            submit(world, authorized_by=str(actor.id))

    def test_self_authorization_by_member(self, world, submit):
        with pytest.raises(Unauthorized):
            submit(world, authorized_by=str(world.member.id))

    def test_administrator_of_other_community(self, world, submit, make_actor):
        foreign_admin = make_actor(role=ActorRole.ADMINISTRATOR.value, community_id="comm-999")
        with pytest.raises(CommunityMismatch):
            submit(world, authorized_by=str(foreign_admin.id))

    def test_demoted_administrator(self, world, submit):
        world.admin.role = ActorRole.MEMBER.value
        current_domain.repository_for(type(world.admin)).add(world.admin)
        with pytest.raises(Unauthorized):
            submit(world)


class TestUniqueness:
    def test_second_rating_conflicts(self, world, submit):
        first = submit(world)
        with pytest.raises(Conflict):
            submit(world, quality_score=1, timeliness_score=1, budget_adherence_score=1, comment="Changed my mind")

        stored = current_domain.repository_for(Rating).get(str(first.id))
        assert stored.quality_score.value == 5
        assert stored.comment == first.comment
        assert len(_stored_ratings()) == 1

    def test_storage_constraint_catches_race(self, world, submit, monkeypatch):
        """Both submissions pass the fast-path check; storage keeps only one."""
        submit(world)
        monkeypatch.setattr("ratings.rating.submission.ensure_unique", lambda problem_report_id: None)

        with pytest.raises(Conflict):
            submit(world)
        assert len(_stored_ratings()) == 1
