"""Eligibility gate — only a resolved report from the submitter's community can be rated."""

from ratings.accessor import get_problem_report
from ratings.errors import CommunityMismatch, InvalidState, NotFound


def check_eligibility(problem_report_id, community_id):
    """Return the problem report if it may be rated by a member of ``community_id``."""
    report = get_problem_report(problem_report_id)
    if report is None:
        raise NotFound(
            "Problem report not found",
            problem_report_id=str(problem_report_id),
        )

    if not report.is_resolved:
        raise InvalidState(
            f"Only resolved problem reports can be rated (current status: {report.status})",
            problem_report_id=str(problem_report_id),
        )

    if str(report.community_id) != str(community_id):
        raise CommunityMismatch(
            "Problem report belongs to a different community",
            problem_report_id=str(problem_report_id),
        )

    return report
