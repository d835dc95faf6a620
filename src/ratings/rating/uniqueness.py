"""Uniqueness — at most one rating per problem report.

``ensure_unique`` is the fast path. The authoritative guarantee is the unique
``Rating.problem_report_id`` field: Protean rejects a duplicate on save and the
SQL schema carries a UNIQUE index, so two concurrent submissions that both pass
the fast path still produce a single row. ``storage_conflict`` turns the
storage rejection into the same ``Conflict`` the fast path raises.
"""

from contextlib import contextmanager

from protean.exceptions import ValidationError
from sqlalchemy.exc import IntegrityError

from ratings.accessor import find_rating_by_problem_report_id
from ratings.domain import logger
from ratings.errors import Conflict

DUPLICATE_MESSAGE = "A rating already exists for this problem report"

# PostgreSQL SQLSTATE for unique_violation
_PG_UNIQUE_VIOLATION = "23505"


def ensure_unique(problem_report_id):
    existing = find_rating_by_problem_report_id(problem_report_id)
    if existing is not None:
        raise Conflict(
            DUPLICATE_MESSAGE,
            problem_report_id=str(problem_report_id),
            rating_id=str(existing.id),
        )


def _is_unique_integrity_error(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "pgcode", None) == _PG_UNIQUE_VIOLATION:
        return True
    message = str(orig if orig is not None else exc).lower()
    return "unique constraint" in message or "duplicate key" in message


def _is_unique_violation(exc) -> bool:
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        if isinstance(exc, IntegrityError):
            return _is_unique_integrity_error(exc)
        if isinstance(exc, ValidationError) and "problem_report_id" in (exc.messages or {}):
            return True
        exc = exc.__cause__ or exc.__context__
    return False


@contextmanager
def storage_conflict(problem_report_id):
    """Translate a storage-level duplicate of ``problem_report_id`` into ``Conflict``."""
    try:
        yield
    except Exception as exc:
        if not _is_unique_violation(exc):
            raise
        logger.warning(
            "Duplicate rating rejected by storage",
            problem_report_id=str(problem_report_id),
        )
        raise Conflict(DUPLICATE_MESSAGE, problem_report_id=str(problem_report_id)) from exc
