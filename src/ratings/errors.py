"""Error kinds raised by the rating integrity checks.

Every kind carries a human-readable message and the HTTP status the web
layer renders it with, so callers never need to reinterpret the kind.
"""


class RatingIntegrityError(Exception):
    kind = "RatingIntegrityError"
    status_code = 400

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class NotFound(RatingIntegrityError):
    kind = "NotFound"
    status_code = 404


class InvalidState(RatingIntegrityError):
    kind = "InvalidState"
    status_code = 409


class CommunityMismatch(RatingIntegrityError):
    kind = "CommunityMismatch"
    status_code = 403


class NotApproved(RatingIntegrityError):
    kind = "NotApproved"
    status_code = 422


class ReportMismatch(RatingIntegrityError):
    kind = "ReportMismatch"
    status_code = 422


class ProviderMismatch(RatingIntegrityError):
    kind = "ProviderMismatch"
    status_code = 422


class Unauthorized(RatingIntegrityError):
    kind = "Unauthorized"
    status_code = 403


class Conflict(RatingIntegrityError):
    kind = "Conflict"
    status_code = 409


class InvalidInput(RatingIntegrityError):
    kind = "InvalidInput"
    status_code = 400
