"""Exceptions raised while ingesting and serving reports.

Every subclass of SubmissionRejected is answered with the same bare 403 so a
client cannot tell which check failed; the distinction only reaches the log.
"""


class SubmissionRejected(Exception):
    """Base class for client-caused submission failures."""

    reason = "rejected"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.reason}: {detail}" if detail else self.reason)


class MalformedRequest(SubmissionRejected):
    """A required field is missing or does not parse."""

    reason = "invalid request"


class InvalidStageSequence(SubmissionRejected):
    """The reported pipeline timeline is inconsistent."""

    reason = "invalid stage sequence"


class InvalidStages(InvalidStageSequence):
    """A stage was reached after an earlier one was not, or a successful run carries a log."""

    reason = "invalid stages"


class InvalidTimestampSequence(InvalidStageSequence):
    """A reached stage completed before the stage preceding it."""

    reason = "invalid timestamp sequence"


class UnknownProject(SubmissionRejected):
    reason = "invalid project"


class UnknownUser(SubmissionRejected):
    reason = "invalid user"


class BadSignature(SubmissionRejected):
    reason = "bad signature"


class StoreFailure(Exception):
    """The report store could not complete an operation."""
