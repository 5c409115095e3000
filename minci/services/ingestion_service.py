"""Report ingestion: authenticate, validate and persist a runner's submission"""
import logging
import time

from sqlalchemy.ext.asyncio import AsyncSession

from minci.core.errors import BadSignature, UnknownProject, UnknownUser
from minci.core.security import (
    build_canonical_message,
    machine_hash,
    project_machine_hash,
    verify_signature,
)
from minci.core.stages import validate_stages
from minci.models.report import Report
from minci.schemas.report import SignedSubmission
from minci.services.project_service import ProjectService
from minci.services.report_service import ReportService
from minci.services.user_service import UserService

logger = logging.getLogger(__name__)


class IngestionService:
    """Service that turns a signed submission into a stored report"""

    @staticmethod
    async def submit(session: AsyncSession, signed: SignedSubmission) -> Report:
        """
        Accept a parsed submission or raise the reason it is refused.

        The signature is checked before the stage timeline so that a caller
        who cannot sign learns nothing about which structural rule failed.

        Args:
            session: Database session
            signed: Submission fields plus the client signature

        Returns:
            Report: The newly stored report

        Raises:
            UnknownProject: No project has the submitted name
            UnknownUser: No user has the submitted API key
            BadSignature: The signature does not match
            InvalidStageSequence: The timeline is inconsistent
            StoreFailure: The store could not be read or written
        """
        submission = signed.submission

        project = await ProjectService.get_project_by_name(session, submission.project_name)
        if project is None:
            raise UnknownProject(submission.project_name)

        user = await UserService.get_user_by_api_key(session, submission.apikey)
        if user is None:
            raise UnknownUser(str(submission.apikey))

        message = build_canonical_message(submission, user.apisecret, log_bytes=signed.log_bytes)
        if not verify_signature(message, signed.signature):
            raise BadSignature(f"user {user.id}, project {project.name}")

        validate_stages(submission.stages, submission.log)

        uname = (
            submission.unamem,
            submission.unamen,
            submission.unamer,
            submission.unames,
            submission.unamev,
        )
        report = await ReportService.insert_report(
            session,
            project_id=project.id,
            user_id=user.id,
            submission=submission,
            ctime=int(time.time()),
            machine_hash=machine_hash(*uname),
            project_machine_hash=project_machine_hash(project.id, *uname),
        )
        logger.info("%s: log submitted: %s", user.email, project.name)
        return report
