from __future__ import annotations

from portal.clients.api_client import PortalApiClient
from portal.core.logging import get_logger
from portal.schemas.requests import NoteCreate
from portal.schemas.responses import Submission, SubmissionBuckets

logger = get_logger(__name__)


class SubmissionsClient(PortalApiClient):
    """Triage of contact-form submissions (recruitment, complaints, appointments)."""

    async def list_submissions(self) -> SubmissionBuckets:
        data = await self._read(
            "/contact-submissions", "Erreur lors du chargement des soumissions"
        )
        submissions = [Submission.model_validate(s) for s in data.get("submissions", [])]
        buckets = SubmissionBuckets(
            active=[s for s in submissions if not s.is_archived],
            archived=[s for s in submissions if s.is_archived],
        )
        logger.info(
            "submissions_loaded", active=len(buckets.active), archived=len(buckets.archived)
        )
        return buckets

    async def get_submission(self, submission_id: int) -> Submission:
        data = await self._read(
            f"/contact-submissions/{submission_id}", "Erreur lors du chargement de la soumission"
        )
        return Submission.model_validate(data["submission"])

    async def take_charge(self, submission_id: int) -> None:
        await self._call(
            "POST",
            f"/contact-submissions/{submission_id}/take-charge",
            "Erreur lors de la prise en charge",
        )
        logger.info("submission_taken", submission_id=submission_id)

    async def archive(self, submission_id: int) -> None:
        await self._call(
            "POST", f"/contact-submissions/{submission_id}/archive", "Erreur lors de l'archivage"
        )
        logger.info("submission_archived", submission_id=submission_id)

    async def delete(self, submission_id: int) -> None:
        await self._call(
            "DELETE", f"/contact-submissions/{submission_id}", "Erreur lors de la suppression"
        )
        logger.info("submission_deleted", submission_id=submission_id)

    async def add_note(self, submission_id: int, note: str) -> None:
        body = NoteCreate(note=note)
        await self._call(
            "POST",
            f"/contact-submissions/{submission_id}/note",
            "Erreur lors de l'ajout",
            json=body.model_dump(),
        )
