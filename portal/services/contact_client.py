from __future__ import annotations

from typing import Any

import httpx

from portal.config import Settings
from portal.core.exceptions import ApiError, InvalidInputError
from portal.core.logging import get_logger
from portal.schemas.enums import FormType, NotificationKind
from portal.schemas.requests import ContactSubmission
from portal.services.notifier import Notifier
from portal.utils.image_processing import encode_pdf

logger = get_logger(__name__)

# (success title, success message, failure message) per form
CONFIRMATIONS: dict[FormType, tuple[str, str, str]] = {
    FormType.RECRUTEMENT: (
        "Candidature envoyée",
        "Nous avons bien reçu votre candidature. Nous vous contacterons prochainement.",
        "Impossible d'envoyer votre candidature",
    ),
    FormType.PLAINTE: (
        "Plainte enregistrée",
        "Votre plainte a été enregistrée. Nous la traiterons dans les plus brefs délais.",
        "Impossible d'enregistrer votre plainte",
    ),
    FormType.RDV: (
        "RDV demandé",
        "Votre demande de rendez-vous a été envoyée. "
        "Nous vous confirmerons la disponibilité sous 24h.",
        "Impossible d'enregistrer votre demande",
    ),
}


class ContactClient:
    """Public contact form. Posts without credentials."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings, notifier: Notifier) -> None:
        self._client = client
        self._settings = settings
        self._notifier = notifier

    async def submit(self, submission: ContactSubmission) -> None:
        title, message, failure = CONFIRMATIONS[submission.form_type]
        try:
            resp = await self._client.post(
                "/api/contact-submission",
                json=submission.model_dump(mode="json"),
                headers={"Content-Type": "application/json"},
            )
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(
                "contact_submission_failed", form_type=submission.form_type.value, error=str(exc)
            )
            self._notifier.notify(NotificationKind.ERROR, "Erreur", failure)
            raise ApiError(message=failure, detail=str(exc)) from exc

        if not isinstance(data, dict):
            data = {}
        if not data.get("success"):
            error_message = data.get("message") or "Erreur lors de l'envoi"
            logger.warning(
                "contact_submission_rejected",
                form_type=submission.form_type.value,
                status=resp.status_code,
                message=error_message,
            )
            self._notifier.notify(NotificationKind.ERROR, "Erreur", error_message)
            raise ApiError(message=error_message, status_code=resp.status_code)

        logger.info("contact_submission_sent", form_type=submission.form_type.value)
        self._notifier.notify(NotificationKind.SUCCESS, title, message)

    async def submit_recruitment(
        self,
        nom: str,
        email: str,
        telephone: str,
        experience: str,
        certifications: str,
        motivation: str,
        cv_filename: str,
        cv: bytes | None,
    ) -> None:
        if not cv:
            self._notifier.notify(
                NotificationKind.ERROR, "CV manquant", "Veuillez joindre votre CV en PDF"
            )
            raise InvalidInputError(message="CV manquant")
        try:
            cv_base64 = encode_pdf(cv, max_bytes=self._settings.MAX_UPLOAD_MB * 1024 * 1024)
        except InvalidInputError as exc:
            self._notifier.notify(NotificationKind.ERROR, "CV invalide", exc.message)
            raise

        await self.submit(
            ContactSubmission(
                form_type=FormType.RECRUTEMENT,
                nom=nom.strip(),
                email=email.strip(),
                telephone=telephone.strip(),
                form_data={
                    "experience": experience,
                    "certifications": certifications.strip(),
                    "motivation": motivation.strip(),
                    "cv_filename": cv_filename,
                    "cv_base64": cv_base64,
                },
            )
        )

    async def submit_complaint(
        self,
        nom: str,
        email: str,
        client: str,
        date_incident: str,
        type_plainte: str,
        description: str,
        telephone: str | None = None,
        reference: str | None = None,
    ) -> None:
        await self.submit(
            ContactSubmission(
                form_type=FormType.PLAINTE,
                nom=nom.strip(),
                email=email.strip(),
                telephone=_blank_to_none(telephone),
                form_data={
                    "client": client,
                    "reference": _blank_to_none(reference),
                    "date_incident": date_incident,
                    "type_plainte": type_plainte,
                    "description": description.strip(),
                },
            )
        )

    async def submit_appointment(
        self,
        nom: str,
        email: str,
        telephone: str,
        type_rdv: str,
        date_souhaitee: str,
        heure_souhaitee: str,
        lieu: str,
        objet: str,
        entreprise: str | None = None,
    ) -> None:
        form_data: dict[str, Any] = {
            "entreprise": _blank_to_none(entreprise),
            "type_rdv": type_rdv,
            "date_souhaitee": date_souhaitee,
            "heure_souhaitee": heure_souhaitee,
            "lieu": lieu,
            "objet": objet.strip(),
        }
        await self.submit(
            ContactSubmission(
                form_type=FormType.RDV,
                nom=nom.strip(),
                email=email.strip(),
                telephone=telephone.strip(),
                form_data=form_data,
            )
        )


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
