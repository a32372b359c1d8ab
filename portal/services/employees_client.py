from __future__ import annotations

from portal.clients.api_client import PortalApiClient
from portal.core.logging import get_logger
from portal.schemas.requests import AvatarUpload, EmployeeCreate, NoteCreate, SanctionCreate
from portal.schemas.responses import Employee, EmployeeNote, Rank, Sanction, UserRecord
from portal.utils.image_processing import prepare_avatar

logger = get_logger(__name__)


class EmployeesClient(PortalApiClient):
    """Employee roster: agents, ranks, notes, sanctions and avatars."""

    async def list_employees(self) -> list[Employee]:
        data = await self._read("/employees", "Erreur lors du chargement des employés")
        employees = [Employee.model_validate(e) for e in data.get("employees", [])]
        logger.info("employees_loaded", count=len(employees))
        return employees

    async def get_employee(self, employee_id: int) -> Employee:
        data = await self._read(
            f"/employees/{employee_id}", "Erreur lors du chargement des détails"
        )
        return Employee.model_validate(data["employee"])

    async def list_ranks(self) -> list[Rank]:
        data = await self._read("/ranks", "Erreur lors du chargement des grades")
        return [Rank.model_validate(r) for r in data.get("ranks", [])]

    async def create_employee(self, employee: EmployeeCreate) -> None:
        await self._call(
            "POST", "/employees", "Erreur lors de la création", json=employee.model_dump()
        )
        logger.info("employee_created", employee_id=employee.id)

    async def delete_employee(self, employee_id: int) -> None:
        await self._call("DELETE", f"/employees/{employee_id}", "Erreur lors de la suppression")
        logger.info("employee_deleted", employee_id=employee_id)

    async def list_notes(self, employee_id: int) -> list[EmployeeNote]:
        data = await self._read(
            f"/employees/{employee_id}/notes", "Erreur lors du chargement des notes"
        )
        return [EmployeeNote.model_validate(n) for n in data.get("notes", [])]

    async def add_note(self, employee_id: int, note: str) -> None:
        body = NoteCreate(note=note)
        await self._call(
            "POST", f"/employees/{employee_id}/notes", "Erreur lors de l'ajout", json=body.model_dump()
        )

    async def delete_note(self, note_id: int) -> None:
        await self._call("DELETE", f"/notes/{note_id}", "Erreur lors de la suppression")

    async def list_sanctions(self, employee_id: int) -> list[Sanction]:
        data = await self._read(
            f"/employees/{employee_id}/sanctions", "Erreur lors du chargement des sanctions"
        )
        return [Sanction.model_validate(s) for s in data.get("sanctions", [])]

    async def add_sanction(self, employee_id: int, sanction_type: str, reason: str) -> None:
        body = SanctionCreate(sanction_type=sanction_type, reason=reason)
        await self._call(
            "POST",
            f"/employees/{employee_id}/sanctions",
            "Erreur lors de l'ajout",
            json=body.model_dump(),
        )

    async def delete_sanction(self, sanction_id: int) -> None:
        await self._call("DELETE", f"/sanctions/{sanction_id}", "Erreur lors de la suppression")

    async def upload_avatar(self, employee_id: int, image: bytes, filename: str) -> str:
        """Shrink ``image`` and upload it; returns the hosted avatar URL."""
        data_url = prepare_avatar(
            image,
            max_bytes=self._settings.MAX_UPLOAD_MB * 1024 * 1024,
            max_px=self._settings.AVATAR_MAX_PX,
            quality=self._settings.AVATAR_JPEG_QUALITY,
        )
        body = AvatarUpload(image=data_url, filename=filename)
        data = await self._call(
            "POST",
            f"/employees/{employee_id}/avatar/upload",
            "Erreur lors de l'upload",
            json=body.model_dump(),
        )
        avatar_url = data["avatar_url"]
        logger.info("avatar_uploaded", employee_id=employee_id)

        user = self._session.get_user()
        if user is not None and user.id == employee_id:
            self._session.update_user(user.model_copy(update={"avatar_url": avatar_url}))
        return avatar_url

    async def sync_current_user_avatar(self) -> UserRecord | None:
        """Fill the cached user's ``avatar_url`` from the roster when it is missing."""
        user = self._session.get_user()
        if user is None or user.avatar_url:
            return user

        employee = await self.get_employee(user.id)
        if employee.avatar_url:
            user = user.model_copy(update={"avatar_url": employee.avatar_url})
            self._session.update_user(user)
        return user
