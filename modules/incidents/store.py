import logging
from typing import List, Optional
from uuid import UUID, uuid4

from fastapi import Request

from modules.shared.db import execute_query
from modules.shared.errors import NotFoundError
from .models import IncidentCreate, IncidentResponse, IncidentStatus
from .utils import parse_incident_id, parse_status, row_to_incident, storage_errors

logger = logging.getLogger("incidents.store")

INCIDENT_COLUMNS = "id, title, details, address, landmark, image_url, status, created_at"


class IncidentStore:
    """The incidents collection.

    Public methods hold the rules (validation, not-found handling, error
    translation); the underscore methods are the raw queries.
    """

    async def create(self, incident: IncidentCreate) -> str:
        incident_id = uuid4()
        with storage_errors("saving incident"):
            await self._insert(incident_id, incident)
        logger.info(f"Incident {incident_id} inserted")
        return str(incident_id)

    async def list_all(self) -> List[IncidentResponse]:
        with storage_errors("fetching incidents"):
            rows = await self._select_all()
        return [row_to_incident(r) for r in rows]

    async def update_status(self, incident_id: str, status: Optional[str]) -> IncidentResponse:
        uid = parse_incident_id(incident_id)
        new_status = parse_status(status)
        with storage_errors("updating status"):
            row = await self._update_status(uid, new_status)
        if not row:
            logger.warning(f"Incident {incident_id} not found for status update")
            raise NotFoundError("Incident not found")
        logger.info(f"Incident {incident_id} status set to {new_status.value}")
        return row_to_incident(row)

    async def _insert(self, incident_id: UUID, incident: IncidentCreate):
        query = """
        INSERT INTO incidents
        (id, title, details, address, landmark, image_url, status, admin_notes, created_at)
        VALUES ($1, $2, $3, $4, $5, $6, $7, '', clock_timestamp())
        RETURNING id
        """
        params = (
            incident_id,
            incident.title,
            incident.details,
            incident.address,
            incident.landmark,
            incident.image_url,
            IncidentStatus.PENDING.value,
        )
        return await execute_query(query, params, fetch_one=True)

    async def _select_all(self):
        query = f"SELECT {INCIDENT_COLUMNS} FROM incidents ORDER BY created_at DESC, id DESC"
        return await execute_query(query)

    async def _update_status(self, incident_id: UUID, status: IncidentStatus):
        query = f"""
        UPDATE incidents
        SET status = $1
        WHERE id = $2
        RETURNING {INCIDENT_COLUMNS}
        """
        return await execute_query(query, (status.value, incident_id), fetch_one=True)


def get_incident_store(request: Request) -> IncidentStore:
    return request.app.state.incident_store
