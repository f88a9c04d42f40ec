import logging
from typing import Optional

from fastapi import UploadFile

from modules.shared.errors import IncidentServiceError
from modules.shared.response import success_response, error_response, exception_response
from modules.uploads.manager import read_image, store_image
from modules.uploads.storage import ImageStorage
from .store import IncidentStore
from .utils import build_incident, check_fields, incident_to_json

logger = logging.getLogger("incidents.manager")


async def submit_incident(
    title: Optional[str],
    details: Optional[str],
    address: Optional[str],
    landmark: Optional[str],
    image: UploadFile | str | None,
    store: IncidentStore,
    storage: ImageStorage,
):
    """Validate the form and the image, store the image, then insert the incident"""
    logger.info("Received submission request...")
    try:
        data, media_type = await read_image(image)
        # text fields are checked before the image is persisted
        fields = check_fields(title, details, address, landmark)

        image_url = await store_image(storage, data, media_type, image.filename)
        incident = build_incident(fields, image_url)
        incident_id = await store.create(incident)

        logger.info(f"Incident saved: {incident_id}")
        return success_response({
            "message": "Incident submitted successfully to Municipal Authority!",
            "incidentId": incident_id,
        }, status_code=201)
    except IncidentServiceError as e:
        if e.status_code >= 500:
            logger.error(f"Error saving incident: {e.message} ({e.detail})")
            return error_response("Server error occurred while submitting.", e.status_code, e.detail or e.message)
        logger.warning(f"Rejected submission: {e.message}")
        return exception_response(e)
    except Exception as e:
        logger.exception("Error saving incident")
        return error_response("Server error occurred while submitting.", 500, str(e))


async def list_incidents(store: IncidentStore):
    """All incidents, newest first"""
    try:
        incidents = await store.list_all()
        logger.info(f"Retrieved {len(incidents)} incidents")
        return success_response([incident_to_json(i) for i in incidents])
    except IncidentServiceError as e:
        logger.error(f"Error fetching incidents: {e.detail}")
        return error_response("Error fetching incidents", e.status_code, e.detail or e.message)
    except Exception as e:
        logger.exception("Error fetching incidents")
        return error_response("Error fetching incidents", 500, str(e))


async def update_incident_status(incident_id: str, status: Optional[str], store: IncidentStore):
    logger.info(f"Updating incident {incident_id} to status {status!r}")
    try:
        incident = await store.update_status(incident_id, status)
        return success_response(incident_to_json(incident))
    except IncidentServiceError as e:
        if e.status_code >= 500:
            logger.error(f"Error updating status of {incident_id}: {e.detail}")
            return error_response("Error updating status", e.status_code, e.detail or e.message)
        return exception_response(e)
    except Exception as e:
        logger.exception("Error updating status")
        return error_response("Error updating status", 500, str(e))
