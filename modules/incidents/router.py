from fastapi import APIRouter, Depends, UploadFile, File, Form
from .models import StatusUpdate
from .manager import submit_incident, list_incidents, update_incident_status
from .store import IncidentStore, get_incident_store
from modules.auth.manager import require_admin
from modules.uploads.manager import get_image_storage
from modules.uploads.storage import ImageStorage
from modules.uploads.utils import IMAGE_FIELD_NAME

router = APIRouter()


@router.post("", status_code=201)
async def submit(
    title: str | None = Form(None),
    details: str | None = Form(None),
    address: str | None = Form(None),
    landmark: str | None = Form(None),
    image: UploadFile | str | None = File(None, alias=IMAGE_FIELD_NAME),
    store: IncidentStore = Depends(get_incident_store),
    storage: ImageStorage = Depends(get_image_storage),
):
    """Submit a new incident as multipart form-data with one image under 'incidentImage'."""
    return await submit_incident(title, details, address, landmark, image, store, storage)


@router.get("", dependencies=[Depends(require_admin)])
async def get_all_incidents(store: IncidentStore = Depends(get_incident_store)):
    return await list_incidents(store)


@router.patch("/{incident_id}/status", dependencies=[Depends(require_admin)])
async def update_status(
    incident_id: str,
    body: StatusUpdate,
    store: IncidentStore = Depends(get_incident_store),
):
    """
    Expects JSON body: { "status": "Resolved" }
    """
    return await update_incident_status(incident_id, body.status, store)
