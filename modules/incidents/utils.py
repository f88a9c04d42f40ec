from contextlib import contextmanager
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from modules.shared.utils import describe_validation_error
from modules.shared.errors import IncidentServiceError, NotFoundError, StorageError, ValidationError
from .models import IncidentCreate, IncidentFields, IncidentResponse, IncidentStatus


def check_fields(title, details, address, landmark) -> IncidentFields:
    fields = {
        "title": title,
        "details": details,
        "address": address,
        "landmark": landmark,
    }
    try:
        # absent form fields arrive as None and should read as missing
        return IncidentFields(**{k: v for k, v in fields.items() if v is not None})
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e


def build_incident(fields: IncidentFields, image_url: str) -> IncidentCreate:
    try:
        return IncidentCreate(**fields.model_dump(), image_url=image_url)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e


def parse_status(value: Optional[str]) -> IncidentStatus:
    try:
        return IncidentStatus(value)
    except ValueError:
        raise ValidationError(
            f"Invalid status '{value}'. Allowed values: {', '.join(IncidentStatus.values())}"
        ) from None


def parse_incident_id(incident_id: str) -> UUID:
    """Ids are UUIDs; anything else cannot name a stored incident"""
    try:
        return UUID(str(incident_id))
    except ValueError:
        raise NotFoundError("Incident not found") from None


def row_to_incident(row) -> IncidentResponse:
    d = dict(row)
    return IncidentResponse(
        id=str(d["id"]),
        title=d["title"],
        details=d["details"],
        address=d["address"],
        landmark=d.get("landmark"),
        image_url=d["image_url"],
        status=d["status"],
        created_at=d["created_at"],
    )


def incident_to_json(incident: IncidentResponse) -> dict:
    return incident.model_dump(by_alias=True, mode="json")


@contextmanager
def storage_errors(action: str):
    """Report anything the database layer raises as a StorageError"""
    try:
        yield
    except IncidentServiceError:
        raise
    except Exception as e:
        raise StorageError(f"Error {action}", str(e)) from e
