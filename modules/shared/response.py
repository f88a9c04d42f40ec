from fastapi.responses import JSONResponse

import uuid
import decimal
from datetime import datetime

from .errors import IncidentServiceError


def serialize_data(obj):
    if isinstance(obj, dict):
        return {k: serialize_data(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [serialize_data(item) for item in obj]
    elif isinstance(obj, uuid.UUID):
        return str(obj)
    elif isinstance(obj, decimal.Decimal):
        return float(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    else:
        return obj


def success_response(data=None, status_code=200):
    """Return a JSON response with serialized data as the body"""
    return JSONResponse(status_code=status_code, content=serialize_data(data))


def error_response(message, status_code=400, error=None):
    """Return standardized error response"""
    content = {"message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def exception_response(exc: IncidentServiceError):
    return error_response(exc.message, exc.status_code, exc.detail)
