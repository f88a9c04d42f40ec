import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from modules.shared.config import Settings
from modules.shared.db import init_db, close_db
from modules.shared.schema import create_tables
from modules.shared.errors import IncidentServiceError
from modules.shared.response import error_response, exception_response
from modules.shared.utils import describe_validation_error
from modules.incidents.router import router as incidents_router
from modules.incidents.store import IncidentStore
from modules.uploads.storage import ImageStorage, LocalImageStorage, LOCAL_URL_PREFIX, build_image_storage

logger = logging.getLogger("main")


def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )


def create_app(
    settings: Settings,
    incident_store: Optional[IncidentStore] = None,
    image_storage: Optional[ImageStorage] = None,
) -> FastAPI:
    app = FastAPI(title="IRBC Incident Reporting API")
    app.state.settings = settings
    app.state.incident_store = incident_store or IncidentStore()
    app.state.image_storage = image_storage or build_image_storage(settings)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(IncidentServiceError)
    async def incident_error_handler(request: Request, exc: IncidentServiceError):
        return exception_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        response = error_response(exc.detail, exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(describe_validation_error(exc), 400)

    # Include routers
    app.include_router(incidents_router, prefix="/api/incidents")

    if isinstance(app.state.image_storage, LocalImageStorage):
        app.mount(
            LOCAL_URL_PREFIX,
            StaticFiles(directory=app.state.image_storage.directory),
            name="uploads",
        )

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "IRBC Backend API is running..."

    @app.on_event("startup")
    async def startup_event():
        """Initialize the database pool and tables on startup"""
        await init_db(settings.database_url)
        await create_tables()

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_db()

    return app


settings = Settings.from_env()
configure_logging(settings.log_level)
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
