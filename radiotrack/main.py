from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
import os

from radiotrack.config import settings
from radiotrack.dependencies import build_store, build_photo_store
from radiotrack.routers import health, users, radios, checkout_log, admin, export, images
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    os.makedirs(settings.PROFILE_IMAGES_DIR, exist_ok=True)

    application.state.store = build_store(settings)
    application.state.photos = build_photo_store(settings)
    logger.info(f"Record store: {settings.STORAGE_BACKEND} ({settings.DATA_DIR if settings.STORAGE_BACKEND == 'json' else settings.DATABASE_URL})")

    yield


app = FastAPI(
    title="RadioTrack",
    description="Radio equipment checkout for event staff",
    version="1.0.0",
    lifespan=lifespan,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


app.add_middleware(SecurityHeadersMiddleware)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(radios.router)
app.include_router(checkout_log.router)
app.include_router(admin.router)
app.include_router(export.router)
app.include_router(images.router)
