import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.entries import router as entries_router
from app.api.groups import router as groups_router
from app.api.hikes import router as hikes_router
from app.api.profile import router as profile_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.db import Base, engine
from app.models.profile import Profile  # noqa: F401  (import ensures table is registered)
from app.models.group import Group, GroupMember  # noqa: F401
from app.models.entry import Entry  # noqa: F401
from app.models.group_event import GroupEvent, GroupEventRsvp  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Trailmiles")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (profiles, groups, entries, hikes) on startup
Base.metadata.create_all(bind=engine)

app.include_router(profile_router)
app.include_router(groups_router)
app.include_router(entries_router)
app.include_router(hikes_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(
        "%s %s - %s",
        request.method,
        request.url.path,
        response.status_code,
        extra={
            "extra_fields": {
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2),
            }
        },
    )
    return response


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/")
def root():
    return {"message": "Trailmiles backend is running"}


@app.get("/version")
def version():
    return {
        "sha": settings.version_sha,
        "message": settings.version_message,
        "env": settings.version_env,
    }
