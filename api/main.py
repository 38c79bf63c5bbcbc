import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.db.models import ApplicationInfo, ErrorResponse, HealthCheck
from api.db.session import create_db_and_tables
from api.routers import auth, images, users
from api.utils.config import Settings
from api.utils.dependencies import get_settings
from api.utils.exceptions import AuthError

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error_code=exc.code, detail=exc.message).model_dump(),
        headers=headers,
    )


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(images.router)


@app.get("/")
async def root(settings: Annotated[Settings, Depends(get_settings)]) -> ApplicationInfo:
    return ApplicationInfo(app_name=settings.APP_NAME, version=settings.APP_VERSION)


@app.get("/health")
async def health_check() -> HealthCheck:
    return HealthCheck(status="ok", timestamp=datetime.now(UTC))
