import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import vom_admin.models  # noqa: F401
from vom_admin.auth.errors import AuthError
from vom_admin.core.config import settings
from vom_admin.core.logging import configure_logging
from vom_admin.routers import admin as admin_router
from vom_admin.routers import auth as auth_router
from vom_admin.routers import members as members_router

configure_logging()

app = FastAPI(title="VOM Admin API", version="0.1.0")

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router.router)
app.include_router(admin_router.router)
app.include_router(members_router.router)


@app.exception_handler(AuthError)
async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    logger.info(
        "auth_error",
        extra={"path": request.url.path, "code": exc.code, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}
