import asyncio
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

load_dotenv()

from app.config import get_settings  # noqa: E402
from app.db import SessionLocal  # noqa: E402
from app.db.init_db import init_db  # noqa: E402
from app.errors import AuthzAdminError  # noqa: E402
from app.services.bootstrap import bootstrap_admin  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    init_db()
    if settings.bootstrap_on_startup:
        with SessionLocal() as db:
            result = bootstrap_admin(db, settings)
        logger.info(
            "Admin bootstrap done: user=%s role=%s (user_created=%s, role_created=%s, membership_created=%s)",
            result.user_id,
            result.role_id,
            result.user_created,
            result.role_created,
            result.membership_created,
        )

    try:
        yield
    except asyncio.CancelledError:
        logger.info("Application shutdown requested (CancelledError). Exiting gracefully.")
    except Exception:
        logger.exception("Unhandled exception during application lifespan shutdown.")
        raise


settings = get_settings()

tags_metadata = [
    {"name": "Root", "description": "Basic status endpoint."},
    {"name": "Health", "description": "Liveness and database connectivity."},
    {"name": "Auth", "description": "Authentication and token management endpoints."},
    {"name": "Menu_Access", "description": "Menus visible to the signed-in user."},
    {"name": "Menu_Management", "description": "🔒 **Admin Only** - Menu tree administration."},
    {"name": "RBAC_Management", "description": "🔒 **Admin Only** - Roles and their menu/user assignments."},
    {"name": "User_Management", "description": "🔒 **Admin Only** - User accounts, role membership and element grants."},
    {"name": "UI_Element_Management", "description": "🔒 **Admin Only** - UI element catalog and direct grants."},
]

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    openapi_tags=tags_metadata,
    docs_url="/swagger",
    swagger_ui_parameters={"displayRequestDuration": True, "persistAuthorization": True},
    redoc_url="/redoc",
    lifespan=_lifespan,
)


@app.exception_handler(AuthzAdminError)
async def _authz_admin_error_handler(_request: Request, exc: AuthzAdminError):
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def _database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "database error"})


# Basic root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {"message": settings.app_name}


# Set up GZip compression middleware (BEFORE CORS)
app.add_middleware(
    GZipMiddleware,
    minimum_size=1000,  # Only compress responses > 1KB
    compresslevel=6,
)

cors_origins = settings.cors_origin_list
logger.info(f"CORS enabled for origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routers
from .routers import (  # noqa: E402
    auth,
    health,
    menu_access,
    menus,
    rbac,
    roles,
    ui_elements,
    users,
)

app.include_router(auth.router)
app.include_router(health.router)
app.include_router(menu_access.router)
app.include_router(menus.router)
app.include_router(rbac.router)
app.include_router(roles.router)
app.include_router(ui_elements.router)
app.include_router(users.router)


__all__ = ["app"]
