import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api_keys import router as api_keys_router
from auth import router as auth_router
from blog_posts import router as blog_posts_router
from categories import router as categories_router
from content_pages import router as content_pages_router
from core import db, schema, settings
from generation import router as generation_router
from homepage import router as homepage_router
from homepage import service as homepage_service
from leads import router as leads_router
from listings import router as listings_router
from menus import router as menus_router
from prompts import router as prompts_router
from prompts import service as prompts_service
from proxy import router as proxy_router
from site_settings import router as site_settings_router
from site_settings import service as site_settings_service
from users import router as users_router
from users import service as users_service

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("directory.api")


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        if settings.auto_migrate():
            await schema.apply()
        await prompts_service.ensure_defaults()
        await homepage_service.ensure_defaults()
        await site_settings_service.ensure_defaults()
        await users_service.ensure_default_admin()
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Business Directory API", lifespan=lifespan)

# Allow the admin/frontend dev servers to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(asyncpg.UniqueViolationError)
async def unique_violation_handler(_: Request, exc: asyncpg.UniqueViolationError) -> JSONResponse:
    logger.warning("unique_violation constraint=%s", exc.constraint_name)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": "Resource already exists."})


@app.exception_handler(asyncpg.PostgresError)
async def database_error_handler(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
    logger.error("database_error path=%s error=%s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error."},
    )


app.include_router(auth_router.router, tags=["auth"])
app.include_router(users_router.router, tags=["users"])
app.include_router(listings_router.router, tags=["listings"])
app.include_router(categories_router.router, tags=["categories"])
app.include_router(generation_router.router, tags=["generation"])
app.include_router(leads_router.router, tags=["leads"])
app.include_router(blog_posts_router.router, tags=["blog"])
app.include_router(content_pages_router.router, tags=["pages"])
app.include_router(menus_router.router, tags=["menus"])
app.include_router(homepage_router.router, tags=["homepage"])
app.include_router(prompts_router.router, tags=["prompts"])
app.include_router(api_keys_router.router, tags=["api-keys"])
app.include_router(site_settings_router.router, tags=["settings"])
if settings.dev_proxy_enabled():
    app.include_router(proxy_router.router, tags=["proxy"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/health")
async def api_health() -> dict:
    """
    Liveness plus a database round trip. Always 200; check `database`.
    """
    result: dict = {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
    try:
        result["dbTime"] = await db.fetch_val("SELECT now()")
        result["database"] = "connected"
    except (asyncpg.PostgresError, OSError, RuntimeError) as exc:
        logger.warning("health_db_check_failed error=%s", exc)
        result["database"] = "disconnected"
        result["error"] = str(exc)
    return result


@app.get("/")
def root() -> dict:
    return {"message": "business-directory api"}
