import asyncio
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from viewgate.dependencies.settings import get_redis_client, get_settings
from viewgate.external_services.view_catalog_client import close_shared_clients

logger = logging.getLogger(__name__)

load_dotenv()


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    try:
        yield
    except asyncio.CancelledError:
        logger.info("Application shutdown requested (CancelledError). Exiting gracefully.")
    except Exception:
        logger.exception("Unhandled exception during application lifespan shutdown.")
        raise
    finally:
        await close_shared_clients()
        redis_client = get_redis_client() if get_redis_client.cache_info().currsize else None
        if redis_client is not None:
            redis_client.close()
            logger.info("Redis connection closed")


settings = get_settings()

tags_metadata = [
    {"name": "Root", "description": "Basic status endpoint."},
    {"name": "View_Settings", "description": "Editor endpoints for per-view visibility rules."},
    {"name": "View_Gate", "description": "Navigation decision before a view list is shown."},
    {"name": "Cache_Management", "description": "Clearing cached host catalog payloads."},
    {"name": "Health", "description": "Health, readiness and liveness checks."},
]

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    openapi_tags=tags_metadata,
    lifespan=_lifespan,
)


@app.get("/", tags=["Root"])
async def root():
    return {"message": settings.app_name}


app.add_middleware(
    GZipMiddleware,
    minimum_size=1000,
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
from .routers import cache_admin, health, view_gate, view_settings  # noqa: E402

app.include_router(health.router)
app.include_router(view_gate.router)
app.include_router(view_settings.router)
app.include_router(cache_admin.router)


__all__ = ["app"]
