"""
Cache Management Router

Drops cached host catalog payloads so the next editor or gate request reads
the views fresh from the host, e.g. right after an admin deploys view changes.
"""

import logging

from fastapi import APIRouter, Depends, Path

from viewgate.dependencies.settings import get_cache_service
from viewgate.schemas.view_settings_schemas import CatalogCacheInvalidationResponse
from viewgate.services.view_catalog import forget_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/cache", tags=["Cache_Management"])

cache_dependency = Depends(get_cache_service)


@router.post(
    "/apps/{app_id}/catalog",
    response_model=CatalogCacheInvalidationResponse,
    summary="Clear the cached views of an app",
    description="Remove the cached live and preview view lists of one app.",
)
def clear_app_catalog_cache(
    # app ids end up in a key pattern, so glob characters are refused
    app_id: str = Path(..., pattern=r"^[A-Za-z0-9_-]+$"),
    cache=cache_dependency,
):
    deleted = forget_catalog(cache, app_id)
    logger.info(f"Cleared {deleted} cached catalog key(s) of app {app_id}")
    return CatalogCacheInvalidationResponse(app_id=app_id, cache_enabled=cache.enabled, keys_deleted=deleted)
