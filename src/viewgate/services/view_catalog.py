"""
View catalog and group lookups built on the catalog client and cache.

Turns raw host payloads into ordered ``ViewItem``s and group code sets.
"""

import logging
import re
from typing import Any

import httpx
from pydantic import ValidationError

from viewgate.core.navigation import CatalogUnavailableError
from viewgate.core.rules import ViewItem
from viewgate.external_services.view_catalog_client import ViewCatalogClient
from viewgate.services.redis_cache_service import RedisCacheService

logger = logging.getLogger(__name__)

VIEWS_NAMESPACE = "catalog:views"
PREVIEW_VIEWS_NAMESPACE = "catalog:preview-views"


def parse_views(payload: Any) -> list[ViewItem]:
    """
    Accepts ``{"views": {name: view}}`` (REST API) or a plain list of views.

    Result is ordered by ``index``; views sharing an index keep payload order.
    """
    raw_views = payload.get("views", []) if isinstance(payload, dict) else payload
    if isinstance(raw_views, dict):
        raw_views = list(raw_views.values())
    if not isinstance(raw_views, list):
        return []

    items: list[ViewItem] = []
    for raw in raw_views:
        if not isinstance(raw, dict):
            continue
        try:
            items.append(ViewItem.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed view %r: %d invalid field(s)", raw.get("name"), exc.error_count())
    items.sort(key=lambda item: item.index)
    return items


def parse_group_codes(payload: Any) -> set[str]:
    groups = payload.get("groups", []) if isinstance(payload, dict) else []
    return {str(group["code"]) for group in groups if isinstance(group, dict) and group.get("code")}


async def load_catalog(
    client: ViewCatalogClient,
    cache: RedisCacheService,
    app_id: str,
    *,
    preview: bool = False,
) -> list[ViewItem]:
    namespace = PREVIEW_VIEWS_NAMESPACE if preview else VIEWS_NAMESPACE
    try:
        payload = await cache.get_or_fetch(namespace, app_id, lambda: client.get_views(app_id, preview=preview))
    except httpx.HTTPError as exc:
        raise CatalogUnavailableError(f"could not load views of app {app_id}") from exc
    return parse_views(payload)


def forget_catalog(cache: RedisCacheService, app_id: str) -> int:
    """Drop the cached live and preview views of ``app_id``; returns the number of keys removed."""
    # app ids are matched literally inside the glob
    subject = re.sub(r"([*?\[\]\\])", r"\\\1", app_id)
    return cache.invalidate_pattern(f"catalog:*views:{subject}")


async def load_user_groups(client: ViewCatalogClient, cache: RedisCacheService, user_code: str) -> set[str]:
    """Group codes of one user. HTTP failures propagate; an empty set means no groups."""
    payload = await cache.get_or_fetch("catalog:user-groups", user_code, lambda: client.get_user_groups(user_code))
    return parse_group_codes(payload)


async def load_groups(client: ViewCatalogClient, cache: RedisCacheService) -> list[dict[str, Any]]:
    """All groups for the editor's group picker. Degrades to an empty list."""
    try:
        payload = await cache.get_or_fetch("catalog:groups", "all", client.get_groups)
    except httpx.HTTPError as exc:
        logger.warning("Failed to load group list, editor will offer no groups: %s", exc)
        return []
    groups = payload.get("groups", []) if isinstance(payload, dict) else []
    return [group for group in groups if isinstance(group, dict)]
