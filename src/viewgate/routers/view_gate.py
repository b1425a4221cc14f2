"""
Router for the view-list navigation gate.

The host page calls this before showing a view list and performs the
navigation (or menu filtering) described by the response.
"""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from viewgate.core.navigation import (
    GateDependencies,
    NavigationAction,
    build_redirect_location,
    on_before_item_list_shown,
)
from viewgate.db import get_db
from viewgate.dependencies.settings import Settings, get_cache_service, get_catalog_client, get_settings
from viewgate.schemas.view_settings_schemas import NavigationDecisionResponse, ViewGateRequest
from viewgate.services.config_store import load_config
from viewgate.services.view_catalog import load_catalog, load_user_groups

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/apps/{app_id}/view-gate", tags=["View_Gate"])

db_dependency = Depends(get_db)
catalog_client_dependency = Depends(get_catalog_client)
cache_dependency = Depends(get_cache_service)
settings_dependency = Depends(get_settings)


@router.post(
    "",
    response_model=NavigationDecisionResponse,
    summary="Decide navigation before a view list is shown",
    description="Redirect away from a view hidden for the user, or return the views to hide from the menu.",
)
async def decide_view_navigation(
    app_id: str,
    payload: ViewGateRequest,
    db: Session = db_dependency,
    client=catalog_client_dependency,
    cache=cache_dependency,
    settings: Settings = settings_dependency,
):
    async def fetch_user_groups():
        try:
            return await load_user_groups(client, cache, payload.user_code)
        except httpx.HTTPError as e:
            logger.error(f"Error loading groups of user {payload.user_code}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="could not load user groups",
            ) from e

    deps = GateDependencies(
        load_config=lambda: load_config(db, app_id),
        fetch_user_groups=fetch_user_groups,
        fetch_catalog=lambda: load_catalog(client, cache, app_id),
    )
    decision = await on_before_item_list_shown(payload.current_view_id, deps)

    location = None
    if decision.action == NavigationAction.redirect:
        location = build_redirect_location(payload.current_url or "", decision.target_view_id)
    elif decision.action == NavigationAction.redirect_default:
        location = settings.default_location

    return NavigationDecisionResponse(
        action=decision.action,
        target_view_id=decision.target_view_id,
        location=location,
        hidden_views=decision.hidden_views(),
    )
