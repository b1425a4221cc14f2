"""
Router for the view settings editor.

Handles:
- Reading the stored rules (legacy settings are migrated on read)
- The editor form model (views + rules + group options)
- Saving the editor form (one rule per listed view)
- Replacing all rules, or adding/updating the rule of one view
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from viewgate.core.codec import decode, encode_config, read_payload, rules_from_payload
from viewgate.core.navigation import CatalogUnavailableError
from viewgate.core.rules import RuleSet, ViewRule
from viewgate.db import get_db
from viewgate.dependencies.settings import get_cache_service, get_catalog_client
from viewgate.schemas.view_settings_schemas import (
    EditorRowSchema,
    GroupOptionSchema,
    ViewRuleUpdateRequest,
    ViewSettingsFormResponse,
    ViewSettingsFormSubmit,
    ViewSettingsResponse,
    ViewSettingsUpdateRequest,
)
from viewgate.services.config_store import load_config, save_config
from viewgate.services.rule_editor import ViewEdit, build_editor_rows, collect_edits, group_options, upsert_rule
from viewgate.services.view_catalog import forget_catalog, load_catalog, load_groups

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/apps/{app_id}/view-settings", tags=["View_Settings"])

db_dependency = Depends(get_db)
catalog_client_dependency = Depends(get_catalog_client)
cache_dependency = Depends(get_cache_service)


def _save_rules(db: Session, app_id: str, rule_set: RuleSet) -> None:
    try:
        save_config(db, app_id, encode_config(rule_set))
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save view settings",
        ) from e


@router.get(
    "",
    response_model=ViewSettingsResponse,
    summary="Get view settings",
    description="Return the stored visibility rules of an app. Legacy hidden-view lists are returned migrated.",
)
def get_view_settings(app_id: str, db: Session = db_dependency):
    payload = read_payload(load_config(db, app_id))
    return ViewSettingsResponse(
        app_id=app_id,
        source=payload.source,
        view_settings=list(rules_from_payload(payload)),
    )


@router.get(
    "/form",
    response_model=ViewSettingsFormResponse,
    summary="Get the view settings editor form",
    description="Views ordered by index with their rules, the (all) pseudo view, and the selectable groups.",
)
async def get_view_settings_form(
    app_id: str,
    db: Session = db_dependency,
    refresh: bool = Query(False, description="Drop the cached view list of the app before loading it"),
    client=catalog_client_dependency,
    cache=cache_dependency,
):
    if refresh:
        forget_catalog(cache, app_id)
    rule_set = decode(load_config(db, app_id))

    try:
        catalog, groups = await asyncio.gather(
            load_catalog(client, cache, app_id, preview=True),
            load_groups(client, cache),
        )
    except CatalogUnavailableError as e:
        logger.error(f"Error loading views of app {app_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="could not load view list",
        ) from e

    rows = build_editor_rows(catalog, rule_set)
    return ViewSettingsFormResponse(
        app_id=app_id,
        rows=[EditorRowSchema.model_validate(row) for row in rows],
        group_options=[GroupOptionSchema.model_validate(option) for option in group_options(groups)],
    )


@router.put(
    "",
    response_model=ViewSettingsResponse,
    summary="Replace view settings",
    description="Store the complete rule list in the current format. Any legacy setting is dropped.",
)
def replace_view_settings(
    app_id: str,
    payload: ViewSettingsUpdateRequest,
    db: Session = db_dependency,
):
    rule_set = RuleSet(payload.view_settings)
    _save_rules(db, app_id, rule_set)
    return ViewSettingsResponse(app_id=app_id, source="current", view_settings=list(rule_set))


# registered before "/{view_id}" so "form" is not taken for a view id
@router.put(
    "/form",
    response_model=ViewSettingsResponse,
    summary="Save the view settings editor form",
    description="Store one rule per submitted row, in form order. Rows are visible with no condition unless edited.",
)
def save_view_settings_form(
    app_id: str,
    payload: ViewSettingsFormSubmit,
    db: Session = db_dependency,
):
    view_ids: list[str] = []
    edits: dict[str, ViewEdit] = {}
    for row in payload.rows:
        if row.view_id in edits:
            continue
        view_ids.append(row.view_id)
        edits[row.view_id] = ViewEdit(
            visible=row.visible,
            condition_enabled=row.condition_enabled,
            match_type=row.match_type,
            group_codes=list(row.group_codes),
        )

    rule_set = collect_edits(view_ids, edits)
    _save_rules(db, app_id, rule_set)
    return ViewSettingsResponse(app_id=app_id, source="current", view_settings=list(rule_set))


@router.put(
    "/{view_id}",
    response_model=ViewSettingsResponse,
    summary="Add or update the rule of one view",
    description="Update the rule governing a view, or append one if the view has none yet.",
)
def update_view_rule(
    app_id: str,
    payload: ViewRuleUpdateRequest,
    view_id: str = Path(..., min_length=1, pattern=r"\S", description="View id; blank ids are refused"),
    db: Session = db_dependency,
):
    rule = ViewRule(
        view_id=view_id,
        always_hidden=payload.always_hidden,
        conditional_hidden=payload.conditional_hidden,
    )
    rule_set = upsert_rule(decode(load_config(db, app_id)), rule)
    _save_rules(db, app_id, rule_set)
    return ViewSettingsResponse(app_id=app_id, source="current", view_settings=list(rule_set))
