"""
Plugin configuration store.

Keeps each app's configuration as a flat map of opaque string values. Saving
replaces the whole map, the same way the host platform's plugin config does,
so keys that are not written again (such as the legacy ``hiddenViewIds``)
are dropped.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from viewgate.core.codec import LegacyPayload, encode_config, read_payload, upgrade_legacy
from viewgate.models.plugin_config import PluginConfigEntry

logger = logging.getLogger(__name__)


def load_config(db: Session, app_id: str) -> dict[str, str]:
    entries = db.query(PluginConfigEntry).filter(PluginConfigEntry.app_id == app_id).order_by(PluginConfigEntry.key).all()
    return {entry.key: entry.value for entry in entries}


def save_config(db: Session, app_id: str, values: Mapping[str, str], updated_by: str | None = None) -> None:
    """Replace the stored configuration of ``app_id`` with ``values`` in one transaction."""
    now = datetime.now(UTC)
    try:
        db.query(PluginConfigEntry).filter(PluginConfigEntry.app_id == app_id).delete(synchronize_session=False)
        for key, value in values.items():
            db.add(PluginConfigEntry(app_id=app_id, key=key, value=value, updated_at=now, updated_by=updated_by))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error("Failed to save plugin config for app %s", app_id, exc_info=True)
        raise

    logger.info("Saved plugin config for app %s (keys=%s)", app_id, sorted(values))


def list_app_ids(db: Session) -> list[str]:
    rows = db.query(PluginConfigEntry.app_id).distinct().order_by(PluginConfigEntry.app_id).all()
    return [row[0] for row in rows]


def migrate_legacy_config(db: Session, app_id: str, *, dry_run: bool = False) -> bool:
    """
    Rewrite a legacy-only configuration in the current format.

    Returns True when the app had a legacy configuration to migrate.
    """
    payload = read_payload(load_config(db, app_id))
    if not isinstance(payload, LegacyPayload):
        return False

    if dry_run:
        logger.info("Would migrate %d legacy hidden view(s) for app %s", len(payload.view_ids), app_id)
        return True

    save_config(db, app_id, encode_config(upgrade_legacy(payload.view_ids)), updated_by="legacy-migration")
    logger.info("Migrated %d legacy hidden view(s) for app %s", len(payload.view_ids), app_id)
    return True
