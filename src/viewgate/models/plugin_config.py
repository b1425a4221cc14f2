from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from viewgate.db import Base


def _utc_now():
    return datetime.now(UTC)


class PluginConfigEntry(Base):
    """
    One key of an app's plugin configuration.

    Values are opaque text; the store knows nothing about their schema.
    """

    __tablename__ = "plugin_configs"

    id = Column(Integer, primary_key=True, index=True)
    app_id = Column(String(64), nullable=False, index=True)
    key = Column(String(100), nullable=False)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)
    updated_by = Column(String(150), nullable=True)

    __table_args__ = (
        UniqueConstraint("app_id", "key", name="uq_plugin_config_app_key"),
    )
