"""
Rule store codec.

Reads the plugin configuration map (opaque string values) into a RuleSet,
upgrading the legacy ``hiddenViewIds`` list on the way, and writes RuleSets
back in the current ``viewSettings`` format only.

Nothing in here raises for data-shape problems: a value that cannot be read
is logged and treated as if the key were absent.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import ClassVar

import orjson
from pydantic import ValidationError

from viewgate.core.rules import (
    CURRENT_CONFIG_KEY,
    LEGACY_CONFIG_KEY,
    ConditionalHidden,
    MatchType,
    RuleSet,
    ViewRule,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CurrentPayload:
    source: ClassVar[str] = "current"

    rules: RuleSet


@dataclass(slots=True, frozen=True)
class LegacyPayload:
    source: ClassVar[str] = "legacy"

    view_ids: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class AbsentPayload:
    source: ClassVar[str] = "absent"


ConfigPayload = CurrentPayload | LegacyPayload | AbsentPayload


def _load_json_array(config: Mapping[str, str], key: str) -> list | None:
    raw = config.get(key)
    if not raw:
        return None
    if not isinstance(raw, str | bytes):
        logger.warning("Ignoring %s: expected text, got %s", key, type(raw).__name__)
        return None

    try:
        parsed = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        logger.warning("Failed to parse %s: %s", key, exc)
        return None

    if not isinstance(parsed, list):
        logger.warning("Ignoring %s: expected a JSON array, got %s", key, type(parsed).__name__)
        return None
    return parsed


def _parse_rules(records: list) -> RuleSet:
    rules: list[ViewRule] = []
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping view setting #%d: not an object", position)
            continue
        try:
            rules.append(ViewRule.model_validate(record))
        except ValidationError as exc:
            logger.warning("Skipping view setting #%d: %d invalid field(s)", position, exc.error_count())
    return RuleSet(rules)


def _parse_view_ids(entries: list) -> tuple[str, ...]:
    view_ids: list[str] = []
    for entry in entries:
        if isinstance(entry, bool):
            continue
        if isinstance(entry, int):
            entry = str(entry)
        if isinstance(entry, str) and entry.strip():
            view_ids.append(entry.strip())
        else:
            logger.debug("Skipping legacy hidden view entry %r", entry)
    return tuple(view_ids)


def read_payload(config: Mapping[str, str] | None) -> ConfigPayload:
    """Classify a stored configuration map. The current format wins over the legacy one."""
    if not config:
        return AbsentPayload()

    records = _load_json_array(config, CURRENT_CONFIG_KEY)
    if records is not None:
        return CurrentPayload(_parse_rules(records))

    entries = _load_json_array(config, LEGACY_CONFIG_KEY)
    if entries is not None:
        return LegacyPayload(_parse_view_ids(entries))

    return AbsentPayload()


def upgrade_legacy(view_ids: Iterable[str]) -> RuleSet:
    """Each legacy id becomes an always-hidden rule with a disabled condition."""
    return RuleSet(
        [
            ViewRule(
                view_id=view_id,
                always_hidden=True,
                conditional_hidden=ConditionalHidden(enabled=False, match_type=MatchType.includes, group_codes=[]),
            )
            for view_id in view_ids
        ]
    )


def rules_from_payload(payload: ConfigPayload) -> RuleSet:
    if isinstance(payload, CurrentPayload):
        return payload.rules
    if isinstance(payload, LegacyPayload):
        return upgrade_legacy(payload.view_ids)
    return RuleSet()


def decode(config: Mapping[str, str] | None) -> RuleSet:
    return rules_from_payload(read_payload(config))


def encode(rule_set: RuleSet) -> str:
    return orjson.dumps(rule_set.model_dump(mode="json", by_alias=True)).decode()


def encode_config(rule_set: RuleSet) -> dict[str, str]:
    """Configuration map to hand to the store. The legacy key is never written."""
    return {CURRENT_CONFIG_KEY: encode(rule_set)}
