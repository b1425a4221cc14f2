from .codec import (
    AbsentPayload,
    ConfigPayload,
    CurrentPayload,
    LegacyPayload,
    decode,
    encode,
    encode_config,
    read_payload,
    rules_from_payload,
    upgrade_legacy,
)
from .evaluator import first_visible_view, hidden_view_ids, hidden_views_selector, is_hidden
from .navigation import (
    CatalogUnavailableError,
    GateDependencies,
    NavigationAction,
    NavigationDecision,
    build_redirect_location,
    on_before_item_list_shown,
)
from .rules import (
    CURRENT_CONFIG_KEY,
    LEGACY_CONFIG_KEY,
    ConditionalHidden,
    MatchType,
    RuleSet,
    ViewItem,
    ViewRule,
    ViewType,
)

__all__ = [
    "CURRENT_CONFIG_KEY",
    "LEGACY_CONFIG_KEY",
    "AbsentPayload",
    "CatalogUnavailableError",
    "ConditionalHidden",
    "ConfigPayload",
    "CurrentPayload",
    "GateDependencies",
    "LegacyPayload",
    "MatchType",
    "NavigationAction",
    "NavigationDecision",
    "RuleSet",
    "ViewItem",
    "ViewRule",
    "ViewType",
    "build_redirect_location",
    "decode",
    "encode",
    "encode_config",
    "first_visible_view",
    "hidden_view_ids",
    "hidden_views_selector",
    "is_hidden",
    "on_before_item_list_shown",
    "read_payload",
    "rules_from_payload",
    "upgrade_legacy",
]
