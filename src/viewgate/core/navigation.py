"""
Navigation gate run before the host shows a view list.

The host calls ``on_before_item_list_shown`` once per page entry and acts on
the returned decision: stay, redirect to a view, go to the default location,
or just filter its view menu when no catalog was available.
"""

import logging
from collections.abc import Awaitable, Callable, Collection, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

import httpx

from viewgate.core.codec import decode
from viewgate.core.evaluator import first_visible_view, hidden_view_ids, hidden_views_selector
from viewgate.core.rules import ViewItem

logger = logging.getLogger(__name__)


class CatalogUnavailableError(Exception):
    """The view catalog could not be fetched from the host platform."""


class NavigationAction(StrEnum):
    stay = "stay"
    redirect = "redirect"
    redirect_default = "redirect_default"
    filter_menu = "filter_menu"


@dataclass(slots=True, frozen=True)
class NavigationDecision:
    action: NavigationAction
    target_view_id: str | None = None
    hidden_view_ids: frozenset[str] = frozenset()

    def hidden_views(self) -> dict[str, str]:
        return hidden_views_selector(self.hidden_view_ids)


@dataclass(slots=True)
class GateDependencies:
    load_config: Callable[[], Mapping[str, str] | None]
    fetch_user_groups: Callable[[], Awaitable[Collection[str]]]
    fetch_catalog: Callable[[], Awaitable[Sequence[ViewItem]]]


def _normalize_view_id(view_id: str | int | None) -> str | None:
    if view_id is None or isinstance(view_id, bool):
        return None
    normalized = str(view_id).strip()
    return normalized or None


async def on_before_item_list_shown(current_view_id: str | int | None, deps: GateDependencies) -> NavigationDecision:
    rule_set = decode(deps.load_config())
    if len(rule_set) == 0:
        return NavigationDecision(NavigationAction.stay)

    user_groups: Collection[str] = frozenset()
    if rule_set.needs_group_lookup():
        user_groups = await deps.fetch_user_groups()

    hidden = frozenset(hidden_view_ids(rule_set, user_groups))
    current = _normalize_view_id(current_view_id)
    if current is None or current not in hidden:
        return NavigationDecision(NavigationAction.stay, hidden_view_ids=hidden)

    try:
        catalog = await deps.fetch_catalog()
    except CatalogUnavailableError as exc:
        logger.warning("View catalog unavailable, filtering the view menu instead of redirecting from %s: %s", current, exc)
        return NavigationDecision(NavigationAction.filter_menu, hidden_view_ids=hidden)

    target = first_visible_view(catalog, hidden)
    if target is None:
        logger.info("Every view is hidden for this user; sending them to the default location")
        return NavigationDecision(NavigationAction.redirect_default, hidden_view_ids=hidden)

    logger.info("View %s is hidden; redirecting to view %s", current, target)
    return NavigationDecision(NavigationAction.redirect, target_view_id=target, hidden_view_ids=hidden)


def build_redirect_location(current_url: str, view_id: str) -> str:
    """Current page URL with its ``view`` query parameter pointed at ``view_id``."""
    return str(httpx.URL(current_url).copy_set_param("view", view_id))
