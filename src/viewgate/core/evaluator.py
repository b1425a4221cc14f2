"""
Visibility evaluator.

Pure functions deciding which views a user must not see and which view to
fall back to. No I/O, no state: identical inputs always give identical output.
"""

from collections.abc import Collection, Iterable, Sequence

from viewgate.core.rules import MatchType, RuleSet, ViewItem, ViewRule

HIDDEN_MARKER = "HIDDEN"


def is_hidden(rule: ViewRule | None, user_groups: Collection[str]) -> bool:
    if rule is None:
        return False
    if rule.always_hidden:
        return True

    condition = rule.conditional_hidden
    if not condition.enabled or not condition.group_codes:
        return False

    is_member = not set(condition.group_codes).isdisjoint(user_groups)
    if condition.match_type == MatchType.not_includes:
        return not is_member
    return is_member


def hidden_view_ids(rule_set: RuleSet, user_groups: Collection[str]) -> set[str]:
    """Ids of configured views hidden for a user. Views without a rule never appear."""
    return {rule.view_id for rule in rule_set.effective_rules() if is_hidden(rule, user_groups)}


def first_visible_view(catalog: Sequence[ViewItem], hidden_ids: Collection[str]) -> str | None:
    # catalog order is the provider's contract; do not re-sort here
    for item in catalog:
        if item.id not in hidden_ids:
            return item.id
    return None


def hidden_views_selector(hidden_ids: Iterable[str]) -> dict[str, str]:
    """Map handed to the host's view selector widget to hide menu entries."""
    return {view_id: HIDDEN_MARKER for view_id in sorted(hidden_ids)}
