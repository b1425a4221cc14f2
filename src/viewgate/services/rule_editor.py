"""
Rule editor operations.

Builds the editor's form model from the view catalog and the stored rules,
and turns submitted edits back into a RuleSet. Edits are passed in as an
explicit mapping keyed by view id; nothing is kept between requests.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from viewgate.core.rules import ConditionalHidden, MatchType, RuleSet, ViewItem, ViewRule, ViewType

# Pseudo view standing for "(all)", listed after every real view
ALL_VIEWS_ID = "20"
ALL_VIEWS_NAME = "(all)"

VIEW_TYPE_LABELS = {
    ViewType.LIST: "List",
    ViewType.CALENDAR: "Calendar",
    ViewType.CUSTOM: "Custom",
}


def view_type_label(view_type: str) -> str:
    return VIEW_TYPE_LABELS.get(view_type, view_type)


@dataclass(slots=True)
class EditorRow:
    view_id: str
    name: str
    type: str
    type_label: str
    visible: bool
    conditional_hidden: ConditionalHidden


@dataclass(slots=True)
class ViewEdit:
    visible: bool = True
    condition_enabled: bool = False
    match_type: MatchType = MatchType.includes
    group_codes: list[str] = field(default_factory=list)


@dataclass(slots=True)
class GroupOption:
    label: str
    value: str


def editor_views(catalog: Sequence[ViewItem]) -> list[ViewItem]:
    """Catalog sorted by index (stable), with the "(all)" pseudo view appended."""
    ordered = sorted(catalog, key=lambda item: item.index)
    if any(item.id == ALL_VIEWS_ID for item in ordered):
        return ordered
    ordered.append(ViewItem(id=ALL_VIEWS_ID, name=ALL_VIEWS_NAME, type=ViewType.LIST, index=len(ordered)))
    return ordered


def build_editor_rows(catalog: Sequence[ViewItem], rule_set: RuleSet) -> list[EditorRow]:
    rows: list[EditorRow] = []
    for item in editor_views(catalog):
        rule = rule_set.rule_for(item.id)
        rows.append(
            EditorRow(
                view_id=item.id,
                name=item.name,
                type=item.type,
                type_label=view_type_label(item.type),
                visible=not rule.always_hidden if rule else True,
                conditional_hidden=rule.conditional_hidden.model_copy() if rule else ConditionalHidden(),
            )
        )
    return rows


def upsert_rule(rule_set: RuleSet, rule: ViewRule) -> RuleSet:
    """Replace the rule governing ``rule.view_id`` or append it."""
    rules = list(rule_set)
    for position, existing in enumerate(rules):
        if existing.view_id == rule.view_id:
            rules[position] = rule
            return RuleSet(rules)
    rules.append(rule)
    return RuleSet(rules)


def rule_from_edit(view_id: str, edit: ViewEdit) -> ViewRule:
    return ViewRule(
        view_id=view_id,
        always_hidden=not edit.visible,
        conditional_hidden=ConditionalHidden(
            enabled=edit.condition_enabled,
            match_type=edit.match_type,
            group_codes=list(edit.group_codes),
        ),
    )


def collect_edits(view_ids: Sequence[str], edits: Mapping[str, ViewEdit]) -> RuleSet:
    """One rule per listed view, in form order. Views without an edit stay visible."""
    return RuleSet([rule_from_edit(view_id, edits.get(view_id) or ViewEdit()) for view_id in view_ids])


def group_options(groups: Iterable[Mapping[str, Any]]) -> list[GroupOption]:
    options: list[GroupOption] = []
    for group in groups:
        code = group.get("code")
        if not code:
            continue
        options.append(GroupOption(label=str(group.get("name") or code), value=str(code)))
    return options
