"""
View visibility rule model.

Python attributes are snake_case; the persisted ``viewSettings`` records use
the camelCase aliases (``viewId``, ``alwaysHidden``, ``conditionalHidden``,
``matchType``, ``groupCodes``).

Every validator here is total: unknown or malformed sub-fields fall back to
their documented defaults instead of failing the whole record.
"""

from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator
from pydantic.alias_generators import to_camel

CURRENT_CONFIG_KEY = "viewSettings"
LEGACY_CONFIG_KEY = "hiddenViewIds"


class MatchType(StrEnum):
    """Whether membership (``includes``) or non-membership (``notIncludes``) hides the view."""

    includes = "includes"
    not_includes = "notIncludes"


class ViewType(StrEnum):
    """Known view types. The catalog may report others; they pass through untouched."""

    LIST = "LIST"
    CALENDAR = "CALENDAR"
    CUSTOM = "CUSTOM"


_MATCH_TYPES = {member.value for member in MatchType}


def _coerce_id(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class ViewItem(BaseModel):
    """One entry of the view catalog, as reported by the host platform."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str = ""
    type: str = ViewType.LIST
    index: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value):
        return _coerce_id(value)


class ConditionalHidden(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enabled: bool = False
    match_type: MatchType = MatchType.includes
    group_codes: list[str] = Field(default_factory=list)

    @field_validator("enabled", mode="before")
    @classmethod
    def _strict_enabled(cls, value):
        # only a real boolean true switches the condition on
        return value is True

    @field_validator("match_type", mode="before")
    @classmethod
    def _default_match_type(cls, value):
        if isinstance(value, str) and value in _MATCH_TYPES:
            return value
        return MatchType.includes

    @field_validator("group_codes", mode="before")
    @classmethod
    def _clean_group_codes(cls, value):
        if not isinstance(value, list | tuple | set | frozenset):
            return []
        codes: list[str] = []
        for code in value:
            code = _coerce_id(code)
            if isinstance(code, str) and code and code not in codes:
                codes.append(code)
        return codes

    @property
    def is_active(self) -> bool:
        return self.enabled and bool(self.group_codes)


class ViewRule(BaseModel):
    """Hide/show configuration attached to one view."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    view_id: str = Field(..., min_length=1)
    always_hidden: bool = False
    conditional_hidden: ConditionalHidden = Field(default_factory=ConditionalHidden)

    @field_validator("view_id", mode="before")
    @classmethod
    def _normalize_view_id(cls, value):
        return _coerce_id(value)

    @field_validator("always_hidden", mode="before")
    @classmethod
    def _strict_always_hidden(cls, value):
        return value is True

    @field_validator("conditional_hidden", mode="before")
    @classmethod
    def _default_condition(cls, value):
        if isinstance(value, dict | ConditionalHidden):
            return value
        return ConditionalHidden()


class RuleSet(RootModel[list[ViewRule]]):
    """
    Ordered collection of view rules.

    The list is kept as stored, duplicates included. When several rules share
    a view id, the first one governs that view and the rest are ignored.
    """

    root: list[ViewRule] = Field(default_factory=list)

    def __iter__(self) -> Iterator[ViewRule]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def rule_for(self, view_id: str) -> ViewRule | None:
        for rule in self.root:
            if rule.view_id == view_id:
                return rule
        return None

    def effective_rules(self) -> list[ViewRule]:
        """Rules that actually govern a view (first occurrence per view id)."""
        seen: set[str] = set()
        rules: list[ViewRule] = []
        for rule in self.root:
            if rule.view_id in seen:
                continue
            seen.add(rule.view_id)
            rules.append(rule)
        return rules

    def needs_group_lookup(self) -> bool:
        return any(not rule.always_hidden and rule.conditional_hidden.is_active for rule in self.effective_rules())
