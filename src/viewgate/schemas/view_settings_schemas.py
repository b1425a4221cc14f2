from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from viewgate.core.navigation import NavigationAction
from viewgate.core.rules import ConditionalHidden, MatchType, ViewRule

# ============================================================================
# Editor
# ============================================================================


class ViewSettingsResponse(BaseModel):
    app_id: str
    source: Literal["current", "legacy", "absent"] = Field(..., description="Format the rules were read from")
    view_settings: list[ViewRule] = Field(default_factory=list, description="Rules in the current viewSettings format")


class ViewSettingsUpdateRequest(BaseModel):
    view_settings: list[ViewRule] = Field(..., description="Complete rule list, one entry per view")


class ViewRuleUpdateRequest(BaseModel):
    always_hidden: bool = False
    conditional_hidden: ConditionalHidden = Field(default_factory=ConditionalHidden)


class EditorRowSchema(BaseModel):
    view_id: str
    name: str
    type: str
    type_label: str
    visible: bool
    conditional_hidden: ConditionalHidden

    model_config = ConfigDict(from_attributes=True)


class GroupOptionSchema(BaseModel):
    label: str
    value: str

    model_config = ConfigDict(from_attributes=True)


class ViewSettingsFormResponse(BaseModel):
    app_id: str
    rows: list[EditorRowSchema]
    group_options: list[GroupOptionSchema]


class ViewEditSchema(BaseModel):
    """One submitted row of the editor form."""

    view_id: str = Field(..., min_length=1, pattern=r"\S")
    visible: bool = True
    condition_enabled: bool = False
    match_type: MatchType = MatchType.includes
    group_codes: list[str] = Field(default_factory=list)


class ViewSettingsFormSubmit(BaseModel):
    rows: list[ViewEditSchema] = Field(..., description="Editor rows in form order; every listed view gets one rule")


# ============================================================================
# Cache
# ============================================================================


class CatalogCacheInvalidationResponse(BaseModel):
    app_id: str
    cache_enabled: bool
    keys_deleted: int


# ============================================================================
# Gate
# ============================================================================


class ViewGateRequest(BaseModel):
    current_view_id: str | int | None = Field(None, description="View the user is about to see")
    user_code: str = Field(..., min_length=1, max_length=128, description="Login name used for the group lookup")
    current_url: str | None = Field(
        None,
        max_length=2048,
        description=(
            "Page URL, used to build the redirect location. When omitted the location is the "
            "relative query '?view=<id>', which resolves against the page the host is on."
        ),
    )


class NavigationDecisionResponse(BaseModel):
    action: NavigationAction
    target_view_id: str | None = None
    location: str | None = Field(None, description="Where the host should navigate, when it should")
    hidden_views: dict[str, str] = Field(default_factory=dict, description="Map for the view selector widget")
