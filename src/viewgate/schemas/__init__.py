from .view_settings_schemas import (
    CatalogCacheInvalidationResponse,
    EditorRowSchema,
    GroupOptionSchema,
    NavigationDecisionResponse,
    ViewEditSchema,
    ViewGateRequest,
    ViewRuleUpdateRequest,
    ViewSettingsFormResponse,
    ViewSettingsFormSubmit,
    ViewSettingsResponse,
    ViewSettingsUpdateRequest,
)

__all__ = [
    "CatalogCacheInvalidationResponse",
    "EditorRowSchema",
    "GroupOptionSchema",
    "NavigationDecisionResponse",
    "ViewEditSchema",
    "ViewGateRequest",
    "ViewRuleUpdateRequest",
    "ViewSettingsFormResponse",
    "ViewSettingsFormSubmit",
    "ViewSettingsResponse",
    "ViewSettingsUpdateRequest",
]
