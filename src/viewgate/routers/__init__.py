from . import cache_admin, health, view_gate, view_settings  # noqa: F401

__all__ = [
    "cache_admin",
    "health",
    "view_gate",
    "view_settings",
]
