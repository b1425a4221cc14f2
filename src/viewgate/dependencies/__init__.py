from .settings import Settings, get_cache_service, get_catalog_client, get_redis_client, get_settings

__all__ = [
    "Settings",
    "get_cache_service",
    "get_catalog_client",
    "get_redis_client",
    "get_settings",
]
