import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from viewgate.external_services.view_catalog_client import ViewCatalogClient
from viewgate.services.redis_cache_service import RedisCacheService

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "View Visibility API"
    debug: bool = False
    catalog_api_base_url: str = "http://localhost:8080"
    catalog_api_token: str | None = None
    catalog_api_token_header: str = "X-Cybozu-API-Token"
    catalog_api_timeout: float = 30.0
    redis_url: str | None = None
    catalog_cache_ttl: int = 60
    enable_catalog_cache: bool = True
    # where the gate sends users who may not see any view
    default_location: str = "/k/"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("debug", mode="before")
    @classmethod
    def _coerce_debug(cls, value):
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"1", "true", "yes", "on"}:
                return True
            if normalized in {"0", "false", "no", "off"}:
                return False
            # Treat logging level strings as non-debug instead of erroring.
            if normalized in {"warn", "warning", "info", "error", "critical"}:
                return False
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_redis_client() -> Redis | None:
    settings = get_settings()

    if not settings.redis_url:
        logger.warning("REDIS_URL not configured, catalog caching disabled")
        return None

    try:
        client = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=False,  # payloads are encoded with orjson
            socket_timeout=2,
            socket_connect_timeout=2,
        )
        client.ping()
        logger.info("Redis client connected successfully")
        return client
    except (RedisConnectionError, RedisError) as exc:
        logger.warning("Failed to connect to Redis: %s", exc)
        return None


@lru_cache
def get_cache_service() -> RedisCacheService:
    settings = get_settings()
    return RedisCacheService(
        redis_client=get_redis_client(),
        default_ttl=settings.catalog_cache_ttl,
        enabled=settings.enable_catalog_cache,
    )


@lru_cache
def get_catalog_client() -> ViewCatalogClient:
    settings = get_settings()
    return ViewCatalogClient(
        settings.catalog_api_base_url,
        api_token=settings.catalog_api_token,
        token_header=settings.catalog_api_token_header,
        timeout=settings.catalog_api_timeout,
    )
