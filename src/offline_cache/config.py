import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream origin the proxy serves
    origin_url: str = os.getenv("ORIGIN_URL", "http://localhost:8080")

    # Cache namespaces: "<prefix>-<role>-<version>"
    cache_prefix: str = os.getenv("CACHE_PREFIX", "offline-cache")
    cache_version: str = os.getenv("CACHE_VERSION", "v1.0.2")

    # Storage
    storage_backend: str = os.getenv("STORAGE_BACKEND", "redis")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_key_prefix: str = os.getenv("REDIS_KEY_PREFIX", "offline_cache")

    # Network
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", "30.0"))
    probe_timeout: float = float(os.getenv("PROBE_TIMEOUT", "3.0"))
    probe_path: str = os.getenv("PROBE_PATH", "/favicon.ico")
    offline_page_path: str = os.getenv("OFFLINE_PAGE_PATH", "/offline.html")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def origin(self) -> str:
        """Origin URL without a trailing slash."""
        return self.origin_url.rstrip("/")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.storage_backend not in ("redis", "memory"):
            raise ValueError(
                f"STORAGE_BACKEND must be one of ['redis', 'memory'], got {self.storage_backend}"
            )

        if not self.origin_url.startswith(("http://", "https://")):
            raise ValueError(f"ORIGIN_URL must be an http(s) URL, got {self.origin_url}")

        if not self.cache_version:
            raise ValueError("CACHE_VERSION must not be empty")

        if self.probe_timeout <= 0 or self.fetch_timeout <= 0:
            raise ValueError("FETCH_TIMEOUT and PROBE_TIMEOUT must be positive")

        for name in ("probe_path", "offline_page_path"):
            if not getattr(self, name).startswith("/"):
                raise ValueError(f"{name.upper()} must start with '/'")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create an async Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger("offline_cache")
    logger.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    return logger
