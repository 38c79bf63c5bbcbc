from datetime import datetime, timezone

import redis

from api.utils.dependencies import get_settings

REVOKED_PREFIX = "revoked:"


def get_redis_client() -> redis.Redis:
    settings = get_settings()
    return redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
    )


def revoke_jti(jti: str, expires_at: datetime) -> None:
    """Blacklist a token id until the token would have expired anyway."""
    ttl = int((expires_at - datetime.now(timezone.utc)).total_seconds())
    get_redis_client().set(f"{REVOKED_PREFIX}{jti}", 1, ex=max(ttl, 1))


def is_revoked(jti: str) -> bool:
    return bool(get_redis_client().get(f"{REVOKED_PREFIX}{jti}"))
