"""Redis-backed session state: JWT deny-list and per-user role cache.

The deny-list lets a token be revoked before its natural expiry by storing
its ``jti`` with a TTL matching the token's remaining lifetime. The role
cache keeps the role set loaded from ``user_roles`` for a short TTL so a
page load does not hit the database for every guarded request. Both are
cleared on logout, and the role cache is dropped whenever a user's roles
change.

Each user has a generation counter next to the cached snapshot. Clearing
the cache increments it, and a snapshot only counts as a hit when it was
written under the current generation, so a load that read the database
before a role change cannot re-publish the old roles.

Usage::

    await revoke_token(redis, jti, expires_in_seconds=1800)
    assert await is_token_revoked(redis, jti)
    await clear_cached_roles(redis, user_id)
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

_DENY_PREFIX = "token:deny:"
_ROLES_PREFIX = "session:roles:"
_GENERATION_PREFIX = "session:rolegen:"
# Outlives any role snapshot; refreshed on every clear
_GENERATION_TTL = 7 * 24 * 3600

# Key in ``AsyncSession.info`` holding user ids whose cached roles must be
# dropped once the transaction commits
ROLE_INVALIDATIONS = "role_cache_invalidations"


async def revoke_token(redis: Redis, jti: str, expires_in_seconds: int) -> None:
    """Add *jti* to the deny-list with a TTL equal to the token's remaining lifetime."""
    if expires_in_seconds > 0:
        await redis.setex(f"{_DENY_PREFIX}{jti}", expires_in_seconds, "1")


async def is_token_revoked(redis: Redis, jti: str) -> bool:
    """Return ``True`` if *jti* has been revoked."""
    return await redis.exists(f"{_DENY_PREFIX}{jti}") > 0


async def role_cache_generation(redis: Redis | None, user_id: str) -> int | None:
    """Return the invalidation generation for *user_id*.

    Read it before loading roles from the database and pass it to
    :func:`set_cached_roles`. ``None`` means the cache is unusable and
    nothing should be written.
    """
    if redis is None:
        return None
    try:
        raw = await redis.get(f"{_GENERATION_PREFIX}{user_id}")
    except RedisError:
        logger.warning("Role cache generation read failed for user %s", user_id, exc_info=True)
        return None
    return int(raw or 0)


async def get_cached_roles(redis: Redis | None, user_id: str) -> dict[str, Any] | None:
    """Return the cached session snapshot for *user_id*, or ``None`` on a miss.

    A snapshot written under an older generation is a miss. Cache failures
    are reported as misses so the caller falls through to the database.
    """
    if redis is None:
        return None
    try:
        raw, generation = await redis.mget(
            f"{_ROLES_PREFIX}{user_id}", f"{_GENERATION_PREFIX}{user_id}"
        )
    except RedisError:
        logger.warning("Role cache read failed for user %s", user_id, exc_info=True)
        return None
    if not raw:
        return None
    try:
        snapshot = json.loads(raw)
    except ValueError:
        logger.warning("Discarding corrupt role cache entry for user %s", user_id)
        return None
    if snapshot.pop("generation", None) != int(generation or 0):
        logger.debug("Ignoring stale role cache entry for user %s", user_id)
        return None
    return snapshot


async def set_cached_roles(
    redis: Redis | None,
    user_id: str,
    snapshot: dict[str, Any],
    ttl: int,
    generation: int | None = 0,
) -> None:
    """Store a session snapshot for *user_id* under *generation*."""
    if redis is None or generation is None or ttl <= 0:
        return
    payload = json.dumps({**snapshot, "generation": generation})
    try:
        await redis.setex(f"{_ROLES_PREFIX}{user_id}", min(ttl, _GENERATION_TTL), payload)
    except RedisError:
        logger.warning("Role cache write failed for user %s", user_id, exc_info=True)


async def clear_cached_roles(redis: Redis | None, user_id: str) -> None:
    """Drop the cached role set for *user_id* and bump its generation.

    Bumping the generation also voids any snapshot a concurrent load is
    about to write from data it read before the change.
    """
    if redis is None:
        return
    generation_key = f"{_GENERATION_PREFIX}{user_id}"
    try:
        async with redis.pipeline(transaction=True) as pipe:
            await (
                pipe.incr(generation_key)
                .expire(generation_key, _GENERATION_TTL)
                .delete(f"{_ROLES_PREFIX}{user_id}")
                .execute()
            )
    except RedisError:
        logger.warning("Role cache clear failed for user %s", user_id, exc_info=True)
