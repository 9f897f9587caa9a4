"""
Redis client manager for Expressions Analytics
Stores the analytics settings record as JSON under a single key
"""

import json
import redis
from typing import Optional, Any
import logging

from config import get_redis_url

logger = logging.getLogger(__name__)


class RedisClient:
    """
    Redis connection manager with connection pooling.
    Implements the get/set/delete contract used by SettingsRepository.
    """

    def __init__(self, redis_url: Optional[str] = None):
        redis_url = redis_url or get_redis_url()

        try:
            self.pool = redis.ConnectionPool.from_url(
                redis_url,
                max_connections=20,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True,
            )
            self.client = redis.Redis(connection_pool=self.pool)

            # Test connection
            self.client.ping()
            logger.info(f"Redis connected successfully: {redis_url}")
        except redis.ConnectionError as e:
            logger.error(f"Redis connection failed: {str(e)}")
            raise RuntimeError(f"Failed to connect to Redis: {str(e)}")

    def ping(self) -> bool:
        """Check if Redis is available"""
        try:
            return self.client.ping()
        except redis.ConnectionError:
            return False

    def set(self, key: str, value: Any) -> bool:
        """
        Store a value in Redis.

        Args:
            key: Redis key
            value: Value to store (will be JSON-encoded if not a string)

        Returns:
            True if successful
        """
        try:
            if not isinstance(value, str):
                value = json.dumps(value)
            return bool(self.client.set(key, value))
        except redis.RedisError as e:
            logger.error(f"Redis SET failed for key '{key}': {str(e)}")
            return False

    def get(self, key: str, decode_json: bool = True) -> Optional[Any]:
        """
        Retrieve a value from Redis.

        Args:
            key: Redis key
            decode_json: If True, attempt to JSON-decode the value

        Returns:
            Value if found, None otherwise
        """
        try:
            value = self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis GET failed for key '{key}': {str(e)}")
            return None

        if value is None or not decode_json:
            return value

        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            # Not JSON, return as-is
            return value

    def delete(self, key: str) -> bool:
        """Delete a key from Redis"""
        try:
            return bool(self.client.delete(key))
        except redis.RedisError as e:
            logger.error(f"Redis DELETE failed for key '{key}': {str(e)}")
            return False

    def get_stats(self) -> dict:
        """Get Redis connection and memory stats"""
        try:
            info = self.client.info()
            return {
                "connected_clients": info.get("connected_clients", 0),
                "used_memory_human": info.get("used_memory_human", "unknown"),
            }
        except redis.RedisError as e:
            logger.error(f"Failed to get Redis stats: {str(e)}")
            return {"error": str(e)}

    def close(self):
        """Close Redis connection pool"""
        try:
            self.pool.disconnect()
            logger.info("Redis connection closed")
        except redis.RedisError as e:
            logger.error(f"Error closing Redis connection: {str(e)}")


# Global Redis client instance
redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """
    Get or create the global Redis client instance.

    Returns:
        RedisClient instance
    """
    global redis_client

    if redis_client is None:
        redis_client = RedisClient()

    return redis_client


def close_redis_client():
    """Close the global Redis client"""
    global redis_client

    if redis_client is not None:
        redis_client.close()
        redis_client = None
