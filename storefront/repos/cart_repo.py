# storefront/repos/cart_repo.py
import json
from typing import List

import redis

from storefront.domain.cart import CartLine
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CART_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def get_redis(url: str | None = None) -> redis.Redis:
    return redis.Redis.from_url(url or REDIS_URL, decode_responses=True)


class RedisCartStorage:
    """
    Trwalosc koszyka: jeden klucz JSON na koszyk klienta.
    TTL odnawiany przy kazdym zapisie, porzucony koszyk sam wygasa.
    """

    def __init__(self, cart_key: str, client: redis.Redis | None = None, ttl: int = CART_TTL_SECONDS):
        self.key = f"cart:{cart_key}"
        self.redis = client if client is not None else get_redis()
        self.ttl = ttl

    @redis_retry()
    def load(self) -> List[CartLine]:
        raw = self.redis.get(self.key)
        if not raw:
            return []
        try:
            return [CartLine.model_validate(line) for line in json.loads(raw)]
        except (ValueError, TypeError) as e:
            # uszkodzony wpis - zaczynamy od pustego koszyka
            logger.warning(f"Discarding unreadable cart {self.key}: {e}")
            return []

    @redis_retry()
    def save(self, lines: List[CartLine]) -> None:
        if not lines:
            self.redis.delete(self.key)
            return
        payload = json.dumps([line.model_dump(mode="json") for line in lines])
        self.redis.set(name=self.key, value=payload, ex=self.ttl)
