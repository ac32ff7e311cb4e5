"""
Cache des lectures (cache-aside) devant la base relationnelle.

Deux variantes :
- NullCache : aucun cache configuré, chaque lecture va directement en base
- RedisCache : Redis avec TTL fixé à la construction

Protocole d'une lecture :
1. Hit  → on désérialise et on retourne, la base n'est pas touchée
2. Miss → lecture en base, PUIS écriture du résultat en cache (échec loggé et ignoré)
3. Erreur Redis → lecture en base, comme un miss, sans repeuplement

Aucune invalidation à l'écriture : un résultat peut rester périmé au plus CACHE_TTL secondes.
"""

import abc
import logging
from typing import Callable, Optional, TypeVar

import redis
from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def cache_key(operation: str, argument: Optional[str] = None) -> str:
    """
    Clé de cache "<opération>:<argument>".
    Le séparateur évite qu'un couple (opération, argument) en imite un autre.
    """
    if argument is None:
        return operation
    return f"{operation}:{argument}"


class ReadCache(abc.ABC):
    """Interface commune des caches de lecture."""

    enabled = False

    @abc.abstractmethod
    def fetch(self, key: str, loader: Callable[[], T], adapter: TypeAdapter) -> T:
        """Retourne la valeur en cache pour `key`, ou celle de `loader()` en cas d'absence."""
        raise NotImplementedError

    @abc.abstractmethod
    def close(self) -> None:
        raise NotImplementedError


class NullCache(ReadCache):
    """Pas de cache : lecture directe en base à chaque appel."""

    def fetch(self, key: str, loader: Callable[[], T], adapter: TypeAdapter) -> T:
        return loader()

    def close(self) -> None:
        pass


class RedisCache(ReadCache):
    """Cache Redis, valeurs sérialisées en JSON via pydantic."""

    enabled = True

    def __init__(self, client: redis.Redis, ttl: int):
        self._client = client
        self.ttl = ttl

    @classmethod
    def from_url(cls, url: str, ttl: int, timeout: float = 5.0) -> "RedisCache":
        """
        Ouvre la connexion Redis.
        Un serveur injoignable au démarrage n'est pas bloquant : les lectures
        passeront directement en base tant qu'il ne répond pas.
        """
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )
        try:
            client.ping()
        except redis.RedisError as exc:
            logger.warning("Cache Redis injoignable (%s) : lectures directes en base.", exc)
        return cls(client, ttl)

    def fetch(self, key: str, loader: Callable[[], T], adapter: TypeAdapter) -> T:
        try:
            cached = self._client.get(key)
        except redis.RedisError as exc:
            logger.warning("Lecture du cache impossible pour %s (%s) : lecture en base.", key, exc)
            return loader()

        if cached is not None:
            try:
                value = adapter.validate_json(cached)
            except ValidationError as exc:
                logger.warning("Entrée de cache illisible pour %s, rechargement : %s", key, exc)
            else:
                logger.debug("Cache hit : %s", key)
                return value
        else:
            logger.debug("Cache miss : %s", key)

        value = loader()
        self._populate(key, value, adapter)
        return value

    def _populate(self, key: str, value, adapter: TypeAdapter) -> None:
        """Étape explicite après la lecture en base : un échec n'atteint jamais l'appelant."""
        try:
            self._client.set(key, adapter.dump_json(value), ex=self.ttl)
        except redis.RedisError as exc:
            logger.warning("Écriture du cache impossible pour %s : %s", key, exc)

    def close(self) -> None:
        self._client.close()


def build_cache(url: Optional[str], ttl: int, timeout: float = 5.0) -> ReadCache:
    """Retourne un RedisCache si une URL est configurée, sinon un NullCache."""
    if not url:
        return NullCache()
    return RedisCache.from_url(url, ttl, timeout)
