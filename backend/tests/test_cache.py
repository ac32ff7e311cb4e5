"""
Tests du cache de lecture (NullCache, RedisCache) et de son intégration au RatingStore.
Redis est toujours mocké : aucun serveur requis.
"""

from typing import List
from unittest.mock import MagicMock, patch

import pytest
import redis
from pydantic import TypeAdapter

from app.cache import NullCache, RedisCache, build_cache, cache_key
from app.errors import NotFoundError
from app.schemas.course import CourseResponse
from app.services import course_service
from app.store import RatingStore

COURSES_ADAPTER = TypeAdapter(List[CourseResponse])


def make_courses():
    return [CourseResponse(code="S209", name="How to replace head gaskets")]


# --- cache_key ---

def test_cache_key_sans_argument():
    assert cache_key("get_last_courses") == "get_last_courses"


def test_cache_key_avec_argument():
    assert cache_key("get_scores_by_course_code", "S209") == "get_scores_by_course_code:S209"


# --- NullCache ---

def test_null_cache_appelle_toujours_la_base():
    loader = MagicMock(return_value=make_courses())
    cache = NullCache()

    assert cache.fetch("k", loader, COURSES_ADAPTER) == make_courses()
    cache.fetch("k", loader, COURSES_ADAPTER)

    assert loader.call_count == 2
    assert cache.enabled is False


# --- RedisCache ---

def test_redis_miss_puis_hit(fake_redis):
    client, data = fake_redis
    loader = MagicMock(return_value=make_courses())
    cache = RedisCache(client, ttl=10)

    first = cache.fetch("get_last_courses", loader, COURSES_ADAPTER)
    second = cache.fetch("get_last_courses", loader, COURSES_ADAPTER)

    assert first == second == make_courses()
    loader.assert_called_once()
    client.set.assert_called_once()
    assert client.set.call_args.kwargs["ex"] == 10
    assert data["get_last_courses"] == COURSES_ADAPTER.dump_json(make_courses()).decode()


def test_redis_erreur_lecture_va_en_base_sans_repeupler():
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    loader = MagicMock(return_value=make_courses())

    result = RedisCache(client, ttl=10).fetch("k", loader, COURSES_ADAPTER)

    assert result == make_courses()
    loader.assert_called_once()
    client.set.assert_not_called()


def test_redis_erreur_ecriture_ignoree():
    client = MagicMock()
    client.get.return_value = None
    client.set.side_effect = redis.TimeoutError("slow")
    loader = MagicMock(return_value=make_courses())

    assert RedisCache(client, ttl=10).fetch("k", loader, COURSES_ADAPTER) == make_courses()


def test_redis_entree_illisible_rechargee(fake_redis):
    client, data = fake_redis
    data["k"] = "{pas du json"
    loader = MagicMock(return_value=make_courses())

    result = RedisCache(client, ttl=10).fetch("k", loader, COURSES_ADAPTER)

    assert result == make_courses()
    loader.assert_called_once()
    assert COURSES_ADAPTER.validate_json(data["k"]) == make_courses()


def test_redis_erreur_du_loader_propagee(fake_redis):
    client, data = fake_redis
    loader = MagicMock(side_effect=NotFoundError("Aucun professeur nommé 'X'."))

    with pytest.raises(NotFoundError):
        RedisCache(client, ttl=10).fetch("k", loader, COURSES_ADAPTER)
    assert data == {}


def test_redis_close():
    client = MagicMock()
    RedisCache(client, ttl=10).close()
    client.close.assert_called_once()


# --- build_cache ---

@pytest.mark.parametrize("url", [None, ""])
def test_build_cache_sans_url(url):
    assert isinstance(build_cache(url, ttl=10), NullCache)


def test_build_cache_redis():
    with patch("app.cache.redis.from_url") as mock_from_url:
        cache = build_cache("redis://localhost:6379/0", ttl=30, timeout=2.0)

    assert isinstance(cache, RedisCache)
    assert cache.enabled is True
    assert cache.ttl == 30
    mock_from_url.assert_called_once_with(
        "redis://localhost:6379/0",
        decode_responses=True,
        socket_timeout=2.0,
        socket_connect_timeout=2.0,
    )
    mock_from_url.return_value.ping.assert_called_once()


def test_build_cache_redis_injoignable_non_bloquant():
    with patch("app.cache.redis.from_url") as mock_from_url:
        mock_from_url.return_value.ping.side_effect = redis.ConnectionError("refused")
        cache = build_cache("redis://localhost:6379/0", ttl=10)

    assert isinstance(cache, RedisCache)


# --- Intégration RatingStore + cache ---

@pytest.fixture
def cached_store(db_url, fake_redis):
    client, data = fake_redis
    s = RatingStore(db_url, cache=RedisCache(client, ttl=10))
    yield s, client, data
    s.close()


def test_store_lecture_mise_en_cache(cached_store):
    store, client, data = cached_store
    store.add_course("S209", "How to replace head gaskets")

    with patch("app.store.course_service.get_last_courses", wraps=course_service.get_last_courses) as spy:
        first = store.get_last_courses()
        second = store.get_last_courses()

    assert first == second
    assert spy.call_count == 1
    assert data[cache_key("get_last_courses")] == COURSES_ADAPTER.dump_json(first).decode()


def test_store_cle_par_argument(cached_store):
    store, client, data = cached_store
    store.add_course("S209", "How to replace head gaskets")
    professor = store.add_professor("Great Teacher Onizuka")
    store.grade_course_professor(professor.id, "S209", "jim", [5, 4, 3])

    store.get_scores_by_course_code("S209")
    store.get_courses_by_professor(professor.id)

    assert "get_scores_by_course_code:S209" in data
    assert f"get_courses_by_professor:{professor.id}" in data


def test_store_resultat_perime_jusqua_expiration(cached_store):
    """Pas d'invalidation à l'écriture : l'ancien résultat est servi jusqu'au TTL."""
    store, client, data = cached_store
    store.add_course("S209", "How to replace head gaskets")
    assert [c.code for c in store.get_last_courses()] == ["S209"]

    store.add_course("CN9A", "Controlling the Anti Lag System")
    assert [c.code for c in store.get_last_courses()] == ["S209"]

    data.clear()  # expiration du TTL
    assert [c.code for c in store.get_last_courses()] == ["CN9A", "S209"]


def test_store_redis_en_panne(db_url):
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    with RatingStore(db_url, cache=RedisCache(client, ttl=10)) as store:
        store.add_course("S209", "How to replace head gaskets")
        assert [c.code for c in store.get_last_courses()] == ["S209"]
    client.set.assert_not_called()
    client.close.assert_called_once()


def test_store_introuvable_jamais_mis_en_cache(cached_store):
    store, client, data = cached_store
    with pytest.raises(NotFoundError):
        store.get_professor_id_by_name("Nobody")
    assert data == {}

    professor = store.add_professor("Nobody")
    assert store.get_professor_id_by_name("Nobody") == professor.id
    assert data[cache_key("get_professor_id_by_name", "Nobody")] == f'"{professor.id}"'
