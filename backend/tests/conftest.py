"""
Configuration partagée pour tous les tests.
- client : API avec un RatingStore mocké (aucune base réelle)
- store : RatingStore sur un fichier SQLite temporaire, sans cache
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.store import RatingStore, get_store

COURSES = [
    ("S209", "How to replace head gaskets"),
    ("CN9A", "Controlling the Anti Lag System"),
    ("AE86", "How to beat any car"),
    ("FD3S", "How to BRAAAP"),
]

PROFESSOR_NAMES = [
    "Great Teacher Onizuka",
    "Pippy Peepee Poopypants",
    "Professor Oak",
    "Takahashi Keisuke",
]


@pytest.fixture
def mock_store():
    return MagicMock(spec=RatingStore)


@pytest.fixture
def client(mock_store):
    """Client HTTP de test avec le stockage mocké (lifespan non exécuté)."""
    app.dependency_overrides[get_store] = lambda: mock_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'ratings.db'}"


@pytest.fixture
def store(db_url):
    s = RatingStore(db_url)
    yield s
    s.close()


@pytest.fixture
def professors(store):
    """Remplit la base : 4 cours, 4 professeurs. Retourne les professeurs dans l'ordre d'ajout."""
    store.add_courses(COURSES)
    return store.add_professors(PROFESSOR_NAMES)


@pytest.fixture
def fake_redis():
    """Client Redis mocké adossé à un dict (get / set). Retourne (client, données)."""
    data = {}
    client = MagicMock()
    client.get.side_effect = lambda key: data.get(key)

    def _set(key, value, ex=None):
        data[key] = value.decode() if isinstance(value, bytes) else value

    client.set.side_effect = _set
    return client, data
