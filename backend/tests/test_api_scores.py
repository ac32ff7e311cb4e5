"""
Tests d'intégration API pour la lecture des notes agrégées.
"""

from app.errors import NotFoundError
from app.schemas.score import ScoreResponse


# --- Helper ---

def make_score_response(**kwargs) -> ScoreResponse:
    return ScoreResponse(
        professor_id=kwargs.get("professor_id", "p1"),
        professor_name=kwargs.get("professor_name", "Great Teacher Onizuka"),
        course_code=kwargs.get("course_code", "S209"),
        course_name=kwargs.get("course_name", "How to replace head gaskets"),
        score_teaching=kwargs.get("score_teaching", 5.0),
        score_coursework=kwargs.get("score_coursework", 4.0),
        score_learning=kwargs.get("score_learning", 3.0),
        score_average=kwargs.get("score_average", 4.0),
        count=kwargs.get("count", 1),
    )


# ============================================================
# GET /api/v1/scores
# ============================================================

def test_list_scores_succes(client, mock_store):
    mock_store.get_last_scores.return_value = [make_score_response()]

    response = client.get("/api/v1/scores")

    assert response.status_code == 200
    body = response.json()[0]
    assert body["score_average"] == 4.0
    assert body["count"] == 1
    assert body["professor_name"] == "Great Teacher Onizuka"


# ============================================================
# GET /api/v1/scores/professor
# ============================================================

def test_scores_by_professor_name_exact(client, mock_store):
    mock_store.get_scores_by_professor_name.return_value = [make_score_response()]

    response = client.get("/api/v1/scores/professor", params={"name": "Great Teacher Onizuka"})

    assert response.status_code == 200
    mock_store.get_scores_by_professor_name.assert_called_once_with("Great Teacher Onizuka")
    mock_store.get_scores_by_professor_name_like.assert_not_called()


def test_scores_by_professor_name_like(client, mock_store):
    mock_store.get_scores_by_professor_name_like.return_value = []

    response = client.get("/api/v1/scores/professor", params={"name": "Oak", "like": "true"})

    assert response.status_code == 200
    assert response.json() == []
    mock_store.get_scores_by_professor_name_like.assert_called_once_with("Oak")


def test_scores_by_professor_name_manquant(client):
    response = client.get("/api/v1/scores/professor")
    assert response.status_code == 422


def test_scores_by_professor_id(client, mock_store):
    mock_store.get_scores_by_professor_id.return_value = [make_score_response(professor_id="p7")]

    response = client.get("/api/v1/scores/professor/p7")

    assert response.status_code == 200
    assert response.json()[0]["professor_id"] == "p7"
    mock_store.get_scores_by_professor_id.assert_called_once_with("p7")


# ============================================================
# GET /api/v1/scores/course
# ============================================================

def test_scores_by_course_code_param(client, mock_store):
    mock_store.get_scores_by_course_code.return_value = [make_score_response()]

    response = client.get("/api/v1/scores/course", params={"code": "S209"})

    assert response.status_code == 200
    mock_store.get_scores_by_course_code.assert_called_once_with("S209")


def test_scores_by_course_code_like(client, mock_store):
    mock_store.get_scores_by_course_code_like.return_value = []

    response = client.get("/api/v1/scores/course", params={"code": "N9", "like": "true"})

    assert response.status_code == 200
    mock_store.get_scores_by_course_code_like.assert_called_once_with("N9")


def test_scores_by_course_name(client, mock_store):
    mock_store.get_scores_by_course_name.return_value = []
    response = client.get("/api/v1/scores/course", params={"name": "How to BRAAAP"})
    assert response.status_code == 200
    mock_store.get_scores_by_course_name.assert_called_once_with("How to BRAAAP")


def test_scores_by_course_name_like(client, mock_store):
    mock_store.get_scores_by_course_name_like.return_value = []
    response = client.get("/api/v1/scores/course", params={"name": "Anti Lag", "like": "true"})
    assert response.status_code == 200
    mock_store.get_scores_by_course_name_like.assert_called_once_with("Anti Lag")


def test_scores_by_course_sans_parametre(client):
    """Ni code ni name → 400."""
    response = client.get("/api/v1/scores/course")
    assert response.status_code == 400


def test_scores_by_course_deux_parametres(client):
    """code ET name → 400."""
    response = client.get("/api/v1/scores/course", params={"code": "S209", "name": "x"})
    assert response.status_code == 400


# ============================================================
# GET /api/v1/scores/course/{code}
# ============================================================

def test_scores_by_course_code_path(client, mock_store):
    mock_store.get_scores_by_course_code.return_value = [
        make_score_response(score_teaching=0, score_coursework=0, score_learning=0, score_average=0, count=0),
    ]

    response = client.get("/api/v1/scores/course/S209")

    assert response.status_code == 200
    assert response.json()[0]["count"] == 0
    assert response.json()[0]["score_average"] == 0


def test_scores_erreur_metier_transmise(client, mock_store):
    mock_store.get_scores_by_course_code.side_effect = NotFoundError("Cours introuvable.")
    response = client.get("/api/v1/scores/course/NOPE")
    assert response.status_code == 404
    assert response.json()["detail"] == "Cours introuvable."
