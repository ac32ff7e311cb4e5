"""
Router de lecture des notes agrégées par couple (cours, professeur).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.schemas.score import ScoreResponse
from app.store import RatingStore, get_store

router = APIRouter(prefix="/api/v1/scores", tags=["Notes"])


@router.get("", response_model=List[ScoreResponse], summary="Dernières notes")
def list_scores(store: RatingStore = Depends(get_store)):
    """Retourne les 100 derniers agrégats."""
    return store.get_last_scores()


@router.get("/professor", response_model=List[ScoreResponse], summary="Notes par nom de professeur")
def scores_by_professor_name(
    name: str = Query(min_length=1),
    like: bool = False,
    store: RatingStore = Depends(get_store),
):
    """Recherche exacte, ou par sous-chaîne si like=true (100 résultats au plus)."""
    if like:
        return store.get_scores_by_professor_name_like(name)
    return store.get_scores_by_professor_name(name)


@router.get("/professor/{professor_id}", response_model=List[ScoreResponse], summary="Notes d'un professeur")
def scores_by_professor_id(professor_id: str, store: RatingStore = Depends(get_store)):
    return store.get_scores_by_professor_id(professor_id)


@router.get("/course", response_model=List[ScoreResponse], summary="Notes par code ou nom de cours")
def scores_by_course(
    code: Optional[str] = None,
    name: Optional[str] = None,
    like: bool = False,
    store: RatingStore = Depends(get_store),
):
    """Exactement un des deux paramètres code / name ; like=true pour une recherche par sous-chaîne."""
    if bool(code) == bool(name):
        raise HTTPException(status_code=400, detail="Fournir soit 'code', soit 'name'.")

    if code:
        return store.get_scores_by_course_code_like(code) if like else store.get_scores_by_course_code(code)
    return store.get_scores_by_course_name_like(name) if like else store.get_scores_by_course_name(name)


@router.get("/course/{code}", response_model=List[ScoreResponse], summary="Notes d'un cours")
def scores_by_course_code(code: str, store: RatingStore = Depends(get_store)):
    return store.get_scores_by_course_code(code)
