"""
Router de lecture des professeurs.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.schemas.course import CourseResponse
from app.schemas.professor import ProfessorIdResponse, ProfessorResponse
from app.store import RatingStore, get_store

router = APIRouter(prefix="/api/v1/professors", tags=["Professeurs"])


@router.get("", response_model=List[ProfessorResponse], summary="Derniers professeurs")
def list_professors(store: RatingStore = Depends(get_store)):
    """Retourne les 100 derniers professeurs ajoutés."""
    return store.get_last_professors()


@router.get("/lookup", response_model=ProfessorIdResponse, summary="Identifiant d'un professeur")
def lookup_professor(name: str = Query(min_length=1), store: RatingStore = Depends(get_store)):
    """Recherche exacte par nom ; 404 si aucun professeur ne porte ce nom."""
    return ProfessorIdResponse(id=store.get_professor_id_by_name(name))


@router.get("/{professor_id}/courses", response_model=List[CourseResponse], summary="Cours d'un professeur")
def list_professor_courses(professor_id: str, store: RatingStore = Depends(get_store)):
    return store.get_courses_by_professor(professor_id)
