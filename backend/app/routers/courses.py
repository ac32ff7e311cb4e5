"""
Router de lecture des cours.
"""

from typing import List

from fastapi import APIRouter, Depends

from app.schemas.course import CourseResponse
from app.schemas.professor import ProfessorResponse
from app.store import RatingStore, get_store

router = APIRouter(prefix="/api/v1/courses", tags=["Cours"])


@router.get("", response_model=List[CourseResponse], summary="Derniers cours")
def list_courses(store: RatingStore = Depends(get_store)):
    """Retourne les 100 derniers cours ajoutés."""
    return store.get_last_courses()


@router.get("/{code}/professors", response_model=List[ProfessorResponse], summary="Professeurs d'un cours")
def list_course_professors(code: str, store: RatingStore = Depends(get_store)):
    return store.get_professors_by_course(code)
