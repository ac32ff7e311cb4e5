"""
Service métier pour les cours : ajout, suppression et lectures.
"""

import logging
from typing import List

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from app.database import write_transaction
from app.errors import IntegrityViolationError
from app.models.course import Course
from app.models.score import Score
from app.schemas.course import CourseCreate, CourseResponse

logger = logging.getLogger(__name__)

MAX_ROW_RETURN = 100


def add_course(db: Session, data: CourseCreate) -> CourseResponse:
    """
    Ajoute un cours.
    Lève ConflictError si le code (ou le couple code/nom) existe déjà.
    """
    with write_transaction(db, f"Impossible d'ajouter le cours '{data.code}'"):
        db.execute(insert(Course).values(code=data.code, name=data.name))
    logger.info("Cours ajouté : %s (%s)", data.code, data.name)
    return CourseResponse(code=data.code, name=data.name)


def add_courses(db: Session, items: List[CourseCreate]) -> List[CourseResponse]:
    """
    Ajoute plusieurs cours, un commit par ligne.
    Pas d'atomicité : si une ligne échoue, les précédentes restent enregistrées.
    """
    return [add_course(db, item) for item in items]


def remove_course(db: Session, code: str, cascade: bool = False) -> bool:
    """
    Supprime un cours.
    Sans cascade, bloqué si des notes (ou associations) référencent ce cours.
    Avec cascade, les notes dépendantes sont supprimées d'abord.
    Retourne True si supprimé, False si introuvable.
    """
    course = db.get(Course, code)
    if course is None:
        return False

    if not cascade:
        dependents = _count_dependents(db, code)
        if dependents:
            raise IntegrityViolationError(
                f"Impossible de supprimer le cours '{code}' : {dependents} note(s) y font référence."
            )

    with write_transaction(db, f"Impossible de supprimer le cours '{code}'", foreign_key=IntegrityViolationError):
        if cascade:
            db.execute(delete(Score).where(Score.course_code == code))
        db.execute(delete(Course).where(Course.code == code))

    logger.info("Cours supprimé : %s (cascade=%s)", code, cascade)
    return True


def get_last_courses(db: Session) -> List[CourseResponse]:
    """Retourne les 100 derniers cours ajoutés, du plus récent au plus ancien."""
    courses = db.execute(
        select(Course).order_by(Course.inserted_at.desc()).limit(MAX_ROW_RETURN)
    ).scalars().all()
    return [CourseResponse.model_validate(c) for c in courses]


def get_courses_by_professor(db: Session, professor_id: str) -> List[CourseResponse]:
    """Retourne tous les cours associés à un professeur (notés ou non), du plus récent au plus ancien."""
    linked_codes = select(Score.course_code).where(Score.professor_id == professor_id)
    courses = db.execute(
        select(Course)
        .where(Course.code.in_(linked_codes))
        .order_by(Course.inserted_at.desc())
    ).scalars().all()
    return [CourseResponse.model_validate(c) for c in courses]


def _count_dependents(db: Session, code: str) -> int:
    return db.execute(
        select(func.count()).select_from(Score).where(Score.course_code == code)
    ).scalar() or 0
