"""
Service métier pour les professeurs : ajout, suppression et lectures.
"""

import logging
from typing import List

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from app.database import write_transaction
from app.errors import IntegrityViolationError, NotFoundError
from app.models.professor import Professor, new_professor_id
from app.models.score import Score
from app.schemas.professor import ProfessorCreate, ProfessorResponse
from app.services.course_service import MAX_ROW_RETURN

logger = logging.getLogger(__name__)


def add_professor(db: Session, data: ProfessorCreate) -> ProfessorResponse:
    """
    Ajoute un professeur avec un identifiant UUID4 généré.
    Lève ConflictError si un professeur porte déjà ce nom.
    """
    professor_id = new_professor_id()
    with write_transaction(db, f"Impossible d'ajouter le professeur '{data.name}'"):
        db.execute(insert(Professor).values(id=professor_id, name=data.name))
    logger.info("Professeur ajouté : %s (%s)", professor_id, data.name)
    return ProfessorResponse(id=professor_id, name=data.name)


def add_professors(db: Session, items: List[ProfessorCreate]) -> List[ProfessorResponse]:
    """Ajoute plusieurs professeurs, un commit par ligne (pas d'atomicité du lot)."""
    return [add_professor(db, item) for item in items]


def remove_professor(db: Session, professor_id: str, cascade: bool = False) -> bool:
    """
    Supprime un professeur.
    Sans cascade, bloqué si des notes (ou associations) le référencent.
    Retourne True si supprimé, False si introuvable.
    """
    professor = db.get(Professor, professor_id)
    if professor is None:
        return False

    if not cascade:
        dependents = db.execute(
            select(func.count()).select_from(Score).where(Score.professor_id == professor_id)
        ).scalar() or 0
        if dependents:
            raise IntegrityViolationError(
                f"Impossible de supprimer le professeur '{professor_id}' : "
                f"{dependents} note(s) y font référence."
            )

    with write_transaction(
        db,
        f"Impossible de supprimer le professeur '{professor_id}'",
        foreign_key=IntegrityViolationError,
    ):
        if cascade:
            db.execute(delete(Score).where(Score.professor_id == professor_id))
        db.execute(delete(Professor).where(Professor.id == professor_id))

    logger.info("Professeur supprimé : %s (cascade=%s)", professor_id, cascade)
    return True


def get_last_professors(db: Session) -> List[ProfessorResponse]:
    """Retourne les 100 derniers professeurs ajoutés, du plus récent au plus ancien."""
    professors = db.execute(
        select(Professor).order_by(Professor.inserted_at.desc()).limit(MAX_ROW_RETURN)
    ).scalars().all()
    return [ProfessorResponse.model_validate(p) for p in professors]


def get_professors_by_course(db: Session, course_code: str) -> List[ProfessorResponse]:
    """Retourne tous les professeurs associés à un cours, du plus récent au plus ancien."""
    linked_ids = select(Score.professor_id).where(Score.course_code == course_code)
    professors = db.execute(
        select(Professor)
        .where(Professor.id.in_(linked_ids))
        .order_by(Professor.inserted_at.desc())
    ).scalars().all()
    return [ProfessorResponse.model_validate(p) for p in professors]


def get_professor_id_by_name(db: Session, name: str) -> str:
    """Retourne l'identifiant du professeur portant exactement ce nom."""
    professor_id = db.execute(
        select(Professor.id).where(Professor.name == name).limit(1)
    ).scalar()
    if professor_id is None:
        raise NotFoundError(f"Aucun professeur nommé '{name}'.")
    return professor_id
