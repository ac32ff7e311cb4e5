"""
Service de notation : un utilisateur ne note qu'une fois un couple (cours, professeur).

Le nom d'utilisateur n'est jamais stocké. On enregistre une empreinte
XXH3-64 de (utilisateur + code du cours + id du professeur), sous forme
d'entier non signé en décimal. L'empreinte est stable d'un redémarrage
à l'autre et ne permet pas de retrouver l'utilisateur.
"""

import logging

import xxhash
from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from app.database import write_transaction
from app.errors import AlreadyGradedError
from app.models.score import Score
from app.schemas.score import GradeCreate

logger = logging.getLogger(__name__)


def make_fingerprint(username: str, course_code: str, professor_id: str) -> str:
    """Empreinte déterministe et sensible à l'ordre des trois champs concaténés."""
    digest = xxhash.xxh3_64_intdigest((username + course_code + professor_id).encode("utf-8"))
    return str(digest)


def is_graded(db: Session, fingerprint: str) -> bool:
    """True si une note avec exactement cette empreinte existe déjà."""
    found = db.execute(
        select(Score.id).where(Score.fingerprint == fingerprint).limit(1)
    ).scalar()
    return found is not None


def grade_course_professor(db: Session, data: GradeCreate) -> str:
    """
    Enregistre la note d'un utilisateur pour un couple (cours, professeur).

    Étapes :
    1. Calculer l'empreinte de (utilisateur, cours, professeur)
    2. Refuser si elle existe déjà (AlreadyGradedError, aucune écriture)
    3. Insérer la note ; cours ou professeur inexistant → NotFoundError

    Retourne l'empreinte enregistrée.
    """
    fingerprint = make_fingerprint(data.username, data.course_code, data.professor_id)

    if is_graded(db, fingerprint):
        raise AlreadyGradedError()

    with write_transaction(
        db, f"Impossible de noter le cours '{data.course_code}' du professeur '{data.professor_id}'"
    ):
        db.execute(
            insert(Score).values(
                fingerprint=fingerprint,
                professor_id=data.professor_id,
                course_code=data.course_code,
                score_teaching=data.score_teaching,
                score_coursework=data.score_coursework,
                score_learning=data.score_learning,
            )
        )

    # Pas de nom d'utilisateur dans les logs
    logger.info("Note enregistrée : professeur %s, cours %s", data.professor_id, data.course_code)
    return fingerprint
