"""
Service métier pour les notes : associations professeur ↔ cours et
lectures agrégées par couple (cours, professeur).

Règles des agrégats :
- une sous-note sans aucune évaluation vaut 0 (jamais NULL)
- score_average est toujours calculé via average_score()
- tri par date de la note la plus récente du groupe
"""

import logging
from typing import List

from sqlalchemy import func, insert, select
from sqlalchemy.orm import Session

from app.database import write_transaction
from app.errors import ConflictError, InvalidDataError
from app.models.course import Course
from app.models.professor import Professor
from app.models.score import ASSOCIATION_FINGERPRINT, Score
from app.schemas.professor import CourseProfessorAssign
from app.schemas.score import ScoreResponse
from app.services.course_service import MAX_ROW_RETURN
from app.services.scoring import average_score, round_score

logger = logging.getLogger(__name__)


# --- Associations ---

def add_course_professor(db: Session, professor_id: str, course_code: str) -> None:
    """
    Associe un cours à un professeur (ligne de note à empreinte vide, sans note).
    Lève ConflictError si l'association non notée existe déjà,
    NotFoundError si le cours ou le professeur n'existe pas.
    """
    existing = db.execute(
        select(Score.id).where(
            Score.professor_id == professor_id,
            Score.course_code == course_code,
            Score.fingerprint == ASSOCIATION_FINGERPRINT,
        ).limit(1)
    ).scalar()
    if existing is not None:
        raise ConflictError(
            f"Le cours '{course_code}' est déjà associé au professeur '{professor_id}'."
        )

    with write_transaction(db, f"Impossible d'associer le cours '{course_code}' au professeur '{professor_id}'"):
        db.execute(
            insert(Score).values(
                fingerprint=ASSOCIATION_FINGERPRINT,
                professor_id=professor_id,
                course_code=course_code,
            )
        )
    logger.info("Association ajoutée : professeur %s ↔ cours %s", professor_id, course_code)


def add_course_professors(db: Session, data: CourseProfessorAssign) -> int:
    """
    Associe des cours à des professeurs, paire par paire (listes appariées par position).
    Un commit par paire : en cas d'échec, les paires précédentes restent enregistrées.
    Retourne le nombre d'associations créées.
    """
    if len(data.professor_ids) != len(data.course_codes):
        raise InvalidDataError(
            f"Listes de tailles différentes : {len(data.professor_ids)} professeur(s) "
            f"pour {len(data.course_codes)} cours."
        )

    for professor_id, course_code in zip(data.professor_ids, data.course_codes):
        add_course_professor(db, professor_id, course_code)
    return len(data.professor_ids)


# --- Lectures agrégées ---

def _aggregate_query():
    """Requête de base : une ligne par couple (cours, professeur), notes moyennées."""
    return (
        select(
            Score.professor_id,
            Professor.name.label("professor_name"),
            Score.course_code,
            Course.name.label("course_name"),
            func.coalesce(func.avg(Score.score_teaching), 0).label("score_teaching"),
            func.coalesce(func.avg(Score.score_coursework), 0).label("score_coursework"),
            func.coalesce(func.avg(Score.score_learning), 0).label("score_learning"),
            func.count(Score.score_teaching).label("rating_count"),
        )
        .select_from(Score)
        .join(Professor, Score.professor_id == Professor.id)
        .join(Course, Score.course_code == Course.code)
        .group_by(Score.course_code, Score.professor_id, Professor.name, Course.name)
        .order_by(func.max(Score.inserted_at).desc(), func.max(Score.id).desc())
    )


def _to_responses(rows) -> List[ScoreResponse]:
    return [
        ScoreResponse(
            professor_id=row.professor_id,
            professor_name=row.professor_name,
            course_code=row.course_code,
            course_name=row.course_name,
            score_teaching=round_score(row.score_teaching),
            score_coursework=round_score(row.score_coursework),
            score_learning=round_score(row.score_learning),
            score_average=average_score(row.score_teaching, row.score_coursework, row.score_learning),
            count=row.rating_count,
        )
        for row in rows
    ]


def get_last_scores(db: Session) -> List[ScoreResponse]:
    """Retourne les 100 derniers agrégats (cours, professeur)."""
    rows = db.execute(_aggregate_query().limit(MAX_ROW_RETURN)).all()
    return _to_responses(rows)


def get_scores_by_professor_id(db: Session, professor_id: str) -> List[ScoreResponse]:
    rows = db.execute(_aggregate_query().where(Score.professor_id == professor_id)).all()
    return _to_responses(rows)


def get_scores_by_professor_name(db: Session, name: str) -> List[ScoreResponse]:
    rows = db.execute(_aggregate_query().where(Professor.name == name)).all()
    return _to_responses(rows)


def get_scores_by_professor_name_like(db: Session, name_like: str) -> List[ScoreResponse]:
    """Agrégats des professeurs dont le nom contient la chaîne (100 au plus)."""
    rows = db.execute(
        _aggregate_query()
        .where(Professor.name.contains(name_like, autoescape=True))
        .limit(MAX_ROW_RETURN)
    ).all()
    return _to_responses(rows)


def get_scores_by_course_code(db: Session, course_code: str) -> List[ScoreResponse]:
    rows = db.execute(_aggregate_query().where(Score.course_code == course_code)).all()
    return _to_responses(rows)


def get_scores_by_course_code_like(db: Session, code_like: str) -> List[ScoreResponse]:
    """Agrégats des cours dont le code contient la chaîne (100 au plus)."""
    rows = db.execute(
        _aggregate_query()
        .where(Score.course_code.contains(code_like, autoescape=True))
        .limit(MAX_ROW_RETURN)
    ).all()
    return _to_responses(rows)


def get_scores_by_course_name(db: Session, name: str) -> List[ScoreResponse]:
    rows = db.execute(_aggregate_query().where(Course.name == name)).all()
    return _to_responses(rows)


def get_scores_by_course_name_like(db: Session, name_like: str) -> List[ScoreResponse]:
    """Agrégats des cours dont le nom contient la chaîne (100 au plus)."""
    rows = db.execute(
        _aggregate_query()
        .where(Course.name.contains(name_like, autoescape=True))
        .limit(MAX_ROW_RETURN)
    ).all()
    return _to_responses(rows)
