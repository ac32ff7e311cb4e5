"""
Moteur de stockage des notes : point d'entrée unique consommé par la couche serveur.

Compose la base relationnelle (services *_service), le garde anti double notation
(grade_service) et le cache de lecture optionnel (cache.py).

- Écritures : directement en base, jamais d'invalidation du cache
- Lectures : cache d'abord, puis base + mise en cache en cas d'absence
- Aucun état mutable : une session SQLAlchemy par appel, l'instance peut être
  partagée entre threads ; la base sérialise les écritures concurrentes
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.exc import DBAPIError

from app.cache import NullCache, ReadCache, build_cache, cache_key
from app.config import Settings
from app.database import create_db_engine, create_session_factory, init_schema
from app.errors import InvalidDataError, translate_db_error
from app.schemas.course import CourseCreate, CourseResponse
from app.schemas.professor import CourseProfessorAssign, ProfessorCreate, ProfessorResponse
from app.schemas.score import GradeCreate, ScoreResponse
from app.services import course_service, grade_service, professor_service, score_service

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_COURSES = TypeAdapter(List[CourseResponse])
_PROFESSORS = TypeAdapter(List[ProfessorResponse])
_SCORES = TypeAdapter(List[ScoreResponse])
_PROFESSOR_ID = TypeAdapter(str)


def _validate(model: Type[M], **fields) -> M:
    """Construit le schéma d'entrée ; une erreur pydantic devient InvalidDataError."""
    try:
        return model(**fields)
    except ValidationError as exc:
        details = "; ".join(err["msg"] for err in exc.errors())
        raise InvalidDataError(f"Données invalides : {details}") from exc


class RatingStore:
    """Base relationnelle + cache de lecture optionnel."""

    def __init__(self, database_url: str, cache: Optional[ReadCache] = None, db_timeout: float = 10.0):
        self._engine = create_db_engine(database_url, timeout=db_timeout)
        init_schema(self._engine)
        self._session_factory = create_session_factory(self._engine)
        self.cache = cache if cache is not None else NullCache()
        logger.info(
            "Stockage initialisé (%s, cache %s)",
            self._engine.dialect.name,
            "activé" if self.cache.enabled else "désactivé",
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RatingStore":
        cache = build_cache(settings.CACHE_URL, settings.CACHE_TTL, settings.CACHE_TIMEOUT)
        return cls(settings.DATABASE_URL, cache=cache, db_timeout=settings.DB_TIMEOUT)

    def close(self) -> None:
        """Libère la connexion à la base puis le cache (sans effet pour NullCache)."""
        self._engine.dispose()
        self.cache.close()

    def __enter__(self) -> "RatingStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- Exécution ---

    def _run(self, message: str, func, *args):
        """Ouvre une session, exécute la fonction de service, traduit les erreurs SQL restantes."""
        with self._session_factory() as db:
            try:
                return func(db, *args)
            except DBAPIError as exc:
                db.rollback()
                raise translate_db_error(exc, message) from exc

    def _cached(self, key: str, adapter: TypeAdapter, message: str, func, *args):
        return self.cache.fetch(key, lambda: self._run(message, func, *args), adapter)

    # --- Cours ---

    def add_course(self, code: str, name: str) -> CourseResponse:
        data = _validate(CourseCreate, code=code, name=name)
        return self._run("Ajout du cours", course_service.add_course, data)

    def add_courses(self, courses: Iterable[Tuple[str, str]]) -> List[CourseResponse]:
        """Ajoute des couples (code, nom). Toutes les entrées sont validées avant la première insertion."""
        items = [_validate(CourseCreate, code=code, name=name) for code, name in courses]
        return self._run("Ajout des cours", course_service.add_courses, items)

    def remove_course(self, code: str, cascade: bool = False) -> bool:
        return self._run("Suppression du cours", course_service.remove_course, code, cascade)

    # --- Professeurs ---

    def add_professor(self, name: str) -> ProfessorResponse:
        data = _validate(ProfessorCreate, name=name)
        return self._run("Ajout du professeur", professor_service.add_professor, data)

    def add_professors(self, names: Iterable[str]) -> List[ProfessorResponse]:
        items = [_validate(ProfessorCreate, name=name) for name in names]
        return self._run("Ajout des professeurs", professor_service.add_professors, items)

    def remove_professor(self, professor_id: str, cascade: bool = False) -> bool:
        return self._run("Suppression du professeur", professor_service.remove_professor, professor_id, cascade)

    # --- Associations et notes ---

    def add_course_professor(self, professor_id: str, course_code: str) -> None:
        data = _validate(CourseProfessorAssign, professor_ids=[professor_id], course_codes=[course_code])
        self._run(
            "Association du cours",
            score_service.add_course_professor,
            data.professor_ids[0],
            data.course_codes[0],
        )

    def add_course_professors(self, professor_ids: Sequence[str], course_codes: Sequence[str]) -> int:
        data = _validate(CourseProfessorAssign, professor_ids=list(professor_ids), course_codes=list(course_codes))
        return self._run("Association des cours", score_service.add_course_professors, data)

    @staticmethod
    def make_fingerprint(username: str, course_code: str, professor_id: str) -> str:
        return grade_service.make_fingerprint(username, course_code, professor_id)

    def is_graded(self, fingerprint: str) -> bool:
        return self._run("Vérification de la note", grade_service.is_graded, fingerprint)

    def grade_course_professor(
        self,
        professor_id: str,
        course_code: str,
        username: str,
        scores: Sequence[float],
    ) -> str:
        """
        Note un couple (cours, professeur) : scores = (enseignement, travaux, apprentissage).
        Lève AlreadyGradedError si cet utilisateur l'a déjà noté.
        """
        if len(scores) != 3:
            raise InvalidDataError(f"Trois notes attendues, {len(scores)} reçue(s).")
        data = _validate(
            GradeCreate,
            professor_id=professor_id,
            course_code=course_code,
            username=username,
            score_teaching=scores[0],
            score_coursework=scores[1],
            score_learning=scores[2],
        )
        return self._run("Notation du cours", grade_service.grade_course_professor, data)

    # --- Lectures (via le cache) ---

    def get_last_courses(self) -> List[CourseResponse]:
        return self._cached(
            cache_key("get_last_courses"), _COURSES,
            "Lecture des cours", course_service.get_last_courses,
        )

    def get_last_professors(self) -> List[ProfessorResponse]:
        return self._cached(
            cache_key("get_last_professors"), _PROFESSORS,
            "Lecture des professeurs", professor_service.get_last_professors,
        )

    def get_last_scores(self) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_last_scores"), _SCORES,
            "Lecture des notes", score_service.get_last_scores,
        )

    def get_courses_by_professor(self, professor_id: str) -> List[CourseResponse]:
        return self._cached(
            cache_key("get_courses_by_professor", professor_id), _COURSES,
            "Lecture des cours du professeur", course_service.get_courses_by_professor, professor_id,
        )

    def get_professors_by_course(self, course_code: str) -> List[ProfessorResponse]:
        return self._cached(
            cache_key("get_professors_by_course", course_code), _PROFESSORS,
            "Lecture des professeurs du cours", professor_service.get_professors_by_course, course_code,
        )

    def get_professor_id_by_name(self, name: str) -> str:
        return self._cached(
            cache_key("get_professor_id_by_name", name), _PROFESSOR_ID,
            "Recherche du professeur", professor_service.get_professor_id_by_name, name,
        )

    def get_scores_by_professor_id(self, professor_id: str) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_scores_by_professor_id", professor_id), _SCORES,
            "Lecture des notes du professeur", score_service.get_scores_by_professor_id, professor_id,
        )

    def get_scores_by_professor_name(self, name: str) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_scores_by_professor_name", name), _SCORES,
            "Lecture des notes du professeur", score_service.get_scores_by_professor_name, name,
        )

    def get_scores_by_professor_name_like(self, name_like: str) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_scores_by_professor_name_like", name_like), _SCORES,
            "Recherche des notes par professeur", score_service.get_scores_by_professor_name_like, name_like,
        )

    def get_scores_by_course_code(self, course_code: str) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_scores_by_course_code", course_code), _SCORES,
            "Lecture des notes du cours", score_service.get_scores_by_course_code, course_code,
        )

    def get_scores_by_course_code_like(self, code_like: str) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_scores_by_course_code_like", code_like), _SCORES,
            "Recherche des notes par code de cours", score_service.get_scores_by_course_code_like, code_like,
        )

    def get_scores_by_course_name(self, name: str) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_scores_by_course_name", name), _SCORES,
            "Lecture des notes du cours", score_service.get_scores_by_course_name, name,
        )

    def get_scores_by_course_name_like(self, name_like: str) -> List[ScoreResponse]:
        return self._cached(
            cache_key("get_scores_by_course_name_like", name_like), _SCORES,
            "Recherche des notes par nom de cours", score_service.get_scores_by_course_name_like, name_like,
        )


def get_store(request: Request) -> RatingStore:
    """Dépendance FastAPI : fournit le RatingStore créé au démarrage de l'application."""
    return request.app.state.store
