"""
Taxonomie des erreurs du moteur de stockage.

Chaque type correspond à une réponse côté serveur :
400 (InvalidDataError), 409 (ConflictError, AlreadyGradedError,
IntegrityViolationError), 404 (NotFoundError), 500 (BackendError).
"""

import logging
from typing import Optional, Type

from sqlalchemy.exc import DBAPIError, IntegrityError

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Erreur de base du moteur de stockage."""

    status_code = 500


class InvalidDataError(StoreError, ValueError):
    """Entrée mal formée : champ vide, note hors [0, 5], listes de tailles différentes."""

    status_code = 400


class ConflictError(StoreError):
    """Violation d'unicité (code de cours, nom de professeur, association en double)."""

    status_code = 409


class AlreadyGradedError(StoreError):
    """L'utilisateur a déjà noté ce couple (cours, professeur)."""

    status_code = 409

    def __init__(self, message: str = "Ce cours a déjà été noté pour ce professeur."):
        super().__init__(message)


class NotFoundError(StoreError, LookupError):
    """Aucune ligne ne correspond (professeur ou cours inexistant)."""

    status_code = 404


class IntegrityViolationError(StoreError):
    """Suppression bloquée par des notes dépendantes (cascade non demandée)."""

    status_code = 409


class BackendError(StoreError):
    """Erreur de connexion ou d'entrée/sortie avec la base."""

    status_code = 500


# SQLSTATE PostgreSQL → catégorie de contrainte
_PG_CODES = {
    "23505": "unique",
    "23503": "foreign_key",
    "23514": "check",
    "23502": "not_null",
}

# Fragments des messages SQLite → catégorie de contrainte
_SQLITE_MESSAGES = (
    ("unique constraint failed", "unique"),
    ("foreign key constraint failed", "foreign_key"),
    ("check constraint failed", "check"),
    ("not null constraint failed", "not_null"),
)


def constraint_kind(exc: IntegrityError) -> Optional[str]:
    """Retourne la catégorie de contrainte violée ('unique', 'foreign_key', 'check', 'not_null')."""
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode in _PG_CODES:
        return _PG_CODES[pgcode]

    message = str(exc.orig).lower()
    for fragment, kind in _SQLITE_MESSAGES:
        if fragment in message:
            return kind
    return None


def translate_db_error(
    exc: DBAPIError,
    message: str,
    foreign_key: Type[StoreError] = NotFoundError,
) -> StoreError:
    """
    Convertit une exception SQLAlchemy en erreur du moteur.
    `foreign_key` choisit le type levé pour une violation de clé étrangère :
    NotFoundError à l'insertion, IntegrityViolationError à la suppression.
    """
    if isinstance(exc, IntegrityError):
        kind = constraint_kind(exc)
        if kind == "unique":
            return ConflictError(f"{message} : existe déjà.")
        if kind == "foreign_key":
            if foreign_key is IntegrityViolationError:
                return foreign_key(f"{message} : des notes y font encore référence.")
            return foreign_key(f"{message} : référence inexistante.")
        if kind in ("check", "not_null"):
            return InvalidDataError(f"{message} : valeur invalide.")
        logger.warning("Contrainte non reconnue : %s", exc.orig)
        return ConflictError(message)
    return BackendError(f"{message} : {exc.orig}")
