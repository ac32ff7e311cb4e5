"""
Schémas Pydantic pour les notes et leurs agrégats.
"""

from pydantic import BaseModel, Field, field_validator


class GradeCreate(BaseModel):
    """Note déposée par un utilisateur : trois sous-notes dans [0, 5]."""
    professor_id: str
    course_code: str
    username: str
    score_teaching: float = Field(ge=0, le=5)
    score_coursework: float = Field(ge=0, le=5)
    score_learning: float = Field(ge=0, le=5)

    @field_validator("professor_id", "course_code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le professeur et le cours sont obligatoires.")
        return v.strip()

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v: str) -> str:
        # Pas de strip : le nom exact entre dans l'empreinte
        if not v.strip():
            raise ValueError("L'utilisateur est obligatoire.")
        return v


class ScoreResponse(BaseModel):
    """Agrégat des notes d'un couple (cours, professeur)."""
    professor_id: str
    professor_name: str
    course_code: str
    course_name: str
    score_teaching: float
    score_coursework: float
    score_learning: float
    score_average: float
    count: int
