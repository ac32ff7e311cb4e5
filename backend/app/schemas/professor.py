"""
Schémas Pydantic pour les professeurs.
"""

from typing import List

from pydantic import BaseModel, field_validator


class ProfessorCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du professeur ne peut pas être vide.")
        return v.strip()


class ProfessorResponse(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class ProfessorIdResponse(BaseModel):
    id: str


class CourseProfessorAssign(BaseModel):
    """Associations professeur ↔ cours en lot (listes appariées par position)."""
    professor_ids: List[str]
    course_codes: List[str]

    @field_validator("professor_ids", "course_codes")
    @classmethod
    def no_empty_id(cls, v: List[str]) -> List[str]:
        if any(not item.strip() for item in v):
            raise ValueError("Les identifiants ne peuvent pas être vides.")
        return [item.strip() for item in v]
