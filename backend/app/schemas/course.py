"""
Schémas Pydantic pour les cours.
"""

from pydantic import BaseModel, field_validator


class CourseCreate(BaseModel):
    code: str
    name: str

    @field_validator("code", "name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code et le nom du cours ne peuvent pas être vides.")
        return v.strip()


class CourseResponse(BaseModel):
    code: str
    name: str

    model_config = {"from_attributes": True}
