"""
Modèle SQLAlchemy pour la table professors.
"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, func

from app.database import Base, utc_now


def new_professor_id() -> str:
    return str(uuid.uuid4())


class Professor(Base):
    __tablename__ = "professors"
    __table_args__ = (
        CheckConstraint("name <> ''", name="ck_professors_name_not_empty"),
    )

    id = Column(String(36), primary_key=True, default=new_professor_id)
    name = Column(Text, unique=True, nullable=False)
    inserted_at = Column(DateTime, default=utc_now, server_default=func.now(), index=True)
