"""
Modèle SQLAlchemy pour la table courses.
Le code du cours sert de clé primaire ; le couple (code, nom) est unique.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, UniqueConstraint, func

from app.database import Base, utc_now


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("code <> ''", name="ck_courses_code_not_empty"),
        CheckConstraint("name <> ''", name="ck_courses_name_not_empty"),
        UniqueConstraint("code", "name", name="uq_courses_code_name"),
    )

    code = Column(String(64), primary_key=True, nullable=False)
    name = Column(Text, nullable=False)
    inserted_at = Column(DateTime, default=utc_now, server_default=func.now(), index=True)
