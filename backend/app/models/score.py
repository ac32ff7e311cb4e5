"""
Modèle SQLAlchemy pour la table scores.

Une ligne = une note déposée par un utilisateur, identifiée par son empreinte
(jamais par le nom d'utilisateur). Une empreinte vide et des notes NULL
représentent une simple association professeur ↔ cours, sans note.
"""

from sqlalchemy import REAL, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, func, text

from app.database import Base, utc_now

# Empreinte des lignes d'association (aucun utilisateur derrière)
ASSOCIATION_FINGERPRINT = ""


class Score(Base):
    __tablename__ = "scores"
    __table_args__ = (
        CheckConstraint("score_teaching BETWEEN 0 AND 5", name="ck_scores_teaching_range"),
        CheckConstraint("score_coursework BETWEEN 0 AND 5", name="ck_scores_coursework_range"),
        CheckConstraint("score_learning BETWEEN 0 AND 5", name="ck_scores_learning_range"),
        # Une seule association non notée par couple (professeur, cours)
        Index(
            "uq_scores_association",
            "professor_id",
            "course_code",
            unique=True,
            sqlite_where=text("fingerprint = ''"),
            postgresql_where=text("fingerprint = ''"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    fingerprint = Column(Text, nullable=False, index=True)
    professor_id = Column(String(36), ForeignKey("professors.id"), nullable=False, index=True)
    course_code = Column(String(64), ForeignKey("courses.code"), nullable=False, index=True)
    score_teaching = Column(REAL, nullable=True)
    score_coursework = Column(REAL, nullable=True)
    score_learning = Column(REAL, nullable=True)
    inserted_at = Column(DateTime, default=utc_now, server_default=func.now(), index=True)
