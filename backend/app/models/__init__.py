# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, les FK comme scores.professor_id → professors.id échouent
# avec NoReferencedTableError si professor.py n'est pas chargé avant score.py.

from app.models.course import Course  # noqa: F401
from app.models.professor import Professor  # noqa: F401  doit précéder score
from app.models.score import Score  # noqa: F401
