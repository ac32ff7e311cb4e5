"""
Calcul de la moyenne des notes (enseignement, travaux, apprentissage).
"""

from decimal import ROUND_HALF_UP, Decimal

ROUND_PRECISION = 2

QUANTIZER_2DP = Decimal(1).scaleb(-ROUND_PRECISION)


def average_score(*scores: float) -> float:
    """
    Moyenne arithmétique arrondie à 2 décimales (arrondi au demi supérieur).
    Le calcul passe par Decimal(str(x)) pour éviter les artefacts binaires :
    average_score(0.105, 0.105, 0.105) vaut 0.11 et non 0.1.
    """
    if not scores:
        raise ValueError("Au moins une note est requise pour calculer une moyenne.")
    total = sum(Decimal(str(s)) for s in scores)
    avg = total / Decimal(len(scores))
    return float(avg.quantize(QUANTIZER_2DP, rounding=ROUND_HALF_UP))


def round_score(score: float) -> float:
    """Arrondit une sous-note moyenne à 2 décimales, même règle que average_score()."""
    return average_score(score)
