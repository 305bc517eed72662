"""
Qualité du sol et influence sur l'irrigation
"""

from dataclasses import dataclass
from typing import Optional

URGENCES = ("critique", "haute", "moyenne", "faible")


@dataclass
class FacteursIrrigation:
    frequence: float
    quantite: float
    urgence: float


@dataclass
class QualiteSol:
    type_sol: str
    retention_eau: str
    score_retention: float
    argile: float
    limon: float
    sable: float
    ph: Optional[float] = None
    carbone_org: Optional[float] = None


def determiner_type_sol(argile: float, limon: float, sable: float) -> str:
    """Type de sol d'après le triangle textural simplifié"""
    if argile > 40:
        return "Argileux"
    if sable > 70:
        return "Sableux"
    if limon > 50:
        return "Limoneux"
    return "Mixte"


def calculer_retention_eau(argile: float, limon: float, sable: float) -> tuple[str, float]:
    """Niveau et score (0-100) de rétention en eau selon la texture"""
    score = max(0.0, min(100.0, argile * 1.2 + limon * 1.0 + sable * 0.3 - 20))
    if score < 30:
        return "Faible", score
    if score < 60:
        return "Moyenne", score
    return "Élevée", score


def analyser_sol(
    argile: float,
    limon: float,
    sable: float,
    ph: Optional[float] = None,
    carbone_org: Optional[float] = None,
) -> QualiteSol:
    niveau, score = calculer_retention_eau(argile, limon, sable)
    return QualiteSol(
        type_sol=determiner_type_sol(argile, limon, sable),
        retention_eau=niveau,
        score_retention=round(score, 1),
        argile=argile,
        limon=limon,
        sable=sable,
        ph=ph,
        carbone_org=carbone_org,
    )


def facteurs_irrigation(retention_eau: Optional[str]) -> FacteursIrrigation:
    """Multiplicateurs de fréquence, quantité et urgence d'arrosage"""
    if retention_eau == "Faible":
        return FacteursIrrigation(frequence=1.5, quantite=1.2, urgence=1.3)
    if retention_eau == "Élevée":
        return FacteursIrrigation(frequence=0.7, quantite=0.8, urgence=0.8)
    return FacteursIrrigation(frequence=1.0, quantite=1.0, urgence=1.0)


def calculer_urgence(
    jours_sans_eau: Optional[int],
    besoin_eau: int,
    retention_eau: Optional[str] = None,
) -> str:
    """
    Urgence d'arrosage ajustée selon le sol

    Une culture jamais arrosée est toujours critique. Les seuils sont plus
    bas pour les espèces exigeantes (besoin en eau >= 4).
    """
    if jours_sans_eau is None:
        return "critique"

    jours = jours_sans_eau * facteurs_irrigation(retention_eau).urgence
    exigeante = besoin_eau >= 4
    seuil_critique = 3 if exigeante else 4
    seuil_haute = 2 if exigeante else 3
    seuil_moyenne = 1 if exigeante else 2

    if jours >= seuil_critique:
        return "critique"
    if jours >= seuil_haute:
        return "haute"
    if jours >= seuil_moyenne:
        return "moyenne"
    return "faible"


def consommation_eau(
    surface: float, besoin_eau: int, retention_eau: Optional[str] = None
) -> float:
    """Consommation hebdomadaire estimée en litres"""
    if besoin_eau >= 4:
        base = 15
    elif besoin_eau >= 3:
        base = 10
    else:
        base = 5
    return surface * base * facteurs_irrigation(retention_eau).quantite


def alerte_secheresse(
    jours_sans_eau: Optional[int],
    retention_eau: Optional[str],
    besoin_eau: int,
    jours_sans_pluie: int = 0,
) -> bool:
    """Sol drainant, culture exigeante et sécheresse prolongée"""
    if retention_eau != "Faible":
        return False
    if besoin_eau < 3:
        return False
    if jours_sans_eau is None:
        return True
    return jours_sans_pluie >= 7 and jours_sans_eau >= 2
