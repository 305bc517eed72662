"""
Validation de l'occupation des planches
Vérifie qu'une nouvelle culture tient en largeur et en longueur sur une
planche déjà partiellement occupée.
"""

from dataclasses import dataclass, replace
from typing import List, Optional

LARGEUR_MINIMALE = 0.1  # un rang seul occupe au moins 10 cm
MARGE = 0.2  # 10 cm de chaque côté
ESPACEMENTS_TESTES = [40, 35, 30, 25, 20, 15]


@dataclass
class Occupation:
    """Emprise d'une culture : rangs, espacement entre rangs (cm), longueur (m)"""

    nb_rangs: int
    espacement_rangs: float
    longueur: Optional[float] = None


@dataclass
class ResultatOccupation:
    possible: bool
    largeur_disponible: float
    largeur_necessaire: float
    largeur_occupee: float
    message: Optional[str] = None


@dataclass
class Ajustement:
    message: str
    reduire_rangs: Optional[int] = None
    reduire_espacement: Optional[int] = None


def _fmt(valeur: float) -> str:
    return f"{valeur:g}"


def largeur_occupee(culture: Occupation) -> float:
    """Largeur en mètres occupée par les rangs d'une culture"""
    if not culture.nb_rangs or culture.nb_rangs <= 1:
        return LARGEUR_MINIMALE
    return (culture.nb_rangs - 1) * culture.espacement_rangs / 100


def peut_ajouter_culture(
    largeur_planche: float,
    longueur_planche: float,
    existantes: List[Occupation],
    nouvelle: Occupation,
) -> ResultatOccupation:
    """
    Vérifie si une culture peut être ajoutée à une planche

    Args:
        largeur_planche: Largeur de la planche en mètres
        longueur_planche: Longueur de la planche en mètres
        existantes: Cultures en place sur la planche
        nouvelle: Culture à ajouter

    Returns:
        Résultat avec les largeurs calculées et un message en cas de refus
    """
    if nouvelle.longueur and nouvelle.longueur > longueur_planche:
        return ResultatOccupation(
            possible=False,
            largeur_disponible=0,
            largeur_necessaire=0,
            largeur_occupee=0,
            message=(
                f"Longueur de culture ({_fmt(nouvelle.longueur)}m) supérieure "
                f"à la longueur de la planche ({_fmt(longueur_planche)}m)"
            ),
        )

    occupee = sum(largeur_occupee(c) for c in existantes)
    necessaire = largeur_occupee(nouvelle)
    disponible = largeur_planche - occupee - MARGE
    possible = necessaire <= disponible

    message = None
    if not possible:
        manque = necessaire - disponible
        message = (
            f"Largeur insuffisante : besoin de {necessaire:.2f}m, "
            f"disponible {disponible:.2f}m (manque {manque:.2f}m)"
        )

    return ResultatOccupation(
        possible=possible,
        largeur_disponible=disponible,
        largeur_necessaire=necessaire,
        largeur_occupee=occupee,
        message=message,
    )


def suggerer_ajustements(
    largeur_planche: float,
    longueur_planche: float,
    existantes: List[Occupation],
    nouvelle: Occupation,
) -> List[Ajustement]:
    """
    Propose des ajustements pour faire tenir une culture refusée

    On cherche d'abord le plus grand nombre de rangs qui passe, puis le plus
    grand espacement standard inférieur à l'actuel. Si rien ne passe, on
    conseille une autre planche.
    """
    suggestions: List[Ajustement] = []
    if peut_ajouter_culture(largeur_planche, longueur_planche, existantes, nouvelle).possible:
        return suggestions

    for rangs in range(nouvelle.nb_rangs - 1, 0, -1):
        essai = replace(nouvelle, nb_rangs=rangs)
        if peut_ajouter_culture(largeur_planche, longueur_planche, existantes, essai).possible:
            pluriel = "s" if rangs > 1 else ""
            suggestions.append(
                Ajustement(
                    reduire_rangs=rangs,
                    message=f"Réduire à {rangs} rang{pluriel} (au lieu de {nouvelle.nb_rangs})",
                )
            )
            break

    for espacement in ESPACEMENTS_TESTES:
        if espacement >= nouvelle.espacement_rangs:
            continue
        essai = replace(nouvelle, espacement_rangs=espacement)
        if peut_ajouter_culture(largeur_planche, longueur_planche, existantes, essai).possible:
            suggestions.append(
                Ajustement(
                    reduire_espacement=espacement,
                    message=(
                        f"Réduire l'espacement à {espacement}cm "
                        f"(au lieu de {_fmt(nouvelle.espacement_rangs)}cm)"
                    ),
                )
            )
            break

    if not suggestions:
        suggestions.append(
            Ajustement(message="Utiliser une planche plus large ou créer une nouvelle planche")
        )
    return suggestions
