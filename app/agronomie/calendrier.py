"""
Calendrier des cultures : semaines, mois, densité et états
"""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

MOIS = [
    "Janvier",
    "Fevrier",
    "Mars",
    "Avril",
    "Mai",
    "Juin",
    "Juillet",
    "Aout",
    "Septembre",
    "Octobre",
    "Novembre",
    "Decembre",
]
MOIS_COURTS = ["Jan", "Fév", "Mar", "Avr", "Mai", "Juin", "Juil", "Août", "Sep", "Oct", "Nov", "Déc"]
TOLERANCE_ITP_JOURS = 28


def semaine_vers_mois(semaine: int) -> int:
    """Mois (1-12) contenant une semaine, à raison de 4,33 semaines par mois"""
    return min(12, max(1, math.ceil(semaine / 4.33)))


def date_semaine(annee: int, semaine: int) -> date:
    """Premier jour de la semaine N, en comptant par pas de 7 jours depuis le 1er janvier"""
    return date(annee, 1, 1) + timedelta(days=(semaine - 1) * 7)


def calculer_nb_plants(
    longueur: Optional[float], nb_rangs: Optional[int], espacement: Optional[float]
) -> int:
    """Nombre de plants : plants par rang (longueur en m, espacement en cm) x rangs"""
    if not longueur or not nb_rangs or not espacement:
        return 0
    return math.floor(longueur * 100 / espacement) * nb_rangs


def etat_culture(
    terminee: Optional[str],
    semis_fait: bool,
    plantation_faite: bool,
    recolte_faite: bool,
) -> str:
    if terminee == "x":
        return "Terminée"
    if terminee == "v":
        return "Vivace"
    if terminee == "NS":
        return "Non significative"
    if recolte_faite:
        return "En récolte"
    if plantation_faite:
        return "Plantée"
    if semis_fait:
        return "Semée"
    return "Planifiée"


def type_culture(
    vivace: bool,
    date_semis: Optional[date],
    date_plantation: Optional[date],
    date_recolte: Optional[date],
) -> str:
    if vivace:
        return "Vivace"
    if date_semis and date_plantation and date_recolte:
        return "Semis pépinière"
    if date_semis and date_recolte:
        return "Semis en place"
    if date_plantation and date_recolte:
        return "Plant"
    return "Non défini"


@dataclass
class ValidationDates:
    erreurs: List[str] = field(default_factory=list)
    avertissements: List[str] = field(default_factory=list)

    @property
    def valide(self) -> bool:
        return not self.erreurs


def valider_dates(
    annee: Optional[int],
    date_semis: Optional[date] = None,
    date_plantation: Optional[date] = None,
    date_recolte: Optional[date] = None,
    fin_recolte: Optional[date] = None,
    semaine_semis: Optional[int] = None,
    semaine_plantation: Optional[int] = None,
    semaine_recolte: Optional[int] = None,
) -> ValidationDates:
    """
    Vérifie l'ordre chronologique des dates et leur écart à l'ITP

    L'ordre semis, plantation, récolte, fin de récolte est bloquant. Un écart
    de plus de quatre semaines avec la semaine prévue par l'ITP ne produit
    qu'un avertissement.
    """
    resultat = ValidationDates()

    if date_semis and date_plantation and date_semis > date_plantation:
        resultat.erreurs.append("La date de semis doit être avant la date de plantation")
    if date_plantation and date_recolte and date_plantation > date_recolte:
        resultat.erreurs.append("La date de plantation doit être avant la date de récolte")
    if date_semis and date_recolte and not date_plantation and date_semis > date_recolte:
        resultat.erreurs.append("La date de semis doit être avant la date de récolte")
    if date_recolte and fin_recolte and date_recolte > fin_recolte:
        resultat.erreurs.append("La date de récolte doit être avant la fin de récolte")

    if annee is None:
        return resultat

    controles = [
        (date_semis, semaine_semis, "semis"),
        (date_plantation, semaine_plantation, "plantation"),
        (date_recolte, semaine_recolte, "récolte"),
    ]
    for valeur, semaine, libelle in controles:
        if valeur is None or not semaine:
            continue
        ecart = abs((valeur - date_semaine(annee, semaine)).days)
        if ecart > TOLERANCE_ITP_JOURS:
            resultat.avertissements.append(
                f"Date de {libelle} éloignée de la période ITP recommandée "
                f"(±{TOLERANCE_ITP_JOURS} jours)"
            )
    return resultat
