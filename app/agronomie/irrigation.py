"""
Génération du calendrier d'arrosage d'une culture
"""

from datetime import date, timedelta
from typing import List, Optional

BESOIN_EAU_DEFAUT = 3


def frequence_arrosage(besoin_eau: Optional[int]) -> int:
    """Jours entre deux arrosages : 2 pour les espèces exigeantes, 3 sinon"""
    besoin = besoin_eau or BESOIN_EAU_DEFAUT
    return 2 if besoin >= 4 else 3


def planifier_irrigations(
    date_semis: Optional[date],
    date_plantation: Optional[date],
    date_recolte: Optional[date],
    fin_recolte: Optional[date],
    besoin_eau: Optional[int],
) -> List[date]:
    """
    Dates d'arrosage prévues pour une culture

    Le calendrier commence une période après la plantation (ou le semis à
    défaut) et s'arrête à la fin de récolte, à la récolte, ou au 31 décembre
    de l'année de départ.

    Args:
        date_semis: Date de semis
        date_plantation: Date de plantation, prioritaire sur le semis
        date_recolte: Date de début de récolte
        fin_recolte: Date de fin de récolte, prioritaire sur la récolte
        besoin_eau: Besoin en eau de l'espèce (0-5)

    Returns:
        Dates prévues, vide si la culture n'a aucune date de départ
    """
    debut = date_plantation or date_semis
    if debut is None:
        return []

    fin = fin_recolte or date_recolte or date(debut.year, 12, 31)
    pas = timedelta(days=frequence_arrosage(besoin_eau))

    dates: List[date] = []
    courante = debut + pas
    while courante <= fin:
        dates.append(courante)
        courante += pas
    return dates
