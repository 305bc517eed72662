"""
Conseiller de rotation des cultures

Calcule, pour une planche et une année cible, l'état du sol déduit des
cultures précédentes, les familles bloquées par leur intervalle de retour,
les familles recommandées et un avis pour une espèce donnée.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

INTERVALLE_DEFAUT = 4
BESOIN_DEFAUT = 3
SEUIL_GOURMANDE = 4
FAMILLE_ENGRAIS_VERT = "Fabacées"
FAMILLES_GOURMANDES = {"Solanacées", "Cucurbitacées", "Brassicacées"}
COULEUR_DEFAUT = "#22c55e"


@dataclass
class CultureHistorique:
    """Culture passée d'une planche, telle que vue par le conseiller"""

    annee: int
    espece_id: str
    famille_id: Optional[str] = None
    famille_couleur: Optional[str] = None
    besoin_n: Optional[int] = None
    besoin_p: Optional[int] = None
    besoin_k: Optional[int] = None


@dataclass
class FamilleInfo:
    id: str
    intervalle: Optional[int] = None
    couleur: Optional[str] = None


@dataclass
class EtatSol:
    azote: str
    phosphore: str
    potassium: str
    derniere_culture_gourmande: Optional[int]
    suggestion: str


@dataclass
class FamilleBloquee:
    famille_id: str
    annee_derniere_culture: int
    intervalle: int
    annees_restantes: int
    raison: str
    couleur: Optional[str] = None


@dataclass
class FamilleRecommandee:
    famille_id: str
    score: int
    raison: str
    couleur: Optional[str] = None


@dataclass
class AvisEspece:
    espece_id: str
    niveau: str  # safe, warning, blocked
    message: str
    details: List[str] = field(default_factory=list)


@dataclass
class ConseilRotation:
    annee: int
    etat_sol: EtatSol
    familles_bloquees: List[FamilleBloquee]
    familles_recommandees: List[FamilleRecommandee]
    cultures_recentes: List[CultureHistorique]
    avis_espece: Optional[AvisEspece] = None


def _niveau(moyenne: float) -> str:
    if moyenne > 4:
        return "appauvri"
    if moyenne < 2:
        return "enrichi"
    return "normal"


def _moyenne(valeurs: List[Optional[int]]) -> float:
    return sum(BESOIN_DEFAUT if v is None else v for v in valeurs) / len(valeurs)


def calculer_etat_sol(
    cultures: List[CultureHistorique], annee_cible: int
) -> EtatSol:
    """
    Déduit l'état du sol des cultures des trois années précédant la cible

    Une moyenne de besoin supérieure à 4 signale un sol appauvri, inférieure
    à 2 un sol enrichi.

    Args:
        cultures: Historique de la planche
        annee_cible: Année pour laquelle on planifie

    Returns:
        État du sol et suggestion textuelle
    """
    recentes = [
        c for c in cultures if annee_cible - 3 <= c.annee < annee_cible
    ]
    if not recentes:
        return EtatSol(
            azote="normal",
            phosphore="normal",
            potassium="normal",
            derniere_culture_gourmande=None,
            suggestion="Pas d'historique récent - toutes les cultures sont possibles",
        )

    azote = _niveau(_moyenne([c.besoin_n for c in recentes]))
    phosphore = _niveau(_moyenne([c.besoin_p for c in recentes]))
    potassium = _niveau(_moyenne([c.besoin_k for c in recentes]))

    gourmandes = sorted(
        (c for c in recentes if (c.besoin_n or 0) >= SEUIL_GOURMANDE),
        key=lambda c: c.annee,
        reverse=True,
    )
    derniere = gourmandes[0].annee if gourmandes else None

    if azote == "appauvri":
        suggestion = (
            "Sol appauvri en azote - privilégiez les légumineuses (Fabacées) "
            "pour régénérer"
        )
    elif azote == "enrichi":
        suggestion = (
            "Sol riche en azote - idéal pour les cultures gourmandes "
            "(Solanacées, Cucurbitacées)"
        )
    else:
        suggestion = "Sol équilibré - continuez les rotations variées"

    return EtatSol(
        azote=azote,
        phosphore=phosphore,
        potassium=potassium,
        derniere_culture_gourmande=derniere,
        suggestion=suggestion,
    )


def _dernieres_annees(cultures: List[CultureHistorique]) -> Dict[str, int]:
    """Dernière année d'utilisation de chaque famille"""
    dernieres: Dict[str, int] = {}
    for c in cultures:
        if not c.famille_id:
            continue
        if c.famille_id not in dernieres or c.annee > dernieres[c.famille_id]:
            dernieres[c.famille_id] = c.annee
    return dernieres


def calculer_familles_bloquees(
    cultures: List[CultureHistorique],
    familles: Dict[str, FamilleInfo],
    annee_cible: int,
) -> List[FamilleBloquee]:
    """
    Liste les familles qui ne peuvent pas revenir sur la planche

    Une famille est bloquée tant que sa dernière année d'utilisation plus
    son intervalle dépasse l'année cible.

    Returns:
        Familles bloquées, les plus longues à attendre en premier
    """
    bloquees: List[FamilleBloquee] = []
    for famille_id, derniere in _dernieres_annees(cultures).items():
        info = familles.get(famille_id)
        intervalle = INTERVALLE_DEFAUT
        if info is not None and info.intervalle is not None:
            intervalle = info.intervalle
        restantes = derniere + intervalle - annee_cible
        if restantes > 0:
            bloquees.append(
                FamilleBloquee(
                    famille_id=famille_id,
                    annee_derniere_culture=derniere,
                    intervalle=intervalle,
                    annees_restantes=restantes,
                    raison=f"{famille_id} planté en {derniere}, attendre {derniere + intervalle}",
                    couleur=info.couleur if info else None,
                )
            )
    bloquees.sort(key=lambda b: b.annees_restantes, reverse=True)
    return bloquees


def calculer_familles_recommandees(
    cultures: List[CultureHistorique],
    familles: Dict[str, FamilleInfo],
    annee_cible: int,
    etat_sol: EtatSol,
    bloquees: List[FamilleBloquee],
) -> List[FamilleRecommandee]:
    """
    Classe les familles autorisées par un score de 0 à 100

    Le score croît de 15 points par année d'absence. Une famille jamais
    cultivée sur la planche vaut 80. Sur sol appauvri en azote les Fabacées
    passent en tête, sur sol enrichi les familles gourmandes gagnent 10.

    Returns:
        Familles recommandées par score décroissant
    """
    ids_bloques = {b.famille_id for b in bloquees}
    dernieres = _dernieres_annees(cultures)
    recommandees: List[FamilleRecommandee] = []

    engrais_vert_ajoute = False
    if etat_sol.azote == "appauvri" and FAMILLE_ENGRAIS_VERT not in ids_bloques:
        info = familles.get(FAMILLE_ENGRAIS_VERT)
        recommandees.append(
            FamilleRecommandee(
                famille_id=FAMILLE_ENGRAIS_VERT,
                score=95,
                raison="Fixe l'azote - idéal après cultures gourmandes",
                couleur=(info.couleur if info and info.couleur else COULEUR_DEFAUT),
            )
        )
        engrais_vert_ajoute = True

    for famille_id, info in familles.items():
        if famille_id in ids_bloques:
            continue
        if engrais_vert_ajoute and famille_id == FAMILLE_ENGRAIS_VERT:
            continue

        derniere = dernieres.get(famille_id)
        if derniere is None:
            score = 80
            raison = "Jamais utilisé sur cette planche"
        else:
            depuis = annee_cible - derniere
            score = min(100, depuis * 15)
            if depuis >= 5:
                raison = f"Non utilisé depuis {depuis} ans"
            else:
                raison = f"Dernière utilisation en {derniere}"

        if etat_sol.azote == "enrichi" and famille_id in FAMILLES_GOURMANDES:
            score = min(100, score + 10)
            raison += " - sol riche, idéal"

        recommandees.append(
            FamilleRecommandee(
                famille_id=famille_id,
                score=score,
                raison=raison,
                couleur=info.couleur,
            )
        )

    # tri stable : les Fabacées a 95 restent devant les ex aequo
    recommandees.sort(key=lambda r: r.score, reverse=True)
    return recommandees


def evaluer_espece(
    espece_id: str,
    famille_id: Optional[str],
    besoin_n: Optional[int],
    etat_sol: EtatSol,
    bloquees: List[FamilleBloquee],
) -> AvisEspece:
    """Avis sur la plantation d'une espèce précise pour l'année cible"""
    bloquee = next((b for b in bloquees if b.famille_id == famille_id), None)
    if bloquee is not None:
        return AvisEspece(
            espece_id=espece_id,
            niveau="blocked",
            message=f"Rotation non respectée pour {famille_id}",
            details=[
                f"Dernière culture de {famille_id} en {bloquee.annee_derniere_culture}",
                f"Intervalle requis : {bloquee.intervalle} ans",
                f"Attendre jusqu'en {bloquee.annee_derniere_culture + bloquee.intervalle}",
            ],
        )

    gourmande = (besoin_n or 0) >= SEUIL_GOURMANDE
    if gourmande and etat_sol.azote == "appauvri":
        return AvisEspece(
            espece_id=espece_id,
            niveau="warning",
            message="Culture gourmande sur sol appauvri",
            details=[
                f"{espece_id} a un besoin élevé en azote ({besoin_n}/5)",
                "Le sol est estimé appauvri en azote",
                "Envisagez une fertilisation ou une légumineuse avant",
            ],
        )

    details = ["Rotation respectée"]
    if famille_id:
        details.append(f"Famille : {famille_id}")
    if etat_sol.azote == "enrichi" and gourmande:
        details.append("Sol riche en azote - conditions idéales")
    return AvisEspece(
        espece_id=espece_id,
        niveau="safe",
        message="Culture recommandée",
        details=details,
    )


def conseiller_rotation(
    cultures: List[CultureHistorique],
    familles: List[FamilleInfo],
    annee_cible: int,
    espece: Optional[CultureHistorique] = None,
) -> ConseilRotation:
    """
    Point d'entrée du conseiller de rotation

    Args:
        cultures: Historique de la planche (toutes années)
        familles: Référentiel des familles botaniques
        annee_cible: Année à planifier
        espece: Espèce envisagée (annee ignorée), pour obtenir un avis

    Returns:
        Conseil complet pour la planche
    """
    index_familles = {f.id: f for f in familles}
    etat_sol = calculer_etat_sol(cultures, annee_cible)
    bloquees = calculer_familles_bloquees(cultures, index_familles, annee_cible)
    recommandees = calculer_familles_recommandees(
        cultures, index_familles, annee_cible, etat_sol, bloquees
    )
    recentes = sorted(
        (c for c in cultures if c.annee >= annee_cible - 5),
        key=lambda c: c.annee,
        reverse=True,
    )

    avis = None
    if espece is not None:
        avis = evaluer_espece(
            espece.espece_id, espece.famille_id, espece.besoin_n, etat_sol, bloquees
        )

    return ConseilRotation(
        annee=annee_cible,
        etat_sol=etat_sol,
        familles_bloquees=bloquees,
        familles_recommandees=recommandees,
        cultures_recentes=recentes,
        avis_espece=avis,
    )
