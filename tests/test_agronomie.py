"""
Tests des calculs agronomiques purs (sans base de données)
"""

from datetime import date

import pytest

from app.agronomie.calendrier import (
    calculer_nb_plants,
    date_semaine,
    etat_culture,
    semaine_vers_mois,
    type_culture,
    valider_dates,
)
from app.agronomie.irrigation import frequence_arrosage, planifier_irrigations
from app.agronomie.occupation import (
    Occupation,
    largeur_occupee,
    peut_ajouter_culture,
    suggerer_ajustements,
)
from app.agronomie.rotation import (
    CultureHistorique,
    FamilleInfo,
    calculer_etat_sol,
    conseiller_rotation,
)
from app.agronomie.sol import (
    alerte_secheresse,
    analyser_sol,
    calculer_urgence,
    consommation_eau,
    determiner_type_sol,
)


# ── Calendrier


@pytest.mark.parametrize("semaine,mois", [(1, 1), (4, 1), (5, 2), (22, 6), (52, 12)])
def test_semaine_vers_mois(semaine, mois):
    assert semaine_vers_mois(semaine) == mois


def test_date_semaine():
    assert date_semaine(2025, 1) == date(2025, 1, 1)
    assert date_semaine(2025, 10) == date(2025, 3, 5)


def test_calculer_nb_plants():
    # 10 m, espacement 50 cm : 20 plants par rang
    assert calculer_nb_plants(10, 2, 50) == 40
    assert calculer_nb_plants(None, 2, 50) == 0


def test_etat_culture_priorites():
    assert etat_culture("x", True, True, True) == "Terminée"
    assert etat_culture(None, True, True, True) == "En récolte"
    assert etat_culture(None, True, False, False) == "Semée"
    assert etat_culture(None, False, False, False) == "Planifiée"


def test_type_culture():
    d = date(2025, 4, 1)
    assert type_culture(True, None, None, None) == "Vivace"
    assert type_culture(False, d, d, d) == "Semis pépinière"
    assert type_culture(False, d, None, d) == "Semis en place"
    assert type_culture(False, None, d, d) == "Plant"


def test_valider_dates_ordre():
    resultat = valider_dates(
        2025, date_plantation=date(2025, 6, 1), date_recolte=date(2025, 5, 1)
    )
    assert not resultat.valide
    assert resultat.erreurs == ["La date de plantation doit être avant la date de récolte"]


def test_valider_dates_ecart_itp():
    """Quatre semaines de tolérance autour de la semaine ITP"""
    proche = valider_dates(2025, date_semis=date(2025, 3, 20), semaine_semis=10)
    loin = valider_dates(2025, date_semis=date(2025, 5, 1), semaine_semis=10)
    assert proche.avertissements == []
    assert len(loin.avertissements) == 1
    assert loin.valide


# ── Irrigation


def test_frequence_arrosage():
    assert frequence_arrosage(5) == 2
    assert frequence_arrosage(None) == 3


def test_planifier_irrigations_jusqu_a_fin_d_annee():
    dates = planifier_irrigations(date(2025, 12, 20), None, None, None, 2)
    assert dates == [date(2025, 12, 23), date(2025, 12, 26), date(2025, 12, 29)]


def test_planifier_irrigations_sans_depart():
    assert planifier_irrigations(None, None, date(2025, 7, 1), None, 3) == []


# ── Occupation


def test_largeur_occupee():
    assert largeur_occupee(Occupation(nb_rangs=1, espacement_rangs=30)) == 0.1
    assert largeur_occupee(Occupation(nb_rangs=3, espacement_rangs=30)) == pytest.approx(0.6)


def test_culture_trop_longue():
    resultat = peut_ajouter_culture(
        1.2, 10, [], Occupation(nb_rangs=1, espacement_rangs=30, longueur=12)
    )
    assert not resultat.possible
    assert resultat.message.startswith("Longueur de culture (12m)")


def test_suggestion_rangs_puis_espacement():
    existantes = [Occupation(nb_rangs=2, espacement_rangs=40)]
    nouvelle = Occupation(nb_rangs=3, espacement_rangs=40)
    ajustements = suggerer_ajustements(1.25, 10, existantes, nouvelle)
    assert [a.reduire_rangs for a in ajustements] == [2, None]
    assert ajustements[1].reduire_espacement == 30


def test_suggestion_autre_planche():
    existantes = [Occupation(nb_rangs=2, espacement_rangs=60)]
    ajustements = suggerer_ajustements(0.8, 10, existantes, Occupation(2, 30))
    assert len(ajustements) == 1
    assert ajustements[0].reduire_rangs is None
    assert "planche" in ajustements[0].message


# ── Sol


def test_determiner_type_sol():
    assert determiner_type_sol(45, 30, 25) == "Argileux"
    assert determiner_type_sol(5, 15, 80) == "Sableux"
    assert determiner_type_sol(20, 60, 20) == "Limoneux"
    assert determiner_type_sol(30, 40, 30) == "Mixte"


def test_analyser_sol_sableux():
    qualite = analyser_sol(5, 15, 80)
    assert qualite.retention_eau == "Faible"
    assert qualite.score_retention == 25.0


def test_urgence_selon_sol():
    """Le sol module les seuils d'urgence"""
    assert calculer_urgence(2, 3, None) == "moyenne"
    assert calculer_urgence(3, 3, "Faible") == "haute"
    assert calculer_urgence(4, 3, None) == "critique"
    assert calculer_urgence(4, 3, "Élevée") == "haute"
    assert calculer_urgence(None, 1) == "critique"


def test_consommation_eau():
    assert consommation_eau(10, 4) == 150
    assert consommation_eau(10, 2, "Élevée") == pytest.approx(40)


def test_alerte_secheresse():
    assert alerte_secheresse(None, "Faible", 3)
    assert not alerte_secheresse(None, "Moyenne", 5)
    assert alerte_secheresse(2, "Faible", 4, jours_sans_pluie=7)
    assert not alerte_secheresse(2, "Faible", 4, jours_sans_pluie=3)


# ── Rotation


def test_etat_sol_enrichi():
    cultures = [CultureHistorique(annee=2024, espece_id="Haricot", besoin_n=1, besoin_p=1, besoin_k=1)]
    etat = calculer_etat_sol(cultures, 2025)
    assert etat.azote == "enrichi"
    assert etat.derniere_culture_gourmande is None


def test_conseil_sol_riche_favorise_les_gourmandes():
    familles = [FamilleInfo(id="Solanacées", intervalle=4), FamilleInfo(id="Fabacées", intervalle=3)]
    cultures = [
        CultureHistorique(annee=2024, espece_id="Haricot", famille_id="Fabacées", besoin_n=1)
    ]
    conseil = conseiller_rotation(
        cultures,
        familles,
        2025,
        CultureHistorique(annee=0, espece_id="Tomate", famille_id="Solanacées", besoin_n=5),
    )
    assert [b.famille_id for b in conseil.familles_bloquees] == ["Fabacées"]
    assert conseil.familles_recommandees[0].famille_id == "Solanacées"
    assert conseil.familles_recommandees[0].score == 90
    assert conseil.avis_espece.niveau == "safe"
    assert "Sol riche en azote - conditions idéales" in conseil.avis_espece.details


def test_famille_sans_intervalle_connu():
    """Une famille absente du référentiel est bloquée quatre ans"""
    cultures = [CultureHistorique(annee=2023, espece_id="X", famille_id="Inconnues")]
    conseil = conseiller_rotation(cultures, [], 2025)
    assert conseil.familles_bloquees[0].annees_restantes == 2


def test_avis_gourmande_sur_sol_appauvri():
    """Trois ans de Solanacées : sol appauvri, Fabacées en tête, avis warning pour une courge"""
    familles = [
        FamilleInfo(id="Solanacées", intervalle=4),
        FamilleInfo(id="Cucurbitacées", intervalle=3),
        FamilleInfo(id="Fabacées", intervalle=3, couleur="#84cc16"),
    ]
    cultures = [
        CultureHistorique(annee=annee, espece_id="Tomate", famille_id="Solanacées", besoin_n=5)
        for annee in (2022, 2023, 2024)
    ]
    conseil = conseiller_rotation(
        cultures,
        familles,
        2025,
        CultureHistorique(annee=0, espece_id="Courge", famille_id="Cucurbitacées", besoin_n=5),
    )
    assert conseil.etat_sol.azote == "appauvri"
    assert conseil.etat_sol.derniere_culture_gourmande == 2024
    assert [(r.famille_id, r.score) for r in conseil.familles_recommandees] == [
        ("Fabacées", 95),
        ("Cucurbitacées", 80),
    ]
    assert conseil.avis_espece.niveau == "warning"
    assert conseil.avis_espece.message == "Culture gourmande sur sol appauvri"
    assert "Courge a un besoin élevé en azote (5/5)" in conseil.avis_espece.details


def test_score_selon_annees_d_absence():
    """15 points par année d'absence, plafonnés à 100"""
    familles = [
        FamilleInfo(id="Alliacées", intervalle=3),
        FamilleInfo(id="Apiacées", intervalle=2),
    ]
    cultures = [
        CultureHistorique(annee=2018, espece_id="Oignon", famille_id="Alliacées"),
        CultureHistorique(annee=2022, espece_id="Carotte", famille_id="Apiacées"),
    ]
    conseil = conseiller_rotation(cultures, familles, 2025)
    assert conseil.familles_bloquees == []
    recommandees = {r.famille_id: r for r in conseil.familles_recommandees}
    assert recommandees["Alliacées"].score == 100
    assert recommandees["Alliacées"].raison == "Non utilisé depuis 7 ans"
    assert recommandees["Apiacées"].score == 45
    assert recommandees["Apiacées"].raison == "Dernière utilisation en 2022"
