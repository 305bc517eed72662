"""
Service du tableau de bord : indicateurs et séries pour les graphiques
"""

from collections import defaultdict
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.agronomie.calendrier import MOIS_COURTS
from app.models import Arbre, Culture, Espece, Famille, Planche, Recolte, User
from app.utils import round2

COULEUR_DEFAUT_ESPECE = "#22c55e"
COULEUR_AUTRE_FAMILLE = "#9ca3af"
TOP_ESPECES = 10
TOP_PLANCHES = 10
NB_TACHES = 5
TERMINEES = ("x", "v")


def _periode(annee: int) -> list:
    return [Recolte.date >= date(annee, 1, 1), Recolte.date <= date(annee, 12, 31)]


def _count(db: Session, column, *filtres) -> int:
    return db.execute(select(func.count(column)).where(*filtres)).scalar_one()


def dashboard(db: Session, *, user: User, annee: int) -> dict:
    return {
        "annee": annee,
        "stats": _stats(db, user, annee),
        "charts": {
            "recoltes_mensuelles": _recoltes_mensuelles(db, user, annee),
            "recoltes_par_espece": _recoltes_par_espece(db, user, annee),
            "cultures_par_famille": _cultures_par_famille(db, user, annee),
            "etat_cultures": _etat_cultures(db, user, annee),
            "rendement_par_planche": _rendement_par_planche(db, user, annee),
        },
        "upcoming": _taches_a_venir(db, user, annee),
    }


def _stats(db: Session, user: User, annee: int) -> dict:
    recoltes, nb_recoltes = db.execute(
        select(func.coalesce(func.sum(Recolte.quantite), 0), func.count(Recolte.id)).where(
            Recolte.user_id == user.id, *_periode(annee)
        )
    ).one()
    precedente = db.execute(
        select(func.coalesce(func.sum(Recolte.quantite), 0)).where(
            Recolte.user_id == user.id, *_periode(annee - 1)
        )
    ).scalar_one()
    surface = db.execute(
        select(func.coalesce(func.sum(Planche.surface), 0)).where(Planche.user_id == user.id)
    ).scalar_one()

    return {
        "cultures_total": _count(db, Culture.id, Culture.user_id == user.id),
        "cultures_actives": _count(
            db,
            Culture.id,
            Culture.user_id == user.id,
            Culture.annee == annee,
            Culture.terminee.is_(None),
        ),
        "planches": _count(db, Planche.id, Planche.user_id == user.id),
        "surface_totale": round2(float(surface)),
        "especes": _count(db, Espece.id),
        "arbres": _count(db, Arbre.id, Arbre.user_id == user.id),
        "recoltes_annee": round2(float(recoltes)),
        "recoltes_count": nb_recoltes,
        "recoltes_annee_precedente": round2(float(precedente)),
    }


def _recoltes_mensuelles(db: Session, user: User, annee: int) -> list[dict]:
    par_mois = [0.0] * 12
    rows = db.execute(
        select(Recolte.date, Recolte.quantite).where(Recolte.user_id == user.id, *_periode(annee))
    ).all()
    for jour, quantite in rows:
        par_mois[jour.month - 1] += quantite
    return [{"mois": nom, "quantite": round2(q)} for nom, q in zip(MOIS_COURTS, par_mois)]


def _recoltes_par_espece(db: Session, user: User, annee: int) -> list[dict]:
    total = func.sum(Recolte.quantite).label("total")
    rows = db.execute(
        select(Recolte.espece_id, total, Espece.couleur, Famille.couleur)
        .join(Espece, Espece.id == Recolte.espece_id)
        .outerjoin(Famille, Famille.id == Espece.famille_id)
        .where(Recolte.user_id == user.id, *_periode(annee))
        .group_by(Recolte.espece_id, Espece.couleur, Famille.couleur)
        .order_by(total.desc())
        .limit(TOP_ESPECES)
    ).all()
    return [
        {
            "espece": espece_id,
            "quantite": round2(quantite),
            "couleur": couleur_espece or couleur_famille or COULEUR_DEFAUT_ESPECE,
        }
        for espece_id, quantite, couleur_espece, couleur_famille in rows
    ]


def _cultures_par_famille(db: Session, user: User, annee: int) -> list[dict]:
    rows = db.execute(
        select(Espece.famille_id, Famille.couleur, func.count(Culture.id))
        .join(Espece, Espece.id == Culture.espece_id)
        .outerjoin(Famille, Famille.id == Espece.famille_id)
        .where(Culture.user_id == user.id, Culture.annee == annee)
        .group_by(Espece.famille_id, Famille.couleur)
    ).all()

    familles: dict[str, dict] = defaultdict(lambda: {"count": 0, "couleur": COULEUR_AUTRE_FAMILLE})
    for famille_id, couleur, nb in rows:
        famille = familles[famille_id or "Autre"]
        famille["count"] += nb
        if famille_id and couleur:
            famille["couleur"] = couleur
    result = [{"famille": nom, **data} for nom, data in familles.items()]
    return sorted(result, key=lambda f: f["count"], reverse=True)


def _etat_cultures(db: Session, user: User, annee: int) -> dict:
    rows = db.execute(
        select(Culture.terminee, func.count(Culture.id))
        .where(Culture.user_id == user.id, Culture.annee == annee)
        .group_by(Culture.terminee)
    ).all()
    terminees = sum(nb for terminee, nb in rows if terminee in TERMINEES)
    total = sum(nb for _, nb in rows)
    return {"en_cours": total - terminees, "terminees": terminees, "total": total}


def _rendement_par_planche(db: Session, user: User, annee: int) -> list[dict]:
    """Kilos récoltés par m2 sur les planches les plus productives"""
    total = func.sum(Recolte.quantite).label("total")
    rows = db.execute(
        select(Planche.nom, Planche.surface, total)
        .join(Culture, Culture.id == Recolte.culture_id)
        .join(Planche, Planche.id == Culture.planche_id)
        .where(Recolte.user_id == user.id, *_periode(annee))
        .group_by(Planche.id, Planche.nom, Planche.surface)
        .order_by(total.desc())
        .limit(TOP_PLANCHES)
    ).all()
    result = []
    for nom, surface, kg in rows:
        surface = surface or 1
        result.append(
            {
                "planche": nom,
                "total_kg": round2(kg),
                "surface": surface,
                "rendement": round2(kg / surface),
            }
        )
    return result


def _taches_a_venir(db: Session, user: User, annee: int) -> list[dict]:
    """Prochains semis et plantations non faits de l'année"""
    cultures = db.execute(
        select(Culture).where(
            Culture.user_id == user.id,
            Culture.annee == annee,
            ((Culture.semis_fait.is_(False)) & (Culture.date_semis.is_not(None)))
            | ((Culture.plantation_faite.is_(False)) & (Culture.date_plantation.is_not(None))),
        )
    ).scalars()

    taches = []
    for culture in cultures:
        planche = culture.planche.nom if culture.planche else None
        if not culture.semis_fait and culture.date_semis:
            taches.append(
                {
                    "culture_id": culture.id,
                    "espece_id": culture.espece_id,
                    "planche": planche,
                    "action": "semis",
                    "date": culture.date_semis,
                }
            )
        if not culture.plantation_faite and culture.date_plantation:
            taches.append(
                {
                    "culture_id": culture.id,
                    "espece_id": culture.espece_id,
                    "planche": planche,
                    "action": "plantation",
                    "date": culture.date_plantation,
                }
            )
    taches.sort(key=lambda t: (t["date"], t["culture_id"]))
    return taches[:NB_TACHES]
