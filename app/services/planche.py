"""
Service de gestion des planches
CRUD, historique des cultures, conseils de rotation, occupation et sol
"""

from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.agronomie.occupation import (
    Occupation,
    ResultatOccupation,
    peut_ajouter_culture,
    suggerer_ajustements,
)
from app.agronomie.rotation import (
    ConseilRotation,
    CultureHistorique,
    FamilleInfo,
    conseiller_rotation,
)
from app.agronomie.sol import analyser_sol, facteurs_irrigation
from app.dependencies.resolve import check_owned_reference
from app.models import Culture, Espece, Famille, Planche, Rotation, User
from app.services.crud import create_entity, delete_entity, update_entity


def _surface(largeur: Optional[float], longueur: Optional[float]) -> Optional[float]:
    if largeur is None or longueur is None:
        return None
    return round(largeur * longueur, 2)


def _check_nom(db: Session, user: User, nom: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Planche).where(Planche.user_id == user.id, Planche.nom == nom)
    if exclude_id is not None:
        stmt = stmt.where(Planche.id != exclude_id)
    if db.execute(stmt).scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Planche '{nom}' existe déjà")


# ── CRUD


def list_planches(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    ilot: Optional[str] = None,
    type_planche: Optional[str] = None,
    search: Optional[str] = None,
) -> tuple[list[Planche], int]:
    """Liste paginée des planches de l'utilisateur"""
    filtres = [Planche.user_id == user.id]
    if ilot:
        filtres.append(Planche.ilot == ilot)
    if type_planche:
        filtres.append(Planche.type == type_planche)
    if search:
        filtres.append(Planche.nom.ilike(f"%{search}%"))

    total = db.execute(select(func.count(Planche.id)).where(*filtres)).scalar_one()
    planches = (
        db.execute(
            select(Planche).where(*filtres).order_by(Planche.nom).offset(offset).limit(limit)
        )
        .scalars()
        .all()
    )
    return list(planches), total


def create_planche(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Planche:
    _check_nom(db, user, data["nom"])
    check_owned_reference(db, Rotation, data.get("rotation_id"), user, "Rotation")

    planche = Planche(user_id=user.id, **data)
    planche.surface = _surface(planche.largeur, planche.longueur)
    return create_entity(
        db,
        planche,
        resource_type="planche",
        actor_id=user.id,
        ip_address=ip_address,
        details={"nom": planche.nom},
    )


def update_planche(
    db: Session,
    *,
    user: User,
    planche: Planche,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Planche:
    if changes.get("nom") and changes["nom"] != planche.nom:
        _check_nom(db, user, changes["nom"], exclude_id=planche.id)
    check_owned_reference(db, Rotation, changes.get("rotation_id"), user, "Rotation")

    largeur = changes.get("largeur", planche.largeur)
    longueur = changes.get("longueur", planche.longueur)
    changes["surface"] = _surface(largeur, longueur)
    return update_entity(
        db, planche, changes, resource_type="planche", actor_id=user.id, ip_address=ip_address
    )


def delete_planche(
    db: Session, *, user: User, planche: Planche, ip_address: Optional[str] = None
) -> None:
    nb = db.execute(
        select(func.count(Culture.id)).where(Culture.planche_id == planche.id)
    ).scalar_one()
    if nb:
        raise HTTPException(
            status_code=409,
            detail=f"Planche '{planche.nom}' utilisée par {nb} culture(s)",
        )
    delete_entity(
        db,
        planche,
        resource_type="planche",
        actor_id=user.id,
        ip_address=ip_address,
        details={"nom": planche.nom},
    )


# ── Historique


def planche_history(db: Session, *, user: User, planche: Planche, years: int = 10) -> dict:
    """Cultures des N dernières années sur la planche, avec leurs récoltes"""
    annee_courante = date.today().year
    annee_min = annee_courante - years

    cultures = (
        db.execute(
            select(Culture)
            .where(
                Culture.planche_id == planche.id,
                Culture.user_id == user.id,
                Culture.annee >= annee_min,
            )
            .order_by(Culture.annee.desc(), Culture.date_plantation.desc())
        )
        .scalars()
        .all()
    )

    historique = []
    for culture in cultures:
        famille = culture.espece.famille if culture.espece else None
        recoltes = [{"date": r.date, "quantite": r.quantite} for r in culture.recoltes]
        historique.append(
            {
                "id": culture.id,
                "annee": culture.annee or annee_courante,
                "espece_id": culture.espece_id,
                "variete_id": culture.variete_id,
                "famille_id": famille.id if famille else None,
                "famille_couleur": famille.couleur if famille else None,
                "date_semis": culture.date_semis,
                "date_plantation": culture.date_plantation,
                "date_recolte": culture.date_recolte,
                "terminee": culture.terminee,
                "etat": culture.etat,
                "recoltes": recoltes,
                "total_recolte": sum(r["quantite"] for r in recoltes),
            }
        )

    annees = sorted({c["annee"] for c in historique}, reverse=True)
    return {"planche": planche.nom, "cultures": historique, "annees_disponibles": annees}


# ── Conseils de rotation


def rotation_advice(
    db: Session,
    *,
    user: User,
    planche: Planche,
    annee: Optional[int] = None,
    espece_id: Optional[str] = None,
) -> dict:
    """Conseils de rotation pour une planche et une année cible"""
    annee_cible = annee or date.today().year

    cultures = (
        db.execute(
            select(Culture).where(
                Culture.planche_id == planche.id,
                Culture.user_id == user.id,
                Culture.annee >= annee_cible - 10,
            )
        )
        .scalars()
        .all()
    )
    historique = []
    for culture in cultures:
        espece = culture.espece
        historique.append(
            CultureHistorique(
                annee=culture.annee or annee_cible,
                espece_id=culture.espece_id,
                famille_id=espece.famille_id,
                famille_couleur=espece.famille.couleur if espece.famille else None,
                besoin_n=espece.besoin_n,
                besoin_p=espece.besoin_p,
                besoin_k=espece.besoin_k,
            )
        )

    familles = [
        FamilleInfo(id=f.id, intervalle=f.intervalle, couleur=f.couleur)
        for f in db.execute(select(Famille)).scalars().all()
    ]

    a_verifier = None
    if espece_id:
        espece = db.get(Espece, espece_id)
        if espece:
            a_verifier = CultureHistorique(
                annee=annee_cible,
                espece_id=espece.id,
                famille_id=espece.famille_id,
                besoin_n=espece.besoin_n,
            )

    conseil: ConseilRotation = conseiller_rotation(historique, familles, annee_cible, a_verifier)
    return {
        "planche": planche.nom,
        "annee": conseil.annee,
        "etat_sol": conseil.etat_sol,
        "familles_bloquees": conseil.familles_bloquees,
        "familles_recommandees": conseil.familles_recommandees,
        "cultures_recentes": conseil.cultures_recentes,
        "avis_espece": conseil.avis_espece,
    }


# ── Occupation


def _occupation_culture(culture: Culture) -> Occupation:
    espacement = culture.espacement_rangs
    if espacement is None and culture.itp is not None:
        espacement = culture.itp.espacement_rangs
    return Occupation(
        nb_rangs=culture.nb_rangs or 1,
        espacement_rangs=espacement or 0,
        longueur=culture.longueur,
    )


def controler_occupation(
    db: Session,
    *,
    planche: Planche,
    nouvelle: Occupation,
    annee: Optional[int] = None,
    exclure_culture_id: Optional[int] = None,
) -> tuple[ResultatOccupation, list]:
    """
    Confronte une culture envisagée aux cultures en cours sur la planche

    Les cultures en cours sont celles de la même année non terminées.
    Retourne le résultat du validateur et les ajustements proposés en cas de refus.
    """
    annee = annee or date.today().year
    stmt = select(Culture).where(
        Culture.planche_id == planche.id,
        Culture.annee == annee,
        Culture.terminee.is_(None),
    )
    if exclure_culture_id is not None:
        stmt = stmt.where(Culture.id != exclure_culture_id)
    existantes = [_occupation_culture(c) for c in db.execute(stmt).scalars().all()]

    largeur = planche.largeur or 0
    longueur = planche.longueur or 0
    resultat = peut_ajouter_culture(largeur, longueur, existantes, nouvelle)
    ajustements = []
    if not resultat.possible:
        ajustements = suggerer_ajustements(largeur, longueur, existantes, nouvelle)
    return resultat, ajustements


def verifier_occupation(db: Session, *, planche: Planche, data: dict[str, Any]) -> dict:
    resultat, ajustements = controler_occupation(
        db,
        planche=planche,
        nouvelle=Occupation(
            nb_rangs=data["nb_rangs"],
            espacement_rangs=data["espacement_rangs"],
            longueur=data.get("longueur"),
        ),
        annee=data.get("annee"),
        exclure_culture_id=data.get("exclure_culture_id"),
    )
    return {
        "possible": resultat.possible,
        "largeur_planche": planche.largeur or 0,
        "largeur_disponible": round(resultat.largeur_disponible, 2),
        "largeur_necessaire": round(resultat.largeur_necessaire, 2),
        "largeur_occupee": round(resultat.largeur_occupee, 2),
        "message": resultat.message,
        "ajustements": ajustements,
    }


# ── Sol


def analyse_sol(planche: Planche) -> dict:
    """Analyse de texture du sol, la rétention saisie sur la planche est prioritaire"""
    analyse = None
    if None not in (planche.argile, planche.limon, planche.sable):
        analyse = analyser_sol(
            planche.argile, planche.limon, planche.sable, planche.ph_sol, planche.carbone_org
        )

    retention = planche.retention_eau or (analyse.retention_eau if analyse else None)
    facteurs = facteurs_irrigation(retention)
    return {
        "planche": planche.nom,
        "type_sol": planche.type_sol or (analyse.type_sol if analyse else None),
        "retention_eau": retention,
        "score_retention": analyse.score_retention if analyse else None,
        "argile": planche.argile,
        "limon": planche.limon,
        "sable": planche.sable,
        "ph": planche.ph_sol,
        "carbone_org": planche.carbone_org,
        "frequence": facteurs.frequence,
        "quantite": facteurs.quantite,
        "urgence": facteurs.urgence,
    }


def retention_planche(planche: Optional[Planche]) -> Optional[str]:
    """Rétention en eau d'une planche : saisie, sinon déduite de la texture"""
    if planche is None:
        return None
    if planche.retention_eau:
        return planche.retention_eau
    if None in (planche.argile, planche.limon, planche.sable):
        return None
    return analyser_sol(planche.argile, planche.limon, planche.sable).retention_eau
