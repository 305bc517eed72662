"""
Service de gestion des cultures
Validation des dates et de l'occupation, suivi de l'arrosage
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.agronomie.calendrier import valider_dates
from app.agronomie.occupation import Occupation
from app.agronomie.sol import alerte_secheresse, calculer_urgence, consommation_eau
from app.dependencies.resolve import check_owned_reference, check_reference
from app.models import (
    Culture,
    Espece,
    IrrigationPlanifiee,
    Itp,
    Planche,
    Recolte,
    User,
    Variete,
)
from app.services.audit import log_action
from app.services.crud import create_entity, delete_entity, drop_required_nulls, update_entity
from app.services.planche import controler_occupation, retention_planche

logger = logging.getLogger(__name__)

ETATS = ("Planifiée", "Semée", "Plantée", "En récolte", "Terminée")
CHAMPS_DATES = ("annee", "date_semis", "date_plantation", "date_recolte", "fin_recolte")
CHAMPS_OCCUPATION = ("planche_id", "nb_rangs", "espacement_rangs", "longueur", "annee")


# ── Contrôles


def _check_references(db: Session, user: User, data: dict[str, Any]) -> None:
    if "espece_id" in data and data["espece_id"] is not None:
        if db.get(Espece, data["espece_id"]) is None:
            raise HTTPException(
                status_code=400, detail=f"L'espèce '{data['espece_id']}' n'existe pas"
            )
    check_reference(db, Variete, data.get("variete_id"), "Variété")
    check_reference(db, Itp, data.get("itp_id"), "ITP")
    check_owned_reference(db, Planche, data.get("planche_id"), user, "Planche")


def _check_dates(db: Session, culture: Culture) -> list[str]:
    """Erreurs bloquantes en 400, écarts à l'ITP renvoyés comme avertissements"""
    itp = db.get(Itp, culture.itp_id) if culture.itp_id else None
    resultat = valider_dates(
        culture.annee,
        culture.date_semis,
        culture.date_plantation,
        culture.date_recolte,
        culture.fin_recolte,
        itp.semaine_semis if itp else None,
        itp.semaine_plantation if itp else None,
        itp.semaine_recolte if itp else None,
    )
    if not resultat.valide:
        raise HTTPException(status_code=400, detail=" ; ".join(resultat.erreurs))
    return resultat.avertissements


def _check_occupation(db: Session, culture: Culture) -> None:
    """Refuse une culture qui ne tient pas sur sa planche"""
    if culture.planche_id is None or culture.terminee is not None:
        return
    planche = db.get(Planche, culture.planche_id)
    if planche is None or not planche.largeur:
        return
    espacement = culture.espacement_rangs
    if espacement is None and culture.itp_id:
        itp = db.get(Itp, culture.itp_id)
        espacement = itp.espacement_rangs if itp else None
    if not culture.nb_rangs or (culture.nb_rangs > 1 and not espacement):
        return

    resultat, ajustements = controler_occupation(
        db,
        planche=planche,
        nouvelle=Occupation(
            nb_rangs=culture.nb_rangs,
            espacement_rangs=espacement or 0,
            longueur=culture.longueur,
        ),
        annee=culture.annee,
        exclure_culture_id=culture.id,
    )
    if not resultat.possible:
        raise HTTPException(
            status_code=400,
            detail={
                "message": resultat.message,
                "ajustements": [
                    {
                        "message": a.message,
                        "reduire_rangs": a.reduire_rangs,
                        "reduire_espacement": a.reduire_espacement,
                    }
                    for a in ajustements
                ],
            },
        )


def _defaults_itp(db: Session, data: dict[str, Any]) -> None:
    """Complète la densité de la culture depuis son ITP"""
    if not data.get("itp_id"):
        return
    itp = db.get(Itp, data["itp_id"])
    if itp is None:
        return
    for field in ("nb_rangs", "espacement", "espacement_rangs"):
        if data.get(field) is None and getattr(itp, field) is not None:
            data[field] = getattr(itp, field)


# ── CRUD


def list_cultures(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    annee: Optional[int] = None,
    planche_id: Optional[int] = None,
    espece_id: Optional[str] = None,
    etat: Optional[str] = None,
    search: Optional[str] = None,
) -> tuple[list[Culture], int]:
    """Liste paginée des cultures de l'utilisateur"""
    filtres = [Culture.user_id == user.id]
    if annee is not None:
        filtres.append(Culture.annee == annee)
    if planche_id is not None:
        filtres.append(Culture.planche_id == planche_id)
    if espece_id:
        filtres.append(Culture.espece_id == espece_id)

    if etat in ("en_cours", "en cours"):
        filtres.append(Culture.terminee.is_(None))
    elif etat in ("terminees", "Terminée"):
        filtres.append(Culture.terminee.is_not(None))
    elif etat == "Planifiée":
        filtres += [Culture.semis_fait == False, Culture.terminee.is_(None)]  # noqa: E712
    elif etat == "Semée":
        filtres += [
            Culture.semis_fait == True,  # noqa: E712
            Culture.plantation_faite == False,  # noqa: E712
            Culture.terminee.is_(None),
        ]
    elif etat == "Plantée":
        filtres += [
            Culture.plantation_faite == True,  # noqa: E712
            Culture.recolte_faite == False,  # noqa: E712
            Culture.terminee.is_(None),
        ]
    elif etat == "En récolte":
        filtres += [Culture.recolte_faite == True, Culture.terminee.is_(None)]  # noqa: E712

    if search:
        motif = f"%{search}%"
        filtres.append(
            or_(
                Culture.espece_id.ilike(motif),
                Culture.variete_id.ilike(motif),
                Culture.notes.ilike(motif),
                Culture.planche_id.in_(
                    select(Planche.id).where(
                        Planche.user_id == user.id, Planche.nom.ilike(motif)
                    )
                ),
            )
        )

    total = db.execute(select(func.count(Culture.id)).where(*filtres)).scalar_one()
    cultures = (
        db.execute(
            select(Culture)
            .where(*filtres)
            .order_by(Culture.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(cultures), total


def create_culture(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> tuple[Culture, list[str]]:
    """Crée une culture. Retourne (Culture, avertissements)."""
    _check_references(db, user, data)
    _defaults_itp(db, data)

    culture = Culture(user_id=user.id, **data)
    avertissements = _check_dates(db, culture)
    _check_occupation(db, culture)

    create_entity(
        db,
        culture,
        resource_type="culture",
        actor_id=user.id,
        ip_address=ip_address,
        details={"espece_id": culture.espece_id, "annee": culture.annee},
    )
    return culture, avertissements


def update_culture(
    db: Session,
    *,
    user: User,
    culture: Culture,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> tuple[Culture, list[str]]:
    """Met à jour une culture. Retourne (Culture, avertissements)."""
    _check_references(db, user, changes)

    # on controle l'etat final avant d'ecrire
    for field, value in drop_required_nulls(Culture, changes).items():
        setattr(culture, field, value)
    avertissements: list[str] = []
    if any(f in changes for f in CHAMPS_DATES + ("itp_id",)):
        avertissements = _check_dates(db, culture)
    if any(f in changes for f in CHAMPS_OCCUPATION):
        _check_occupation(db, culture)

    update_entity(
        db, culture, changes, resource_type="culture", actor_id=user.id, ip_address=ip_address
    )
    return culture, avertissements


def delete_culture(
    db: Session, *, user: User, culture: Culture, ip_address: Optional[str] = None
) -> None:
    """Supprime une culture, ses irrigations planifiées et détache ses récoltes"""
    for irrigation in db.execute(
        select(IrrigationPlanifiee).where(IrrigationPlanifiee.culture_id == culture.id)
    ).scalars():
        db.delete(irrigation)
    for recolte in db.execute(
        select(Recolte).where(Recolte.culture_id == culture.id)
    ).scalars():
        recolte.culture_id = None
    delete_entity(
        db,
        culture,
        resource_type="culture",
        actor_id=user.id,
        ip_address=ip_address,
        details={"espece_id": culture.espece_id, "annee": culture.annee},
    )


# ── Arrosage


def _jours_depuis(moment: Optional[date], maintenant: datetime) -> Optional[int]:
    if moment is None:
        return None
    if not isinstance(moment, datetime):
        moment = datetime.combine(moment, datetime.min.time())
    return (maintenant - moment).days


def cultures_a_irriguer(db: Session, *, user: User, annee: Optional[int] = None) -> dict:
    """
    Cultures en cours à arroser, avec urgence et consommation estimée

    Sont retenues les cultures non terminées de l'année marquées à irriguer
    ou dont l'espèce a un besoin en eau d'au moins 3.
    """
    annee = annee or date.today().year
    maintenant = datetime.utcnow()
    horizon = maintenant.date() + timedelta(days=7)

    cultures = (
        db.execute(
            select(Culture)
            .join(Espece, Culture.espece_id == Espece.id)
            .where(
                Culture.user_id == user.id,
                Culture.annee == annee,
                Culture.terminee.is_(None),
                or_(Culture.a_irriguer == True, Espece.besoin_eau >= 3),  # noqa: E712
            )
            .order_by(Culture.planche_id, Culture.id)
        )
        .scalars()
        .all()
    )

    prochaines = dict(
        db.execute(
            select(IrrigationPlanifiee.culture_id, func.count(IrrigationPlanifiee.id))
            .where(
                IrrigationPlanifiee.user_id == user.id,
                IrrigationPlanifiee.fait == False,  # noqa: E712
                IrrigationPlanifiee.date_prevue >= maintenant.date(),
                IrrigationPlanifiee.date_prevue <= horizon,
            )
            .group_by(IrrigationPlanifiee.culture_id)
        ).all()
    )

    items = []
    for culture in cultures:
        planche = culture.planche
        besoin = culture.espece.besoin_eau or 3
        retention = retention_planche(planche)
        jours_sans_eau = _jours_depuis(culture.derniere_irrigation, maintenant)
        age = _jours_depuis(culture.date_plantation or culture.date_semis, maintenant)

        if culture.longueur and planche is not None and planche.largeur:
            surface = culture.longueur * planche.largeur
        else:
            surface = (planche.surface if planche is not None else None) or 0

        items.append(
            {
                "id": culture.id,
                "espece_id": culture.espece_id,
                "variete_id": culture.variete_id,
                "couleur": culture.espece.couleur,
                "planche_id": culture.planche_id,
                "planche": planche.nom if planche is not None else None,
                "ilot": planche.ilot if planche is not None else None,
                "irrigation": planche.irrigation if planche is not None else None,
                "a_irriguer": culture.a_irriguer,
                "derniere_irrigation": culture.derniere_irrigation,
                "jours_sans_eau": jours_sans_eau,
                "age_jours": age,
                "jeune": age is not None and age < 14,
                "urgence": calculer_urgence(jours_sans_eau, besoin, retention),
                "consommation_eau_semaine": round(consommation_eau(surface, besoin, retention), 1),
                "alerte_secheresse": alerte_secheresse(jours_sans_eau, retention, besoin),
                "prochaines_irrigations": prochaines.get(culture.id, 0),
            }
        )

    # jamais arrosees d'abord, puis par urgence
    ordre = {"critique": 0, "haute": 1, "moyenne": 2, "faible": 3}
    items.sort(key=lambda c: (c["jours_sans_eau"] is not None, ordre[c["urgence"]]))

    par_ilot: dict[str, list] = {}
    par_type: dict[str, list] = {}
    for item in items:
        par_ilot.setdefault(item["ilot"] or "Sans ilot", []).append(item)
        par_type.setdefault(item["irrigation"] or "Non défini", []).append(item)

    stats = {
        "total": len(items),
        "nb_ilots": len(par_ilot),
        "jamais_arrose": sum(1 for c in items if c["jours_sans_eau"] is None),
        "alertes_secheresse": sum(1 for c in items if c["alerte_secheresse"]),
        "prochaines_irrigations_7j": sum(c["prochaines_irrigations"] for c in items),
        "consommation_totale_estimee": round(
            sum(c["consommation_eau_semaine"] for c in items), 1
        ),
    }
    for urgence in ordre:
        stats[urgence] = sum(1 for c in items if c["urgence"] == urgence)

    return {
        "annee": annee,
        "cultures": items,
        "par_ilot": par_ilot,
        "par_type_irrigation": par_type,
        "stats": stats,
    }


def marquer_irrigation(
    db: Session,
    *,
    user: User,
    action: str,
    culture_ids: list[int],
    ip_address: Optional[str] = None,
) -> dict:
    """Note un arrosage maintenant ou inverse le marquage à irriguer"""
    cultures = (
        db.execute(
            select(Culture).where(Culture.id.in_(culture_ids), Culture.user_id == user.id)
        )
        .scalars()
        .all()
    )
    if not cultures:
        raise HTTPException(status_code=404, detail="Culture introuvable")

    maintenant = datetime.utcnow() if action == "arroser" else None
    for culture in cultures:
        if action == "arroser":
            culture.derniere_irrigation = maintenant
        else:
            culture.a_irriguer = not culture.a_irriguer
    db.flush()

    log_action(
        db,
        user_id=user.id,
        action="UPDATE",
        resource_type="culture",
        resource_id=",".join(str(c.id) for c in cultures),
        details={"irrigation": action},
        ip_address=ip_address,
    )
    logger.info("Arrosage %s sur %d culture(s)", action, len(cultures))
    return {"action": action, "modifiees": len(cultures), "date": maintenant}
