"""
Service des irrigations planifiées
CRUD et génération du calendrier d'arrosage des cultures d'une année
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import delete as sql_delete
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.agronomie.irrigation import planifier_irrigations
from app.dependencies.resolve import check_owned_reference
from app.models import Culture, IrrigationPlanifiee, User
from app.services.audit import log_action
from app.services.crud import create_entity, delete_entity, update_entity

logger = logging.getLogger(__name__)


def _marquer_fait(irrigation: IrrigationPlanifiee, culture: Culture) -> None:
    """Un arrosage fait met à jour la dernière irrigation de la culture"""
    if irrigation.date_effective is None:
        irrigation.date_effective = datetime.utcnow()
    if (
        culture.derniere_irrigation is None
        or irrigation.date_effective > culture.derniere_irrigation
    ):
        culture.derniere_irrigation = irrigation.date_effective


# ── CRUD


def list_irrigations(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    culture_id: Optional[int] = None,
    fait: Optional[bool] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> tuple[list[IrrigationPlanifiee], int]:
    filtres = [IrrigationPlanifiee.user_id == user.id]
    if culture_id is not None:
        filtres.append(IrrigationPlanifiee.culture_id == culture_id)
    if fait is not None:
        filtres.append(IrrigationPlanifiee.fait == fait)
    if date_from is not None:
        filtres.append(IrrigationPlanifiee.date_prevue >= date_from)
    if date_to is not None:
        filtres.append(IrrigationPlanifiee.date_prevue <= date_to)

    total = db.execute(
        select(func.count(IrrigationPlanifiee.id)).where(*filtres)
    ).scalar_one()
    irrigations = (
        db.execute(
            select(IrrigationPlanifiee)
            .where(*filtres)
            .order_by(IrrigationPlanifiee.date_prevue, IrrigationPlanifiee.id)
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(irrigations), total


def create_irrigation(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> IrrigationPlanifiee:
    check_owned_reference(db, Culture, data["culture_id"], user, "Culture")
    irrigation = IrrigationPlanifiee(user_id=user.id, **data)
    if irrigation.fait:
        _marquer_fait(irrigation, db.get(Culture, data["culture_id"]))
    return create_entity(
        db,
        irrigation,
        resource_type="irrigation",
        actor_id=user.id,
        ip_address=ip_address,
        details={"culture_id": irrigation.culture_id, "date_prevue": irrigation.date_prevue},
    )


def update_irrigation(
    db: Session,
    *,
    user: User,
    irrigation: IrrigationPlanifiee,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> IrrigationPlanifiee:
    etait_fait = irrigation.fait
    update_entity(
        db,
        irrigation,
        changes,
        resource_type="irrigation",
        actor_id=user.id,
        ip_address=ip_address,
    )
    if irrigation.fait and not etait_fait:
        _marquer_fait(irrigation, irrigation.culture)
        db.flush()
    return irrigation


def delete_irrigation(
    db: Session, *, user: User, irrigation: IrrigationPlanifiee, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db, irrigation, resource_type="irrigation", actor_id=user.id, ip_address=ip_address
    )


# ── Génération


def generer_irrigations(
    db: Session,
    *,
    annee: int,
    force: bool = False,
    user_id: Optional[int] = None,
    ip_address: Optional[str] = None,
) -> dict[str, int]:
    """
    Génère les irrigations planifiées des cultures à irriguer d'une année

    Sans force, une culture qui a déjà des irrigations est laissée telle quelle.
    Avec force, ses irrigations sont supprimées puis recréées.

    Args:
        annee: Année des cultures à traiter
        force: Régénérer les calendriers existants
        user_id: Limiter à un utilisateur (tous sinon, usage en CLI)

    Returns:
        Compteurs cultures_traitees, cultures_ignorees, irrigations_creees
    """
    stmt = select(Culture).where(
        Culture.annee == annee,
        Culture.a_irriguer == True,  # noqa: E712
        Culture.terminee.is_(None),
    )
    if user_id is not None:
        stmt = stmt.where(Culture.user_id == user_id)
    cultures = db.execute(stmt.order_by(Culture.id)).scalars().all()

    traitees = ignorees = creees = 0
    for culture in cultures:
        existantes = db.execute(
            select(func.count(IrrigationPlanifiee.id)).where(
                IrrigationPlanifiee.culture_id == culture.id
            )
        ).scalar_one()
        if existantes and not force:
            ignorees += 1
            continue

        dates = planifier_irrigations(
            culture.date_semis,
            culture.date_plantation,
            culture.date_recolte,
            culture.fin_recolte,
            culture.espece.besoin_eau,
        )
        if not dates:
            ignorees += 1
            continue

        if existantes:
            db.execute(
                sql_delete(IrrigationPlanifiee).where(
                    IrrigationPlanifiee.culture_id == culture.id
                )
            )
        db.add_all(
            IrrigationPlanifiee(user_id=culture.user_id, culture_id=culture.id, date_prevue=d)
            for d in dates
        )
        traitees += 1
        creees += len(dates)

    db.flush()
    resultat = {
        "cultures_traitees": traitees,
        "cultures_ignorees": ignorees,
        "irrigations_creees": creees,
    }
    log_action(
        db,
        user_id=user_id,
        action="GENERATE",
        resource_type="irrigation",
        details={"annee": annee, "force": force, **resultat},
        ip_address=ip_address,
    )
    logger.info("Irrigations %s : %s", annee, resultat)
    return resultat
