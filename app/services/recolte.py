"""
Service de gestion des récoltes
"""

from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.dependencies.resolve import check_owned_reference
from app.models import Culture, Espece, Recolte, User
from app.services.crud import create_entity, delete_entity, update_entity


def _check_references(db: Session, user: User, data: dict[str, Any]) -> None:
    if data.get("espece_id") and db.get(Espece, data["espece_id"]) is None:
        raise HTTPException(
            status_code=400, detail=f"L'espèce '{data['espece_id']}' n'existe pas"
        )
    check_owned_reference(db, Culture, data.get("culture_id"), user, "Culture")


def list_recoltes(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    annee: Optional[int] = None,
    espece_id: Optional[str] = None,
    culture_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> tuple[list[Recolte], int, float]:
    """Liste paginée des récoltes. Retourne (récoltes, total, quantité totale)."""
    filtres = [Recolte.user_id == user.id]
    if annee is not None:
        filtres += [Recolte.date >= date(annee, 1, 1), Recolte.date <= date(annee, 12, 31)]
    if espece_id:
        filtres.append(Recolte.espece_id == espece_id)
    if culture_id is not None:
        filtres.append(Recolte.culture_id == culture_id)
    if date_from is not None:
        filtres.append(Recolte.date >= date_from)
    if date_to is not None:
        filtres.append(Recolte.date <= date_to)

    total, quantite = db.execute(
        select(func.count(Recolte.id), func.coalesce(func.sum(Recolte.quantite), 0)).where(
            *filtres
        )
    ).one()
    recoltes = (
        db.execute(
            select(Recolte)
            .where(*filtres)
            .order_by(Recolte.date.desc(), Recolte.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(recoltes), total, round(float(quantite), 2)


def create_recolte(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Recolte:
    _check_references(db, user, data)
    recolte = Recolte(user_id=user.id, **data)
    return create_entity(
        db,
        recolte,
        resource_type="recolte",
        actor_id=user.id,
        ip_address=ip_address,
        details={"espece_id": recolte.espece_id, "quantite": recolte.quantite},
    )


def update_recolte(
    db: Session,
    *,
    user: User,
    recolte: Recolte,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Recolte:
    _check_references(db, user, changes)
    return update_entity(
        db, recolte, changes, resource_type="recolte", actor_id=user.id, ip_address=ip_address
    )


def delete_recolte(
    db: Session, *, user: User, recolte: Recolte, ip_address: Optional[str] = None
) -> None:
    delete_entity(db, recolte, resource_type="recolte", actor_id=user.id, ip_address=ip_address)
