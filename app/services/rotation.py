"""
Service de gestion des rotations
"""

from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.dependencies.resolve import check_reference
from app.models import Itp, Planche, Rotation, RotationDetail, User
from app.services.crud import create_entity, delete_entity, update_entity


def _check_nom(db: Session, user: User, nom: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Rotation).where(Rotation.user_id == user.id, Rotation.nom == nom)
    if exclude_id is not None:
        stmt = stmt.where(Rotation.id != exclude_id)
    if db.execute(stmt).scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Rotation '{nom}' existe déjà")


def _build_details(db: Session, details: list[dict[str, Any]]) -> list[RotationDetail]:
    annees = [d["annee"] for d in details]
    if len(annees) != len(set(annees)):
        raise HTTPException(status_code=400, detail="Une année du cycle est renseignée deux fois")
    for detail in details:
        check_reference(db, Itp, detail.get("itp_id"), "ITP")
    return [RotationDetail(**d) for d in details]


def list_rotations(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    active: Optional[bool] = None,
    search: Optional[str] = None,
) -> tuple[list[Rotation], int]:
    filtres = [Rotation.user_id == user.id]
    if active is not None:
        filtres.append(Rotation.active == active)
    if search:
        filtres.append(Rotation.nom.ilike(f"%{search}%"))

    total = db.execute(select(func.count(Rotation.id)).where(*filtres)).scalar_one()
    rotations = (
        db.execute(
            select(Rotation).where(*filtres).order_by(Rotation.nom).offset(offset).limit(limit)
        )
        .scalars()
        .all()
    )
    return list(rotations), total


def create_rotation(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Rotation:
    _check_nom(db, user, data["nom"])
    details = _build_details(db, data.pop("details", []))
    rotation = Rotation(user_id=user.id, details=details, **data)
    return create_entity(
        db,
        rotation,
        resource_type="rotation",
        actor_id=user.id,
        ip_address=ip_address,
        details={"nom": rotation.nom, "nb_details": len(details)},
    )


def update_rotation(
    db: Session,
    *,
    user: User,
    rotation: Rotation,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Rotation:
    if changes.get("nom") and changes["nom"] != rotation.nom:
        _check_nom(db, user, changes["nom"], exclude_id=rotation.id)
    details = changes.pop("details", None)
    if details is not None:
        rotation.details = _build_details(db, details)
    return update_entity(
        db, rotation, changes, resource_type="rotation", actor_id=user.id, ip_address=ip_address
    )


def delete_rotation(
    db: Session, *, user: User, rotation: Rotation, ip_address: Optional[str] = None
) -> None:
    """Supprime une rotation, les planches qui la suivaient sont détachées"""
    planches = db.execute(
        select(Planche).where(Planche.rotation_id == rotation.id)
    ).scalars().all()
    for planche in planches:
        planche.rotation_id = None
    delete_entity(
        db,
        rotation,
        resource_type="rotation",
        actor_id=user.id,
        ip_address=ip_address,
        details={"nom": rotation.nom, "planches_detachees": len(planches)},
    )
