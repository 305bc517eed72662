"""
Service des associations de cultures (référentiel global)
"""

from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.dependencies.resolve import check_reference
from app.models import Association, AssociationDetail, Espece, Famille
from app.services.crud import create_entity, delete_entity, update_entity


def resolve_association(db: Session, association_id: int) -> Association:
    association = db.get(Association, association_id)
    if not association:
        raise HTTPException(status_code=404, detail="Association introuvable")
    return association


def _check_nom(db: Session, nom: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Association).where(Association.nom == nom)
    if exclude_id is not None:
        stmt = stmt.where(Association.id != exclude_id)
    if db.execute(stmt).scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Association '{nom}' existe déjà")


def _build_details(db: Session, details: list[dict[str, Any]]) -> list[AssociationDetail]:
    result = []
    for detail in details:
        check_reference(db, Espece, detail.get("espece_id"), "Espèce")
        check_reference(db, Famille, detail.get("famille_id"), "Famille")
        result.append(AssociationDetail(**detail))
    return result


def list_associations(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 50,
    espece: Optional[str] = None,
    search: Optional[str] = None,
) -> tuple[list[Association], int]:
    filtres = []
    if search:
        filtres.append(Association.nom.ilike(f"%{search}%"))
    if espece:
        # une espece participe directement ou via sa famille
        espece_obj = db.get(Espece, espece)
        cibles = [AssociationDetail.espece_id == espece]
        if espece_obj and espece_obj.famille_id:
            cibles.append(AssociationDetail.famille_id == espece_obj.famille_id)
        ids = select(AssociationDetail.association_id).where(or_(*cibles))
        filtres.append(Association.id.in_(ids))

    total = db.execute(select(func.count(Association.id)).where(*filtres)).scalar_one()
    items = (
        db.execute(
            select(Association)
            .where(*filtres)
            .order_by(Association.nom)
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(items), total


def create_association(
    db: Session, *, data: dict[str, Any], actor_id: int, ip_address: Optional[str] = None
) -> Association:
    _check_nom(db, data["nom"])
    details = _build_details(db, data.pop("details", []))
    association = Association(**data, details=details)
    return create_entity(
        db,
        association,
        resource_type="association",
        actor_id=actor_id,
        ip_address=ip_address,
        details={"nom": association.nom, "nb_details": len(details)},
    )


def update_association(
    db: Session,
    *,
    association: Association,
    changes: dict[str, Any],
    actor_id: int,
    ip_address: Optional[str] = None,
) -> Association:
    if changes.get("nom"):
        _check_nom(db, changes["nom"], exclude_id=association.id)
    details = changes.pop("details", None)
    if details is not None:
        # remplacement en bloc, les anciens membres sont supprimes (delete-orphan)
        association.details = _build_details(db, details)
    return update_entity(
        db,
        association,
        changes,
        resource_type="association",
        actor_id=actor_id,
        ip_address=ip_address,
    )


def delete_association(
    db: Session, *, association: Association, actor_id: int, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db,
        association,
        resource_type="association",
        actor_id=actor_id,
        ip_address=ip_address,
        details={"nom": association.nom},
    )
