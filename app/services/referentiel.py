"""
Service des référentiels globaux du potager
Lecture pour tous, écriture réservée aux administrateurs (contrôlé par les routers)
"""

from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.dependencies.resolve import check_reference
from app.models import Culture, Espece, Famille, Fournisseur, Itp, Variete
from app.services.crud import create_entity, delete_entity, update_entity


def _page(db: Session, stmt, count_stmt, offset: int, limit: int) -> tuple[list, int]:
    total = db.execute(count_stmt).scalar_one()
    items = db.execute(stmt.offset(offset).limit(limit)).scalars().all()
    return list(items), total


# ── Familles


def list_familles(
    db: Session, *, offset: int = 0, limit: int = 50, search: Optional[str] = None
) -> tuple[list[dict], int]:
    """Liste paginée des familles avec leur nombre d'espèces"""
    filtres = []
    if search:
        filtres.append(Famille.id.ilike(f"%{search}%"))

    total = db.execute(select(func.count(Famille.id)).where(*filtres)).scalar_one()
    nb_especes = (
        select(func.count(Espece.id))
        .where(Espece.famille_id == Famille.id)
        .correlate(Famille)
        .scalar_subquery()
    )
    rows = db.execute(
        select(Famille, nb_especes)
        .where(*filtres)
        .order_by(Famille.id)
        .offset(offset)
        .limit(limit)
    ).all()

    items = [
        {
            "id": famille.id,
            "intervalle": famille.intervalle,
            "couleur": famille.couleur,
            "description": famille.description,
            "nb_especes": nb,
        }
        for famille, nb in rows
    ]
    return items, total


def create_famille(
    db: Session, *, data: dict[str, Any], actor_id: int, ip_address: Optional[str] = None
) -> Famille:
    if db.get(Famille, data["id"]):
        raise HTTPException(status_code=409, detail=f"Famille '{data['id']}' existe déjà")
    return create_entity(
        db,
        Famille(**data),
        resource_type="famille",
        actor_id=actor_id,
        ip_address=ip_address,
        details={"id": data["id"]},
    )


def update_famille(
    db: Session,
    *,
    famille: Famille,
    changes: dict[str, Any],
    actor_id: int,
    ip_address: Optional[str] = None,
) -> Famille:
    return update_entity(
        db, famille, changes, resource_type="famille", actor_id=actor_id, ip_address=ip_address
    )


def delete_famille(
    db: Session, *, famille: Famille, actor_id: int, ip_address: Optional[str] = None
) -> None:
    nb = db.execute(
        select(func.count(Espece.id)).where(Espece.famille_id == famille.id)
    ).scalar_one()
    if nb:
        raise HTTPException(
            status_code=409,
            detail=f"Famille '{famille.id}' utilisée par {nb} espèce(s)",
        )
    delete_entity(db, famille, resource_type="famille", actor_id=actor_id, ip_address=ip_address)


# ── Espèces


def list_especes(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 50,
    famille: Optional[str] = None,
    vivace: Optional[bool] = None,
    search: Optional[str] = None,
) -> tuple[list[Espece], int]:
    filtres = []
    if famille:
        filtres.append(Espece.famille_id == famille)
    if vivace is not None:
        filtres.append(Espece.vivace == vivace)
    if search:
        filtres.append(Espece.id.ilike(f"%{search}%"))

    return _page(
        db,
        select(Espece).where(*filtres).order_by(Espece.id),
        select(func.count(Espece.id)).where(*filtres),
        offset,
        limit,
    )


def create_espece(
    db: Session, *, data: dict[str, Any], actor_id: int, ip_address: Optional[str] = None
) -> Espece:
    if db.get(Espece, data["id"]):
        raise HTTPException(status_code=409, detail=f"Espèce '{data['id']}' existe déjà")
    check_reference(db, Famille, data.get("famille_id"), "Famille")
    return create_entity(
        db,
        Espece(**data),
        resource_type="espece",
        actor_id=actor_id,
        ip_address=ip_address,
        details={"id": data["id"], "famille_id": data.get("famille_id")},
    )


def update_espece(
    db: Session,
    *,
    espece: Espece,
    changes: dict[str, Any],
    actor_id: int,
    ip_address: Optional[str] = None,
) -> Espece:
    check_reference(db, Famille, changes.get("famille_id"), "Famille")
    return update_entity(
        db, espece, changes, resource_type="espece", actor_id=actor_id, ip_address=ip_address
    )


def delete_espece(
    db: Session, *, espece: Espece, actor_id: int, ip_address: Optional[str] = None
) -> None:
    nb = db.execute(
        select(func.count(Culture.id)).where(Culture.espece_id == espece.id)
    ).scalar_one()
    if nb:
        raise HTTPException(
            status_code=409,
            detail=f"Espèce '{espece.id}' utilisée par {nb} culture(s)",
        )
    delete_entity(db, espece, resource_type="espece", actor_id=actor_id, ip_address=ip_address)


# ── Variétés


def list_varietes(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 50,
    espece: Optional[str] = None,
    search: Optional[str] = None,
) -> tuple[list[Variete], int]:
    filtres = []
    if espece:
        filtres.append(Variete.espece_id == espece)
    if search:
        filtres.append(Variete.id.ilike(f"%{search}%"))

    return _page(
        db,
        select(Variete).where(*filtres).order_by(Variete.id),
        select(func.count(Variete.id)).where(*filtres),
        offset,
        limit,
    )


def create_variete(
    db: Session, *, data: dict[str, Any], actor_id: int, ip_address: Optional[str] = None
) -> Variete:
    if db.get(Variete, data["id"]):
        raise HTTPException(status_code=409, detail=f"Variété '{data['id']}' existe déjà")
    check_reference(db, Espece, data.get("espece_id"), "Espèce")
    check_reference(db, Fournisseur, data.get("fournisseur_id"), "Fournisseur")
    return create_entity(
        db,
        Variete(**data),
        resource_type="variete",
        actor_id=actor_id,
        ip_address=ip_address,
        details={"id": data["id"], "espece_id": data["espece_id"]},
    )


def update_variete(
    db: Session,
    *,
    variete: Variete,
    changes: dict[str, Any],
    actor_id: int,
    ip_address: Optional[str] = None,
) -> Variete:
    if "espece_id" in changes and changes["espece_id"] is None:
        raise HTTPException(status_code=400, detail="Une variété doit avoir une espèce")
    check_reference(db, Espece, changes.get("espece_id"), "Espèce")
    check_reference(db, Fournisseur, changes.get("fournisseur_id"), "Fournisseur")
    return update_entity(
        db, variete, changes, resource_type="variete", actor_id=actor_id, ip_address=ip_address
    )


def delete_variete(
    db: Session, *, variete: Variete, actor_id: int, ip_address: Optional[str] = None
) -> None:
    delete_entity(db, variete, resource_type="variete", actor_id=actor_id, ip_address=ip_address)


# ── Itinéraires techniques


def list_itps(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 50,
    espece: Optional[str] = None,
    search: Optional[str] = None,
) -> tuple[list[Itp], int]:
    filtres = []
    if espece:
        filtres.append(Itp.espece_id == espece)
    if search:
        filtres.append(Itp.id.ilike(f"%{search}%"))

    return _page(
        db,
        select(Itp).where(*filtres).order_by(Itp.id),
        select(func.count(Itp.id)).where(*filtres),
        offset,
        limit,
    )


def create_itp(
    db: Session, *, data: dict[str, Any], actor_id: int, ip_address: Optional[str] = None
) -> Itp:
    if db.get(Itp, data["id"]):
        raise HTTPException(status_code=409, detail=f"ITP '{data['id']}' existe déjà")
    check_reference(db, Espece, data.get("espece_id"), "Espèce")
    return create_entity(
        db,
        Itp(**data),
        resource_type="itp",
        actor_id=actor_id,
        ip_address=ip_address,
        details={"id": data["id"], "espece_id": data.get("espece_id")},
    )


def update_itp(
    db: Session,
    *,
    itp: Itp,
    changes: dict[str, Any],
    actor_id: int,
    ip_address: Optional[str] = None,
) -> Itp:
    check_reference(db, Espece, changes.get("espece_id"), "Espèce")
    return update_entity(
        db, itp, changes, resource_type="itp", actor_id=actor_id, ip_address=ip_address
    )


def delete_itp(
    db: Session, *, itp: Itp, actor_id: int, ip_address: Optional[str] = None
) -> None:
    delete_entity(db, itp, resource_type="itp", actor_id=actor_id, ip_address=ip_address)


# ── Fournisseurs


def resolve_fournisseur(db: Session, fournisseur_id: int) -> Fournisseur:
    fournisseur = db.get(Fournisseur, fournisseur_id)
    if not fournisseur:
        raise HTTPException(status_code=404, detail="Fournisseur introuvable")
    return fournisseur


def list_fournisseurs(
    db: Session, *, offset: int = 0, limit: int = 50, search: Optional[str] = None
) -> tuple[list[Fournisseur], int]:
    filtres = []
    if search:
        filtres.append(Fournisseur.nom.ilike(f"%{search}%"))

    return _page(
        db,
        select(Fournisseur).where(*filtres).order_by(Fournisseur.nom),
        select(func.count(Fournisseur.id)).where(*filtres),
        offset,
        limit,
    )


def _check_nom_fournisseur(db: Session, nom: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Fournisseur).where(Fournisseur.nom == nom)
    if exclude_id is not None:
        stmt = stmt.where(Fournisseur.id != exclude_id)
    if db.execute(stmt).scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Fournisseur '{nom}' existe déjà")


def create_fournisseur(
    db: Session, *, data: dict[str, Any], actor_id: int, ip_address: Optional[str] = None
) -> Fournisseur:
    _check_nom_fournisseur(db, data["nom"])
    return create_entity(
        db,
        Fournisseur(**data),
        resource_type="fournisseur",
        actor_id=actor_id,
        ip_address=ip_address,
        details={"nom": data["nom"]},
    )


def update_fournisseur(
    db: Session,
    *,
    fournisseur: Fournisseur,
    changes: dict[str, Any],
    actor_id: int,
    ip_address: Optional[str] = None,
) -> Fournisseur:
    if changes.get("nom"):
        _check_nom_fournisseur(db, changes["nom"], exclude_id=fournisseur.id)
    return update_entity(
        db,
        fournisseur,
        changes,
        resource_type="fournisseur",
        actor_id=actor_id,
        ip_address=ip_address,
    )


def delete_fournisseur(
    db: Session, *, fournisseur: Fournisseur, actor_id: int, ip_address: Optional[str] = None
) -> None:
    # les varietes gardent leur fiche, sans fournisseur
    for variete in db.execute(
        select(Variete).where(Variete.fournisseur_id == fournisseur.id)
    ).scalars():
        variete.fournisseur_id = None
    delete_entity(
        db, fournisseur, resource_type="fournisseur", actor_id=actor_id, ip_address=ip_address
    )
