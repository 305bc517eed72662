"""
Service du verger : arbres, récoltes et opérations d'entretien
"""

from datetime import date
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.dependencies.resolve import check_owned_reference
from app.models import Arbre, OperationArbre, RecolteArbre, User
from app.services.crud import create_entity, delete_entity, update_entity
from app.utils import round2

# ── Arbres


def list_arbres(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    type: Optional[str] = None,
    productif: Optional[bool] = None,
    search: Optional[str] = None,
) -> tuple[list[Arbre], int]:
    filtres = [Arbre.user_id == user.id]
    if type:
        filtres.append(Arbre.type == type)
    if productif is not None:
        filtres.append(Arbre.productif == productif)
    if search:
        motif = f"%{search}%"
        filtres.append(
            Arbre.nom.ilike(motif) | Arbre.espece.ilike(motif) | Arbre.variete.ilike(motif)
        )

    total = db.execute(select(func.count(Arbre.id)).where(*filtres)).scalar_one()
    arbres = (
        db.execute(
            select(Arbre).where(*filtres).order_by(Arbre.nom).offset(offset).limit(limit)
        )
        .scalars()
        .all()
    )
    return list(arbres), total


def create_arbre(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Arbre:
    arbre = Arbre(user_id=user.id, **data)
    return create_entity(
        db,
        arbre,
        resource_type="arbre",
        actor_id=user.id,
        ip_address=ip_address,
        details={"nom": arbre.nom, "type": arbre.type},
    )


def update_arbre(
    db: Session,
    *,
    user: User,
    arbre: Arbre,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Arbre:
    return update_entity(
        db, arbre, changes, resource_type="arbre", actor_id=user.id, ip_address=ip_address
    )


def delete_arbre(
    db: Session, *, user: User, arbre: Arbre, ip_address: Optional[str] = None
) -> None:
    """Supprime un arbre avec ses récoltes et opérations"""
    db.execute(delete(RecolteArbre).where(RecolteArbre.arbre_id == arbre.id))
    db.execute(delete(OperationArbre).where(OperationArbre.arbre_id == arbre.id))
    delete_entity(db, arbre, resource_type="arbre", actor_id=user.id, ip_address=ip_address)


# ── Recoltes et operations


def list_recoltes_arbres(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    arbre_id: Optional[int] = None,
    annee: Optional[int] = None,
    statut: Optional[str] = None,
) -> tuple[list[RecolteArbre], int]:
    filtres = [RecolteArbre.user_id == user.id]
    if arbre_id is not None:
        filtres.append(RecolteArbre.arbre_id == arbre_id)
    if annee is not None:
        filtres += [RecolteArbre.date >= date(annee, 1, 1), RecolteArbre.date <= date(annee, 12, 31)]
    if statut:
        filtres.append(RecolteArbre.statut == statut)

    total = db.execute(select(func.count(RecolteArbre.id)).where(*filtres)).scalar_one()
    recoltes = (
        db.execute(
            select(RecolteArbre)
            .where(*filtres)
            .order_by(RecolteArbre.date.desc(), RecolteArbre.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(recoltes), total


def create_recolte_arbre(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> RecolteArbre:
    check_owned_reference(db, Arbre, data.get("arbre_id"), user, "Arbre")
    recolte = RecolteArbre(user_id=user.id, **data)
    return create_entity(
        db,
        recolte,
        resource_type="recolte_arbre",
        actor_id=user.id,
        ip_address=ip_address,
        details={"arbre_id": recolte.arbre_id, "quantite": recolte.quantite},
    )


def update_recolte_arbre(
    db: Session,
    *,
    user: User,
    recolte: RecolteArbre,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> RecolteArbre:
    return update_entity(
        db, recolte, changes, resource_type="recolte_arbre", actor_id=user.id, ip_address=ip_address
    )


def delete_recolte_arbre(
    db: Session, *, user: User, recolte: RecolteArbre, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db, recolte, resource_type="recolte_arbre", actor_id=user.id, ip_address=ip_address
    )


def list_operations(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    arbre_id: Optional[int] = None,
    type: Optional[str] = None,
    fait: Optional[bool] = None,
) -> tuple[list[OperationArbre], int]:
    filtres = [OperationArbre.user_id == user.id]
    if arbre_id is not None:
        filtres.append(OperationArbre.arbre_id == arbre_id)
    if type:
        filtres.append(OperationArbre.type == type)
    if fait is not None:
        filtres.append(OperationArbre.fait == fait)

    total = db.execute(select(func.count(OperationArbre.id)).where(*filtres)).scalar_one()
    operations = (
        db.execute(
            select(OperationArbre)
            .where(*filtres)
            .order_by(OperationArbre.date.desc(), OperationArbre.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(operations), total


def create_operation(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> OperationArbre:
    check_owned_reference(db, Arbre, data.get("arbre_id"), user, "Arbre")
    operation = OperationArbre(user_id=user.id, **data)
    return create_entity(
        db,
        operation,
        resource_type="operation_arbre",
        actor_id=user.id,
        ip_address=ip_address,
        details={"arbre_id": operation.arbre_id, "type": operation.type},
    )


def update_operation(
    db: Session,
    *,
    user: User,
    operation: OperationArbre,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> OperationArbre:
    return update_entity(
        db,
        operation,
        changes,
        resource_type="operation_arbre",
        actor_id=user.id,
        ip_address=ip_address,
    )


def delete_operation(
    db: Session, *, user: User, operation: OperationArbre, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db, operation, resource_type="operation_arbre", actor_id=user.id, ip_address=ip_address
    )


# ── Statistiques


def stats_verger(db: Session, *, user: User, annee: int) -> dict:
    """Synthèse annuelle du verger"""
    debut, fin = date(annee, 1, 1), date(annee, 12, 31)

    par_type = dict(
        db.execute(
            select(Arbre.type, func.count(Arbre.id))
            .where(Arbre.user_id == user.id)
            .group_by(Arbre.type)
        ).all()
    )
    productifs = db.execute(
        select(func.count(Arbre.id)).where(Arbre.user_id == user.id, Arbre.productif.is_(True))
    ).scalar_one()

    recoltes = (
        db.execute(
            select(RecolteArbre).where(
                RecolteArbre.user_id == user.id,
                RecolteArbre.date >= debut,
                RecolteArbre.date <= fin,
            )
        )
        .scalars()
        .all()
    )
    valeur_vendue = sum(
        r.quantite * (r.prix_kg or 0) for r in recoltes if r.statut == "vendu"
    )

    cout_operations = db.execute(
        select(func.coalesce(func.sum(OperationArbre.cout), 0)).where(
            OperationArbre.user_id == user.id,
            OperationArbre.date >= debut,
            OperationArbre.date <= fin,
        )
    ).scalar_one()
    a_faire = db.execute(
        select(func.count(OperationArbre.id)).where(
            OperationArbre.user_id == user.id, OperationArbre.fait.is_(False)
        )
    ).scalar_one()

    return {
        "annee": annee,
        "nb_arbres": sum(par_type.values()),
        "par_type": par_type,
        "productifs": productifs,
        "recolte_kg": round2(sum(r.quantite for r in recoltes)),
        "nb_recoltes": len(recoltes),
        "valeur_vendue": round2(valeur_vendue),
        "cout_operations": round2(float(cout_operations)),
        "operations_a_faire": a_faire,
    }
