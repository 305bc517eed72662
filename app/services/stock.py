"""
Service des stocks de récoltes et des consommations
Stock net = inventaire de départ + récoltes - consommations, les mouvements
étant comptés à partir de la date d'inventaire.
"""

from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select, union
from sqlalchemy.orm import Session

from app.dependencies.resolve import resolve_espece
from app.models import Consommation, Culture, Espece, Recolte, StockEspece, User
from app.services.audit import log_action
from app.services.crud import create_entity, delete_entity, update_entity
from app.utils import round2

# ── Stocks


def _somme(db: Session, model, user: User, espece_id: str, depuis: Optional[date]) -> float:
    filtres = [model.user_id == user.id, model.espece_id == espece_id]
    if depuis is not None:
        filtres.append(model.date >= depuis)
    return float(
        db.execute(select(func.coalesce(func.sum(model.quantite), 0)).where(*filtres)).scalar_one()
    )


def stock_net(db: Session, *, user: User, espece: Espece) -> dict:
    """Stock net d'une espèce pour un utilisateur"""
    stock = db.execute(
        select(StockEspece).where(
            StockEspece.user_id == user.id, StockEspece.espece_id == espece.id
        )
    ).scalar_one_or_none()
    if stock is not None:
        inventaire, depuis = stock.inventaire, stock.date_inventaire
    else:
        inventaire, depuis = espece.inventaire or 0, espece.date_inventaire

    recoltes = _somme(db, Recolte, user, espece.id, depuis)
    consommations = _somme(db, Consommation, user, espece.id, depuis)
    return {
        "espece_id": espece.id,
        "couleur": espece.couleur,
        "date_inventaire": depuis,
        "stock_net": round2(inventaire + recoltes - consommations),
        "detail": {
            "inventaire": inventaire,
            "recoltes": round2(recoltes),
            "consommations": round2(consommations),
        },
    }


def list_stocks(db: Session, *, user: User) -> list[dict]:
    """Stocks nets des espèces ayant un mouvement pour l'utilisateur"""
    ids = union(
        select(StockEspece.espece_id).where(StockEspece.user_id == user.id),
        select(Culture.espece_id).where(Culture.user_id == user.id),
        select(Recolte.espece_id).where(Recolte.user_id == user.id),
        select(Consommation.espece_id).where(Consommation.user_id == user.id),
    ).subquery()
    especes = (
        db.execute(select(Espece).where(Espece.id.in_(select(ids.c.espece_id))).order_by(Espece.id))
        .scalars()
        .all()
    )
    return [stock_net(db, user=user, espece=espece) for espece in especes]


def set_inventaire(
    db: Session,
    *,
    user: User,
    espece_id: str,
    inventaire: float,
    date_inventaire: Optional[date] = None,
    ip_address: Optional[str] = None,
) -> dict:
    """Fixe l'inventaire de départ d'une espèce (création ou remplacement)"""
    espece = resolve_espece(db, espece_id)
    stock = db.execute(
        select(StockEspece).where(
            StockEspece.user_id == user.id, StockEspece.espece_id == espece.id
        )
    ).scalar_one_or_none()
    if stock is None:
        stock = StockEspece(user_id=user.id, espece_id=espece.id)
        db.add(stock)
    stock.inventaire = inventaire
    stock.date_inventaire = date_inventaire or date.today()
    db.flush()

    log_action(
        db,
        user_id=user.id,
        action="UPDATE",
        resource_type="stock",
        resource_id=espece.id,
        details={"inventaire": inventaire, "date_inventaire": str(stock.date_inventaire)},
        ip_address=ip_address,
    )
    return stock_net(db, user=user, espece=espece)


# ── Consommations


def _check_espece(db: Session, data: dict[str, Any]) -> None:
    if data.get("espece_id") and db.get(Espece, data["espece_id"]) is None:
        raise HTTPException(
            status_code=400, detail=f"L'espèce '{data['espece_id']}' n'existe pas"
        )


def list_consommations(
    db: Session,
    *,
    user: User,
    offset: int = 0,
    limit: int = 50,
    espece_id: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> tuple[list[Consommation], int]:
    filtres = [Consommation.user_id == user.id]
    if espece_id:
        filtres.append(Consommation.espece_id == espece_id)
    if date_from is not None:
        filtres.append(Consommation.date >= date_from)
    if date_to is not None:
        filtres.append(Consommation.date <= date_to)

    total = db.execute(select(func.count(Consommation.id)).where(*filtres)).scalar_one()
    consommations = (
        db.execute(
            select(Consommation)
            .where(*filtres)
            .order_by(Consommation.date.desc(), Consommation.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(consommations), total


def create_consommation(
    db: Session, *, user: User, data: dict[str, Any], ip_address: Optional[str] = None
) -> Consommation:
    _check_espece(db, data)
    consommation = Consommation(user_id=user.id, **data)
    return create_entity(
        db,
        consommation,
        resource_type="consommation",
        actor_id=user.id,
        ip_address=ip_address,
        details={"espece_id": consommation.espece_id, "quantite": consommation.quantite},
    )


def update_consommation(
    db: Session,
    *,
    user: User,
    consommation: Consommation,
    changes: dict[str, Any],
    ip_address: Optional[str] = None,
) -> Consommation:
    _check_espece(db, changes)
    return update_entity(
        db,
        consommation,
        changes,
        resource_type="consommation",
        actor_id=user.id,
        ip_address=ip_address,
    )


def delete_consommation(
    db: Session, *, user: User, consommation: Consommation, ip_address: Optional[str] = None
) -> None:
    delete_entity(
        db, consommation, resource_type="consommation", actor_id=user.id, ip_address=ip_address
    )
