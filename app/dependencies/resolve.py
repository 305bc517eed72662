"""
Fonctions de résolution des entités pour les endpoints
Les référentiels se résolvent par identifiant (leur nom), les données
d'exploitation par id et toujours dans le périmètre de l'utilisateur.
"""

from typing import Optional, TypeVar

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import (
    EspeceAnimale,
    Espece,
    Famille,
    Itp,
    Planche,
    User,
    Variete,
)
from app.models.base import Base

M = TypeVar("M", bound=Base)


def resolve_user(db: Session, id_or_email: str) -> User:
    """Résout un utilisateur par ID ou email"""
    stmt = select(User)
    if id_or_email.isdigit():
        stmt = stmt.where(User.id == int(id_or_email))
    else:
        stmt = stmt.where(User.email == id_or_email)
    user = db.execute(stmt).scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=404, detail=f"Utilisateur '{id_or_email}' introuvable"
        )
    return user


def resolve_famille(db: Session, famille_id: str) -> Famille:
    famille = db.get(Famille, famille_id)
    if not famille:
        raise HTTPException(status_code=404, detail=f"Famille '{famille_id}' introuvable")
    return famille


def resolve_espece(db: Session, espece_id: str) -> Espece:
    espece = db.get(Espece, espece_id)
    if not espece:
        raise HTTPException(status_code=404, detail=f"Espèce '{espece_id}' introuvable")
    return espece


def resolve_variete(db: Session, variete_id: str) -> Variete:
    variete = db.get(Variete, variete_id)
    if not variete:
        raise HTTPException(status_code=404, detail=f"Variété '{variete_id}' introuvable")
    return variete


def resolve_itp(db: Session, itp_id: str) -> Itp:
    itp = db.get(Itp, itp_id)
    if not itp:
        raise HTTPException(status_code=404, detail=f"ITP '{itp_id}' introuvable")
    return itp


def resolve_espece_animale(db: Session, espece_id: str) -> EspeceAnimale:
    espece = db.get(EspeceAnimale, espece_id)
    if not espece:
        raise HTTPException(
            status_code=404, detail=f"Espèce animale '{espece_id}' introuvable"
        )
    return espece


def resolve_planche(db: Session, user: User, id_or_name: str) -> Planche:
    """Résout une planche de l'utilisateur par ID ou nom"""
    stmt = select(Planche).where(Planche.user_id == user.id)
    if id_or_name.isdigit():
        stmt = stmt.where(Planche.id == int(id_or_name))
    else:
        stmt = stmt.where(Planche.nom == id_or_name)
    planche = db.execute(stmt).scalar_one_or_none()
    if not planche:
        raise HTTPException(
            status_code=404, detail=f"Planche '{id_or_name}' introuvable"
        )
    return planche


def get_owned(db: Session, model: type[M], obj_id: int, user: User, label: str) -> M:
    """Charge une ligne appartenant à l'utilisateur, 404 sinon"""
    obj = db.get(model, obj_id)
    if obj is None or obj.user_id != user.id:
        raise HTTPException(status_code=404, detail=f"{label} introuvable")
    return obj


def check_reference(db: Session, model: type[M], obj_id: Optional[object], label: str) -> None:
    """Vérifie qu'une référence fournie dans un corps de requête existe (400 sinon)"""
    if obj_id is None:
        return
    if db.get(model, obj_id) is None:
        raise HTTPException(status_code=400, detail=f"{label} '{obj_id}' inexistant(e)")


def check_owned_reference(
    db: Session, model: type[M], obj_id: Optional[int], user: User, label: str
) -> None:
    """Vérifie qu'une référence vers une donnée d'exploitation appartient à l'utilisateur"""
    if obj_id is None:
        return
    obj = db.get(model, obj_id)
    if obj is None or obj.user_id != user.id:
        raise HTTPException(status_code=400, detail=f"{label} '{obj_id}' inexistant(e)")
