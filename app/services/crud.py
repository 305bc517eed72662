"""
Opérations d'écriture communes : ajout, mise à jour, suppression avec audit
"""

from typing import Any, Optional, TypeVar

from sqlalchemy.orm import Session

from app.models.base import Base
from app.services.audit import log_action

M = TypeVar("M", bound=Base)


def _audit_value(value: Any) -> Any:
    """Valeur sérialisable pour le détail JSON de l'audit"""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_audit_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _audit_value(v) for k, v in value.items()}
    return str(value)


def drop_required_nulls(model: type[Base], changes: dict[str, Any]) -> dict[str, Any]:
    """Retire des changements les null explicites sur les colonnes obligatoires"""
    colonnes = model.__table__.columns
    for field, value in list(changes.items()):
        if value is None and field in colonnes and not colonnes[field].nullable:
            changes.pop(field)
    return changes


def create_entity(
    db: Session,
    obj: M,
    *,
    resource_type: str,
    actor_id: Optional[int],
    ip_address: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> M:
    """Ajoute un objet, le flush pour obtenir son id puis trace la création"""
    db.add(obj)
    db.flush()

    log_action(
        db,
        user_id=actor_id,
        action="CREATE",
        resource_type=resource_type,
        resource_id=str(obj.id),
        details=_audit_value(details) if details else None,
        ip_address=ip_address,
    )
    return obj


def update_entity(
    db: Session,
    obj: M,
    changes: dict[str, Any],
    *,
    resource_type: str,
    actor_id: Optional[int],
    ip_address: Optional[str] = None,
) -> M:
    """Applique les champs fournis (exclude_unset) et trace la modification"""
    # un null explicite sur une colonne obligatoire est ignore
    for field, value in drop_required_nulls(type(obj), changes).items():
        setattr(obj, field, value)
    db.flush()

    log_action(
        db,
        user_id=actor_id,
        action="UPDATE",
        resource_type=resource_type,
        resource_id=str(obj.id),
        details=_audit_value(changes),
        ip_address=ip_address,
    )
    return obj


def delete_entity(
    db: Session,
    obj: Base,
    *,
    resource_type: str,
    actor_id: Optional[int],
    ip_address: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """Supprime un objet et trace la suppression"""
    resource_id = str(obj.id)
    db.delete(obj)
    db.flush()

    log_action(
        db,
        user_id=actor_id,
        action="DELETE",
        resource_type=resource_type,
        resource_id=resource_id,
        details=_audit_value(details) if details else None,
        ip_address=ip_address,
    )
