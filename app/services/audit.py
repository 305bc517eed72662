"""
Service d'audit : enregistrement et consultation des actions
"""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.audit import MODULES_RESSOURCES, AuditLog

logger = logging.getLogger(__name__)


def log_action(
    db: Session,
    *,
    user_id: Optional[int],
    action: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> None:
    """Ajoute une entrée au journal, dans la transaction de la requête"""
    db.add(
        AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details,
            ip_address=ip_address,
        )
    )
    db.flush()
    logger.debug("audit %s %s/%s par %s", action, resource_type, resource_id, user_id)


def list_audit_logs(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 50,
    user_id: Optional[int] = None,
    action: Optional[str] = None,
    module: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> tuple[list[AuditLog], int]:
    """Entrées du journal, les plus récentes d'abord"""
    filtres = []
    if user_id is not None:
        filtres.append(AuditLog.user_id == user_id)
    if action is not None:
        filtres.append(AuditLog.action == action)
    if module is not None:
        filtres.append(AuditLog.resource_type.in_(MODULES_RESSOURCES[module]))
    if resource_type is not None:
        filtres.append(AuditLog.resource_type == resource_type)
    if resource_id is not None:
        filtres.append(AuditLog.resource_id == resource_id)
    if date_from is not None:
        filtres.append(AuditLog.created_at >= date_from)
    if date_to is not None:
        filtres.append(AuditLog.created_at <= date_to)

    total = db.execute(select(func.count(AuditLog.id)).where(*filtres)).scalar_one()
    logs = (
        db.execute(
            select(AuditLog)
            .where(*filtres)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(logs), total
