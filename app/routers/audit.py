"""
Router de consultation du journal d'audit (administrateurs)
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import require_admin
from app.dependencies.pagination import PaginationParams
from app.models.user import User
from app.schemas.audit import ActionAudit, AuditLogResponse, ModuleAudit
from app.schemas.pagination import PaginatedResponse
from app.services import audit as audit_service

router = APIRouter(prefix="/api/v1/audit-logs", tags=["audit"])


@router.get("", response_model=PaginatedResponse[AuditLogResponse])
def list_audit_logs(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    user_id: Optional[int] = Query(None),
    action: Optional[ActionAudit] = Query(None),
    module: Optional[ModuleAudit] = Query(None),
    resource_type: Optional[str] = Query(None),
    resource_id: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    # dependences / middlewares
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    logs, total = audit_service.list_audit_logs(
        db,
        offset=pagination.offset,
        limit=pagination.limit,
        user_id=user_id,
        action=action,
        module=module,
        resource_type=resource_type,
        resource_id=resource_id,
        date_from=date_from,
        date_to=date_to,
    )
    return pagination.response(logs, total)
