"""
Router des associations de cultures (compagnonnage)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user, require_admin
from app.dependencies.pagination import PaginationParams
from app.models.user import User
from app.schemas.association import (
    AssociationCreate,
    AssociationResponse,
    AssociationUpdate,
)
from app.schemas.pagination import PaginatedResponse
from app.services import association as association_service

router = APIRouter(prefix="/api/v1/associations", tags=["associations"])


@router.get("", response_model=PaginatedResponse[AssociationResponse])
def list_associations(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    espece: Optional[str] = Query(None, description="Associations impliquant une espèce"),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    items, total = association_service.list_associations(
        db, offset=pagination.offset, limit=pagination.limit, espece=espece, search=search
    )
    return pagination.response(items, total)


@router.post("", response_model=AssociationResponse, status_code=201)
def create_association(
    # corps, parametres de la requete
    body: AssociationCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return association_service.create_association(
        db, data=body.model_dump(), actor_id=current_user.id, ip_address=client_ip(request)
    )


@router.get("/{association_id}", response_model=AssociationResponse)
def get_association(
    association_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return association_service.resolve_association(db, association_id)


@router.put("/{association_id}", response_model=AssociationResponse)
def update_association(
    # corps, parametres de la requete
    association_id: int,
    body: AssociationUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    association = association_service.resolve_association(db, association_id)
    return association_service.update_association(
        db,
        association=association,
        changes=body.model_dump(exclude_unset=True),
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


@router.delete("/{association_id}", status_code=204)
def delete_association(
    association_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    association = association_service.resolve_association(db, association_id)
    association_service.delete_association(
        db, association=association, actor_id=current_user.id, ip_address=client_ip(request)
    )
