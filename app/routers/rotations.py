"""
Router pour la gestion des rotations
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import get_owned
from app.models import Rotation
from app.models.user import User
from app.schemas.pagination import PaginatedResponse
from app.schemas.rotation import RotationCreate, RotationResponse, RotationUpdate
from app.services import rotation as rotation_service

router = APIRouter(prefix="/api/v1/rotations", tags=["rotations"])


@router.post("", response_model=RotationResponse, status_code=201)
def create_rotation(
    # corps, parametres de la requete
    body: RotationCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return rotation_service.create_rotation(
        db, user=current_user, data=body.model_dump(), ip_address=client_ip(request)
    )


@router.get("", response_model=PaginatedResponse[RotationResponse])
def list_rotations(
    # corps, parametres de la requete
    pagination: PaginationParams = Depends(),
    active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Recherche par nom"),
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rotations, total = rotation_service.list_rotations(
        db,
        user=current_user,
        offset=pagination.offset,
        limit=pagination.limit,
        active=active,
        search=search,
    )
    return pagination.response(rotations, total)


@router.get("/{rotation_id}", response_model=RotationResponse)
def get_rotation(
    rotation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned(db, Rotation, rotation_id, current_user, "Rotation")


@router.put("/{rotation_id}", response_model=RotationResponse)
def update_rotation(
    # corps, parametres de la requete
    rotation_id: int,
    body: RotationUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rotation = get_owned(db, Rotation, rotation_id, current_user, "Rotation")
    return rotation_service.update_rotation(
        db,
        user=current_user,
        rotation=rotation,
        changes=body.model_dump(exclude_unset=True),
        ip_address=client_ip(request),
    )


@router.delete("/{rotation_id}", status_code=204)
def delete_rotation(
    rotation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rotation = get_owned(db, Rotation, rotation_id, current_user, "Rotation")
    rotation_service.delete_rotation(
        db, user=current_user, rotation=rotation, ip_address=client_ip(request)
    )
