"""
Router d'administration des utilisateurs
Réservé aux administrateurs
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, require_admin
from app.dependencies.pagination import PaginationParams
from app.dependencies.resolve import resolve_user
from app.models.user import User
from app.schemas.pagination import PaginatedResponse
from app.schemas.user import (
    UserAdminResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from app.services import user as user_service

router = APIRouter(prefix="/api/v1/admin/users", tags=["users"])


# ── Créer un utilisateur


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    # corps, parametres de la requete
    body: UserCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return user_service.create_user(
        db,
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
        is_active=body.is_active,
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


# ── Lister les utilisateurs


@router.get("", response_model=PaginatedResponse[UserAdminResponse])
def list_users(
    pagination: PaginationParams = Depends(),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    users, total = user_service.list_users(
        db, offset=pagination.offset, limit=pagination.limit
    )
    return pagination.response(users, total)


# ── Voir un utilisateur


@router.get("/{id_or_email}", response_model=UserResponse)
def get_user(
    id_or_email: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return resolve_user(db, id_or_email)


# ── Modifier un utilisateur


@router.put("/{id_or_email}", response_model=UserResponse)
def update_user(
    # corps, parametres de la requete
    id_or_email: str,
    body: UserUpdate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = resolve_user(db, id_or_email)
    return user_service.update_user(
        db,
        user=user,
        name=body.name,
        password=body.password,
        role=body.role,
        is_active=body.is_active,
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )


# ── Supprimer un utilisateur


@router.delete("/{id_or_email}", status_code=204)
def delete_user(
    # corps, parametres de la requete
    id_or_email: str,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = resolve_user(db, id_or_email)
    user_service.delete_user(
        db,
        user=user,
        actor_id=current_user.id,
        ip_address=client_ip(request),
    )
