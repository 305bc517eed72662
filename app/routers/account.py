"""
Router du compte courant : API Keys personnelles et suppression des données
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_user
from app.models.user import User
from app.schemas.user import ApiKeyCreate, ApiKeyResponse, DeleteDataResponse
from app.services import account as account_service
from app.services import user as user_service

router = APIRouter(prefix="/api/v1/account", tags=["account"])


# ── Générer une API Key


@router.post("/api-keys", response_model=ApiKeyResponse, status_code=201)
def create_api_key(
    # corps, parametres de la requete
    body: ApiKeyCreate,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    api_key, raw_key = user_service.generate_api_key(
        db,
        user=current_user,
        name=body.name,
        expires_at=body.expires_at,
        ip_address=client_ip(request),
    )
    # la cle en clair n'est renvoyee qu'a la creation
    return ApiKeyResponse(
        id=api_key.id,
        key_value=raw_key,
        key_prefix=api_key.key_prefix,
        name=api_key.name,
        expires_at=api_key.expires_at,
        is_active=api_key.is_active,
        created_at=api_key.created_at,
    )


# ── Lister ses API Keys


@router.get("/api-keys", response_model=list[ApiKeyResponse])
def list_api_keys(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.list_api_keys(db, user=current_user)


# ── Révoquer une API Key


@router.delete("/api-keys/{key_id}", status_code=204)
def revoke_api_key(
    key_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_service.revoke_api_key(
        db, user=current_user, key_id=key_id, ip_address=client_ip(request)
    )


# ── Supprimer toutes ses données


@router.delete("/data", response_model=DeleteDataResponse)
def delete_data(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Supprime toutes les données d'exploitation de l'utilisateur, le compte est conservé"""
    total, details = account_service.delete_user_data(
        db, user_id=current_user.id, ip_address=client_ip(request)
    )
    return DeleteDataResponse(
        message=f"{total} enregistrements supprimés",
        details=details,
    )
