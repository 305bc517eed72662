"""
Router d'authentification
Endpoint public : login par email/mot de passe
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import client_ip, get_current_api_key, get_current_user
from app.models.user import ApiKey, User
from app.schemas.user import LoginRequest, LoginResponse, UserResponse
from app.services import user as user_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    # corps, parametres de la requete
    body: LoginRequest,
    request: Request,
    # dependences / middlewares
    db: Session = Depends(get_db),
):
    """Authentification par email/mot de passe. Retourne une clé de session."""
    user, session_key, raw_key = user_service.authenticate_user(
        db,
        email=body.email,
        password=body.password,
        ip_address=client_ip(request),
    )
    return LoginResponse(
        user=UserResponse.model_validate(user),
        api_key=raw_key,
        key_prefix=session_key.key_prefix,
        expires_at=session_key.expires_at,
    )


@router.post("/logout", status_code=204)
def logout(
    request: Request,
    db: Session = Depends(get_db),
    api_key: ApiKey = Depends(get_current_api_key),
):
    """Révoque la clé utilisée pour cette requête"""
    user_service.logout(db, api_key=api_key, ip_address=client_ip(request))


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
