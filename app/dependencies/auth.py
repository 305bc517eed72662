"""
Dépendances d'authentification par API Key
Header attendu : Authorization: Bearer <api_key>
"""

from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import ApiKey, User
from app.utils import verify_password

# auto_error desactive pour renvoyer 401 (et non 403) quand l'en-tete manque
security = HTTPBearer(auto_error=False)


def find_api_key(db: Session, raw_key: str) -> Optional[ApiKey]:
    """Retrouve la clé active correspondant à une valeur en clair"""
    stmt = select(ApiKey).where(
        ApiKey.key_prefix == raw_key[:12],
        ApiKey.is_active == True,  # noqa: E712
    )
    for key in db.execute(stmt).scalars().all():
        # Vérifier l'expiration
        if key.expires_at and key.expires_at < datetime.utcnow():
            continue
        if verify_password(raw_key, key.key_hash):
            return key
    return None


def get_current_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_db),
) -> ApiKey:
    """Clé API utilisée pour la requête"""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Non autorisé")

    key = find_api_key(db, credentials.credentials)
    if key is None:
        raise HTTPException(status_code=401, detail="Clé API invalide ou expirée")
    return key


def get_current_user(
    api_key: ApiKey = Depends(get_current_api_key),
    db: Session = Depends(get_db),
) -> User:
    """Authentifie l'utilisateur via API Key (Bearer token)"""
    user = db.get(User, api_key.user_id)
    if user and user.is_active:
        return user
    raise HTTPException(status_code=403, detail="Utilisateur désactivé")


def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """Exige que l'utilisateur authentifié soit administrateur"""
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Accès interdit")
    return current_user


def client_ip(request: Request) -> Optional[str]:
    """Adresse IP du client pour le journal d'audit"""
    return request.client.host if request.client else None
