"""
Service de gestion des utilisateurs et API Keys
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.config import settings
from app.models.jardin import Culture, Planche, Recolte
from app.models.user import ROLE_ADMIN, ApiKey, User
from app.services.account import purge_user_data
from app.services.audit import log_action
from app.utils import generate_key, hash_password, verify_password

logger = logging.getLogger(__name__)

SESSION_KEY_NAME = "session"

# ── Authentification


def authenticate_user(
    db: Session,
    *,
    email: str,
    password: str,
    ip_address: Optional[str] = None,
) -> tuple[User, ApiKey, str]:
    """Authentifie un utilisateur par email/mot de passe.
    Émet une nouvelle clé de session et retourne (User, ApiKey, clé en clair).
    """
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    if not user or not verify_password(password, user.password_hash):
        log_action(
            db,
            user_id=None,
            action="AUTH_FAILED",
            resource_type="user",
            resource_id=email,
            details={"reason": "invalid_credentials"},
            ip_address=ip_address,
        )
        # la trace doit survivre au rollback de la requete
        db.commit()
        logger.warning("Échec de connexion pour %s", email)
        raise HTTPException(status_code=401, detail="Identifiants invalides")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Utilisateur désactivé")

    # une cle par connexion, avec une duree de vie limitee
    raw_key, key_hash = generate_key()
    session_key = ApiKey(
        user_id=user.id,
        key_hash=key_hash,
        key_prefix=raw_key[:12],
        name=SESSION_KEY_NAME,
        expires_at=datetime.utcnow() + timedelta(hours=settings.GLEBA_SESSION_TTL_HOURS),
    )
    db.add(session_key)
    db.flush()

    log_action(
        db,
        user_id=user.id,
        action="LOGIN",
        resource_type="user",
        resource_id=str(user.id),
        details={"email": email},
        ip_address=ip_address,
    )
    return user, session_key, raw_key


def logout(
    db: Session,
    *,
    api_key: ApiKey,
    ip_address: Optional[str] = None,
) -> None:
    """Révoque la clé utilisée pour la requête"""
    api_key.is_active = False
    db.flush()

    log_action(
        db,
        user_id=api_key.user_id,
        action="LOGOUT",
        resource_type="api_key",
        resource_id=str(api_key.id),
        ip_address=ip_address,
    )


# ── Utilisateurs


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    name: Optional[str] = None,
    role: str = "USER",
    is_active: bool = True,
    actor_id: Optional[int] = None,
    ip_address: Optional[str] = None,
) -> User:
    """Crée un nouvel utilisateur"""
    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing:
        raise HTTPException(
            status_code=409, detail="Un utilisateur avec cet email existe déjà"
        )

    user = User(
        email=email,
        name=name,
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.flush()

    log_action(
        db,
        user_id=actor_id,
        action="CREATE",
        resource_type="user",
        resource_id=str(user.id),
        details={"email": email, "role": role},
        ip_address=ip_address,
    )
    return user


def ensure_admin(db: Session, *, email: str, password: str) -> tuple[User, bool]:
    """Crée l'administrateur s'il n'existe pas. Retourne (User, créé ?)."""
    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing:
        return existing, False
    user = create_user(db, email=email, password=password, role=ROLE_ADMIN)
    return user, True


def list_users(
    db: Session, *, offset: int = 0, limit: int = 50
) -> tuple[list[dict], int]:
    """Liste paginée des utilisateurs avec leurs volumes de données"""
    total = db.execute(select(func.count(User.id))).scalar_one()
    users = (
        db.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc())
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )

    def _count(model, user_id: int) -> int:
        return db.execute(
            select(func.count(model.id)).where(model.user_id == user_id)
        ).scalar_one()

    items = []
    for user in users:
        items.append(
            {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "role": user.role,
                "is_active": user.is_active,
                "created_at": user.created_at,
                "updated_at": user.updated_at,
                "nb_cultures": _count(Culture, user.id),
                "nb_planches": _count(Planche, user.id),
                "nb_recoltes": _count(Recolte, user.id),
            }
        )
    return items, total


def update_user(
    db: Session,
    *,
    user: User,
    name: Optional[str] = None,
    password: Optional[str] = None,
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
    actor_id: Optional[int] = None,
    ip_address: Optional[str] = None,
) -> User:
    """Met à jour un utilisateur"""
    changes = {}
    if name is not None:
        user.name = name
        changes["name"] = name
    if password is not None:
        user.password_hash = hash_password(password)
        changes["password"] = "***changed***"
    if role is not None:
        user.role = role
        changes["role"] = role
    if is_active is not None:
        user.is_active = is_active
        changes["is_active"] = is_active

    db.flush()

    log_action(
        db,
        user_id=actor_id,
        action="UPDATE",
        resource_type="user",
        resource_id=str(user.id),
        details=changes,
        ip_address=ip_address,
    )
    return user


def delete_user(
    db: Session,
    *,
    user: User,
    actor_id: Optional[int] = None,
    ip_address: Optional[str] = None,
) -> None:
    """Supprime un utilisateur et toutes ses données"""
    if actor_id is not None and user.id == actor_id:
        raise HTTPException(
            status_code=400, detail="Impossible de supprimer son propre compte"
        )

    user_id = user.id
    email = user.email
    purge_user_data(db, user_id=user_id)
    db.delete(user)
    db.flush()

    log_action(
        db,
        user_id=actor_id,
        action="DELETE",
        resource_type="user",
        resource_id=str(user_id),
        details={"email": email},
        ip_address=ip_address,
    )


# ── API keys


def generate_api_key(
    db: Session,
    *,
    user: User,
    name: str,
    expires_at: Optional[datetime] = None,
    ip_address: Optional[str] = None,
) -> tuple[ApiKey, str]:
    """Génère une API Key nommée. Retourne (ApiKey, clé en clair)."""
    raw_key, key_hash = generate_key()

    api_key = ApiKey(
        user_id=user.id,
        key_hash=key_hash,
        key_prefix=raw_key[:12],
        name=name,
        expires_at=expires_at,
    )
    db.add(api_key)
    db.flush()

    log_action(
        db,
        user_id=user.id,
        action="CREATE",
        resource_type="api_key",
        resource_id=str(api_key.id),
        details={"name": name, "expires_at": str(expires_at)},
        ip_address=ip_address,
    )
    return api_key, raw_key


def list_api_keys(db: Session, *, user: User) -> list[dict]:
    """Liste les API Keys d'un utilisateur, valeurs masquées"""
    keys = (
        db.execute(
            select(ApiKey)
            .where(ApiKey.user_id == user.id)
            .order_by(ApiKey.created_at.desc())
        )
        .scalars()
        .all()
    )
    result = []
    for key in keys:
        result.append(
            {
                "id": key.id,
                "key_value": "**************",  # seule la forme hachée est conservée
                "key_prefix": key.key_prefix,
                "name": key.name,
                "expires_at": key.expires_at,
                "is_active": key.is_active,
                "created_at": key.created_at,
            }
        )
    return result


def revoke_api_key(
    db: Session,
    *,
    user: User,
    key_id: int,
    ip_address: Optional[str] = None,
) -> None:
    """Révoque une API Key"""
    api_key = db.execute(
        select(ApiKey).where(ApiKey.id == key_id, ApiKey.user_id == user.id)
    ).scalar_one_or_none()
    if not api_key:
        raise HTTPException(status_code=404, detail="Clé API introuvable")

    api_key.is_active = False
    db.flush()

    log_action(
        db,
        user_id=user.id,
        action="DELETE",
        resource_type="api_key",
        resource_id=str(key_id),
        details={"name": api_key.name},
        ip_address=ip_address,
    )
